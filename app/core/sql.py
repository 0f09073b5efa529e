# app/core/sql.py
from typing import Any, Dict, Mapping, Optional, Tuple

from app.core.errors import BadRequestError


def sql_for_partial_update(
    data: Mapping[str, Any],
    column_map: Optional[Mapping[str, str]] = None,
) -> Tuple[str, Dict[str, Any]]:
    """Build the SET clause of a partial UPDATE.

    ``data`` holds only the fields being changed; ``column_map`` renames
    fields whose column name differs (``{"password": "password_hash"}``).

        >>> sql_for_partial_update({"first_name": "Aliya", "age": 32})
        ('"first_name"=:first_name, "age"=:age', {'first_name': 'Aliya', 'age': 32})

    Values are returned as named bind parameters for ``sqlalchemy.text``.
    Raises BadRequestError when there is nothing to update.
    """
    if not data:
        raise BadRequestError("No data")

    column_map = column_map or {}
    cols = []
    params: Dict[str, Any] = {}
    for field, value in data.items():
        column = column_map.get(field, field)
        cols.append(f'"{column}"=:{column}')
        params[column] = value

    return ", ".join(cols), params
