from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints

from .base import BaseSchema, InputSchema

# passwords are taken as typed, surrounding spaces included
Password = Annotated[str, StringConstraints(strip_whitespace=False)]


class TokenIn(InputSchema):
    username: str = Field(..., min_length=1, max_length=25)
    password: Password = Field(..., min_length=1)


class RegisterIn(InputSchema):
    username: str = Field(..., min_length=1, max_length=25)
    password: Password = Field(..., min_length=5, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class TokenOut(BaseSchema):
    token: str
