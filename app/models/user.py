from sqlalchemy import Column, String, Boolean, Text, text

from app.core.db import Base


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)

    # argon2 hash, never returned by the api
    password_hash = Column(Text, nullable=False)

    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=text("false"))
