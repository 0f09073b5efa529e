from sqlalchemy import Column, Integer, String, ForeignKey

from app.core.db import Base


class Invite(Base):
    """username was invited about post_id"""

    __tablename__ = "invites"

    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
