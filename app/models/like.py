from sqlalchemy import Column, Integer, String, ForeignKey

from app.core.db import Base


class Like(Base):
    """username likes post_id"""

    __tablename__ = "likes"

    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
