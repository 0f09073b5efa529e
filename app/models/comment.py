from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, func

from app.core.db import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    comment_date = Column(DateTime, server_default=func.now(), nullable=False)
