from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, func

from app.core.db import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)

    item_name = Column(Text, nullable=False)

    # owner
    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), nullable=False, index=True)

    post_date = Column(DateTime, server_default=func.now(), nullable=False)

    city = Column(Text, nullable=False)
    img_url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(Text, nullable=False)
    age_group = Column(Text, nullable=False)
