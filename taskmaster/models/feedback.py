from sqlalchemy import Column, ForeignKey, Integer, String, Text
from taskmaster.core.database import Base


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"))
    content = Column(Text)
    date = Column(String)  # YYYY-MM-DD
