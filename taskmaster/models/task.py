from sqlalchemy import Column, ForeignKey, Integer, String, Text
from taskmaster.core.database import Base


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String)
    description = Column(Text)
    assigned_to = Column(Integer, ForeignKey("users.id"))
    status = Column(String, server_default="pending")  # pending, completed, failed
    failure_reason = Column(Text, nullable=True)
    due_date = Column(String)  # YYYY-MM-DD
