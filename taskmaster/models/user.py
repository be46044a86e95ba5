from sqlalchemy import CheckConstraint, Column, Integer, String
from taskmaster.core.database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('master', 'collaborator')", name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True)
    password = Column(String)  # stored verbatim, no hashing
    role = Column(String)  # master, collaborator
    name = Column(String)
