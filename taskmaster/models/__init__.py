# Importing the models registers their tables on Base.metadata
from .user import User
from .task import Task
from .time_log import TimeLog
from .feedback import Feedback

__all__ = ["User", "Task", "TimeLog", "Feedback"]
