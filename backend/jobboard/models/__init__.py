from jobboard.models.user import User, Role
from jobboard.models.job import Job
from jobboard.models.application import Application

__all__ = ["User", "Role", "Job", "Application"]
