from jobboard.schemas.user import UserCreate, ProfileUpdate, UserUpdate
from jobboard.schemas.job import JobCreate, JobUpdate
from jobboard.schemas.application import ApplicationCreate, ApplicationUpdate

__all__ = [
    "UserCreate",
    "ProfileUpdate",
    "UserUpdate",
    "JobCreate",
    "JobUpdate",
    "ApplicationCreate",
    "ApplicationUpdate",
]
