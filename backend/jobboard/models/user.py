import enum
import secrets
import time

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobboard.database import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    COMPANY = "COMPANY"
    WORKER = "WORKER"


def generate_user_id() -> str:
    """Opaque user id whose lexical order follows creation order.

    Millisecond timestamp in fixed-width hex followed by random hex, so
    descending-id pagination lists newer users first.
    """
    return f"{int(time.time() * 1000):012x}{secrets.token_hex(6)}"


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_user_id)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(255), nullable=True)
    image_path = Column(String(1000), nullable=True)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.WORKER)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    jobs = relationship(
        "Job",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    applications = relationship(
        "Application",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
