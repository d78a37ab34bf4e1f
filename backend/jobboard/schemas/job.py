from pydantic import BaseModel


class JobCreate(BaseModel):
    title: str
    description: str
    salary: str
    location: str
    published: bool | str | None = None


class JobUpdate(BaseModel):
    """Fields left out of the body are not modified."""
    title: str | None = None
    description: str | None = None
    salary: str | None = None
    location: str | None = None
    published: bool | str | None = None
