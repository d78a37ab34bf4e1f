from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    email: str
    name: str | None = None
    username: str | None = None
    image_path: str | None = Field(None, alias="imagePath")
    role: str | None = None

    class Config:
        populate_by_name = True


class ProfileUpdate(BaseModel):
    """Self-service update of the caller's own record. The email is fixed."""
    name: str | None = None
    username: str | None = None
    image_path: str | None = Field(None, alias="imagePath")
    role: str | None = None

    class Config:
        populate_by_name = True


class UserUpdate(ProfileUpdate):
    """Administrative update of any user, email included."""
    email: str | None = None
