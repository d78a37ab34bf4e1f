from pydantic import BaseModel, Field


class ApplicationCreate(BaseModel):
    job_id: int | str = Field(alias="jobId")
    cover_letter: str = Field(alias="coverLetter")

    class Config:
        populate_by_name = True


class ApplicationUpdate(BaseModel):
    cover_letter: str | None = Field(None, alias="coverLetter")

    class Config:
        populate_by_name = True
