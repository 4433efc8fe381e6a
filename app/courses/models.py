from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional

class CourseSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_id: str = Field(alias="_id")
    title: str
    slug: str
    cardBody: Optional[str] = None
    imageUrl: Optional[str] = None
    # Unavailable courses are still listed; the UI shows them as "Not Available"
    isAvailable: bool = True

    @field_validator("course_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> str:
        return str(v)

class CourseDetail(CourseSummary):
    description: Optional[str] = None
