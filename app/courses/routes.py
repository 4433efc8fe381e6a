from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.deps import get_db
from app.courses import crud as courses_crud
from app.courses.models import CourseDetail, CourseSummary

from app.utils.response import success
from app.utils.errors import BadRequestError, NotFoundError
from app.utils.rate_limit import limiter, public_rate_limit

router = APIRouter(prefix="/public/courses", tags=["courses"])


@router.get("", summary="List active courses")
@limiter.limit(public_rate_limit)
async def list_courses(
    request: Request,
    db = Depends(get_db),
    status: Optional[str] = Query(None, description="available | coming-soon | all"),
):
    rows = await courses_crud.list_active_courses(db, status=status)
    return success([
        CourseSummary.model_validate(r).model_dump(by_alias=True) for r in rows
    ])


@router.get("/{slug}", summary="Get an active course by slug")
@limiter.limit(public_rate_limit)
async def get_course(
    request: Request,
    slug: str,
    db = Depends(get_db),
):
    if not slug.strip():
        raise BadRequestError("Slug is required")
    course = await courses_crud.get_active_course_by_slug(db, slug)
    if not course:
        raise NotFoundError("Course not found")
    return success(CourseDetail.model_validate(course).model_dump(by_alias=True))
