from fastapi import APIRouter

from app.courses.routes import router as courses_router

# Everything business-facing lives under /api
api_router = APIRouter(prefix="/api")
api_router.include_router(courses_router)   # /api/public/courses, /api/public/courses/{slug}
