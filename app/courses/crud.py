from typing import Optional, Dict, Any, List

SUMMARY_FIELDS = {"title": 1, "slug": 1, "cardBody": 1, "imageUrl": 1, "isAvailable": 1}
DETAIL_FIELDS = {**SUMMARY_FIELDS, "description": 1}

# sortOrder asc, then newest first
COURSE_SORT = [("sortOrder", 1), ("createdAt", -1)]


def active_course_query(status: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"isActive": True}
    if status == "available":
        query["isAvailable"] = True
    elif status == "coming-soon":
        query["isAvailable"] = False
    return query


async def list_active_courses(db, status: Optional[str] = None) -> List[Dict[str, Any]]:
    cursor = db.courses.find(active_course_query(status), SUMMARY_FIELDS).sort(COURSE_SORT)
    return await cursor.to_list(length=None)


async def get_active_course_by_slug(db, slug: str) -> Optional[Dict[str, Any]]:
    return await db.courses.find_one(
        {"slug": slug.strip().lower(), "isActive": True},
        DETAIL_FIELDS,
    )
