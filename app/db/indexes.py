from motor.motor_asyncio import AsyncIOMotorDatabase

async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    # Courses: unique public slug
    await db.courses.create_index("slug", unique=True, name="uniq_slug")

    # Courses: public listing filter + sort
    await db.courses.create_index(
        [("isActive", 1), ("sortOrder", 1), ("createdAt", -1)],
        name="active_sort_idx",
    )
