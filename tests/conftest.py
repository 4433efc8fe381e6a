"""Shared fixtures: temp upload root, settings override, in-memory course store."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.deps import get_db
from app.main import create_app

PARTNER_ORIGIN = "https://partner.example.com"
VIDEO_BYTES = bytes(range(256)) * 4  # 1024 bytes


class FakeCursor:
    def __init__(self, docs, projection):
        self._docs = list(docs)
        self._projection = projection

    def sort(self, keys):
        # Stable sorts applied last-key-first give a compound ordering
        for key, direction in reversed(keys):
            self._docs.sort(key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return [_project(d, self._projection) for d in self._docs]


class FakeCollection:
    """Just enough of a motor collection for the course queries."""

    def __init__(self, docs):
        self.docs = docs
        self.queries = []

    def find(self, query, projection=None):
        self.queries.append(query)
        return FakeCursor([d for d in self.docs if _matches(d, query)], projection)

    async def find_one(self, query, projection=None):
        self.queries.append(query)
        for d in self.docs:
            if _matches(d, query):
                return _project(d, projection)
        return None


class FakeDB:
    def __init__(self, courses):
        self.courses = FakeCollection(courses)


def _matches(doc, query):
    return all(doc.get(k) == v for k, v in query.items())


def _project(doc, projection):
    if not projection:
        return dict(doc)
    out = {"_id": doc["_id"]}
    out.update({k: doc[k] for k in projection if k in doc})
    return out


def _course(cid, slug, sort_order, day, available=True, active=True):
    return {
        "_id": cid,
        "title": slug.replace("-", " ").title(),
        "slug": slug,
        "cardBody": f"About {slug}",
        "description": f"Long description of {slug}",
        "imageUrl": f"/uploads/{slug}.jpg",
        "isAvailable": available,
        "isActive": active,
        "sortOrder": sort_order,
        "createdAt": datetime(2024, 1, day, tzinfo=timezone.utc),
    }


@pytest.fixture
def upload_root(tmp_path):
    root = tmp_path / "uploads"
    (root / "videos").mkdir(parents=True)
    (root / "videos" / "intro.mp4").write_bytes(VIDEO_BYTES)
    (root / "notes.txt").write_text("hello uploads")
    (root / ".env").write_text("SECRET=1")
    (tmp_path / "outside.txt").write_text("not for you")
    return root


@pytest.fixture
def make_settings(upload_root):
    def _make(**overrides) -> Settings:
        values = {
            "APP_ENV": "development",
            "UPLOAD_DIR": str(upload_root),
            "CORS_ORIGIN": f" {PARTNER_ORIGIN}/ ",
            "PUBLIC_BASE_URL": None,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings):
    def _make(**overrides) -> TestClient:
        return TestClient(create_app(make_settings(**overrides)))

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def courses():
    return [
        _course("c1", "web-design", sort_order=2, day=1),
        _course("c2", "python-basics", sort_order=1, day=1),
        _course("c3", "data-science", sort_order=1, day=5, available=False),
        _course("c4", "retired-course", sort_order=0, day=9, active=False),
    ]


@pytest.fixture
def fake_db(courses):
    return FakeDB(courses)


@pytest.fixture
def api_client(make_settings, fake_db):
    app = create_app(make_settings())
    app.dependency_overrides[get_db] = lambda: fake_db
    return TestClient(app)
