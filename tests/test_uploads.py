"""Range-aware /uploads server."""

from __future__ import annotations

import builtins
import os

import pytest

from app.uploads.ranges import ByteRange, RangeNotSatisfiable, parse_range
from app.uploads.storage import iter_file, resolve_asset, stat_asset

PARTNER_ORIGIN = "https://partner.example.com"
VIDEO_BYTES = bytes(range(256)) * 4
N = len(VIDEO_BYTES)


# ---- parse_range ----

@pytest.mark.parametrize(
    "header, expected",
    [
        ("bytes=0-99", ByteRange(0, 99)),
        ("bytes=100-", ByteRange(100, N - 1)),
        ("bytes=-24", ByteRange(N - 24, N - 1)),
        ("bytes=-5000", ByteRange(0, N - 1)),
        ("bytes=1000-5000", ByteRange(1000, N - 1)),
        ("BYTES = 5-5", ByteRange(5, 5)),
    ],
)
def test_parse_valid_ranges(header, expected):
    assert parse_range(header, N) == expected


@pytest.mark.parametrize(
    "header",
    [
        "bytes=abc",
        "bytes=-",
        "bytes=5-1",
        f"bytes={N}-{N + 100}",
        "bytes=-0",
        "bytes=0-1,5-9",
        "items=0-9",
        "0-9",
    ],
)
def test_parse_invalid_ranges(header):
    with pytest.raises(RangeNotSatisfiable):
        parse_range(header, N)


def test_parse_no_header():
    assert parse_range(None, N) is None


def test_any_range_on_empty_file_is_unsatisfiable():
    with pytest.raises(RangeNotSatisfiable):
        parse_range("bytes=0-", 0)


def test_content_range_formatting():
    assert ByteRange(0, 99).content_range(N) == f"bytes 0-99/{N}"
    assert ByteRange(0, 99).length == 100


# ---- storage ----

def test_resolve_asset_stays_inside_root(upload_root):
    assert resolve_asset(upload_root, "videos/intro.mp4") == (upload_root / "videos" / "intro.mp4").resolve()
    assert resolve_asset(upload_root, "../outside.txt") is None
    assert resolve_asset(upload_root, "videos/../../outside.txt") is None
    assert resolve_asset(upload_root, ".env") is None
    assert resolve_asset(upload_root, "") is None
    assert resolve_asset(upload_root, "bad\x00name") is None


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_resolve_asset_rejects_symlink_escape(upload_root):
    link = upload_root / "escape.txt"
    try:
        link.symlink_to(upload_root.parent / "outside.txt")
    except OSError:
        pytest.skip("cannot create symlinks here")
    assert resolve_asset(upload_root, "escape.txt") is None


def test_stat_asset_ignores_directories(upload_root):
    assert stat_asset(upload_root, "videos") is None
    info = stat_asset(upload_root, "videos/intro.mp4")
    assert info.size == N
    assert info.media_type == "video/mp4"


def test_iter_file_reads_exact_slice(upload_root):
    path = upload_root / "videos" / "intro.mp4"
    data = b"".join(iter_file(path, 10, 300, chunk_size=64))
    assert data == VIDEO_BYTES[10:310]


def test_closing_stream_midway_closes_file(upload_root, monkeypatch):
    handles = []
    real_open = builtins.open

    def tracking_open(*args, **kwargs):
        fh = real_open(*args, **kwargs)
        handles.append(fh)
        return fh

    monkeypatch.setattr(builtins, "open", tracking_open)
    gen = iter_file(upload_root / "videos" / "intro.mp4", 0, N, chunk_size=64)
    first = next(gen)
    monkeypatch.undo()

    assert first == VIDEO_BYTES[:64]
    assert len(handles) == 1 and not handles[0].closed

    # What StreamingResponse leaves behind when the client disconnects
    gen.close()

    assert handles[0].closed
    with pytest.raises(StopIteration):
        next(gen)


# ---- HTTP ----

def test_full_file(client):
    response = client.get("/uploads/videos/intro.mp4")
    assert response.status_code == 200
    assert response.content == VIDEO_BYTES
    assert response.headers["content-length"] == str(N)
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["cache-control"] == "public, max-age=3600"
    assert response.headers["content-type"] == "video/mp4"
    assert "etag" in response.headers
    assert "last-modified" in response.headers


def test_partial_content(client):
    response = client.get("/uploads/videos/intro.mp4", headers={"Range": "bytes=0-99"})
    assert response.status_code == 206
    assert response.headers["content-range"] == f"bytes 0-99/{N}"
    assert response.headers["content-length"] == "100"
    assert response.content == VIDEO_BYTES[:100]
    assert response.headers["accept-ranges"] == "bytes"


def test_open_ended_range(client):
    response = client.get("/uploads/videos/intro.mp4", headers={"Range": "bytes=1000-"})
    assert response.status_code == 206
    assert response.headers["content-range"] == f"bytes 1000-{N - 1}/{N}"
    assert response.content == VIDEO_BYTES[1000:]


def test_range_past_end_is_416(client):
    response = client.get("/uploads/videos/intro.mp4", headers={"Range": f"bytes={N}-{N + 100}"})
    assert response.status_code == 416
    assert response.headers["content-range"] == f"bytes */{N}"
    assert response.headers["accept-ranges"] == "bytes"


def test_malformed_range_is_416_not_full_body(client):
    response = client.get("/uploads/videos/intro.mp4", headers={"Range": "bytes=oops"})
    assert response.status_code == 416
    assert response.headers["content-range"] == f"bytes */{N}"


def test_head_returns_headers_only(client):
    response = client.head("/uploads/videos/intro.mp4")
    assert response.status_code == 200
    assert response.headers["content-length"] == str(N)
    assert response.content == b""


def test_conditional_get_returns_304(client):
    etag = client.get("/uploads/notes.txt").headers["etag"]
    response = client.get("/uploads/notes.txt", headers={"If-None-Match": etag})
    assert response.status_code == 304
    assert response.content == b""


def test_missing_file_is_404_from_asset_server(client):
    response = client.get("/uploads/videos/missing.mp4")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "File not found"}
    assert response.headers["accept-ranges"] == "bytes"


@pytest.mark.parametrize(
    "path",
    [
        "/uploads/%2e%2e/%2e%2e/etc/passwd",
        "/uploads/%2e%2e/outside.txt",
        "/uploads/.env",
        "/uploads/videos",
    ],
)
def test_unservable_paths_are_404(client, upload_root, path):
    response = client.get(path)
    assert response.status_code == 404
    assert "not for you" not in response.text
    assert "SECRET" not in response.text
    assert str(upload_root) not in response.text


def test_options_on_uploads(client):
    response = client.options("/uploads/videos/intro.mp4", headers={"Origin": PARTNER_ORIGIN})
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-methods"] == "GET,HEAD,OPTIONS"
    assert response.headers["access-control-allow-origin"] == PARTNER_ORIGIN


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
def test_other_methods_are_405_with_asset_headers(client, method):
    response = client.request(method, "/uploads/videos/intro.mp4", headers={"Origin": PARTNER_ORIGIN})
    assert response.status_code == 405
    assert response.json() == {"success": False, "error": "Method not allowed"}
    assert response.headers["allow"] == "GET, HEAD, OPTIONS"
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["cache-control"] == "public, max-age=3600"
    assert response.headers["access-control-allow-origin"] == PARTNER_ORIGIN


def test_allowed_origin_echoed_on_assets(client):
    response = client.get("/uploads/notes.txt", headers={"Origin": PARTNER_ORIGIN})
    assert response.headers["access-control-allow-origin"] == PARTNER_ORIGIN
    assert response.headers["access-control-allow-credentials"] == "true"
    assert "Content-Range" in response.headers["access-control-expose-headers"]


def test_asset_origin_header_never_defaulted(client):
    no_origin = client.get("/uploads/notes.txt")
    assert no_origin.status_code == 200
    assert "access-control-allow-origin" not in no_origin.headers

    # The asset path runs its own header pass instead of the API deny
    unknown = client.get("/uploads/notes.txt", headers={"Origin": "https://evil.example"})
    assert unknown.status_code == 200
    assert "access-control-allow-origin" not in unknown.headers
