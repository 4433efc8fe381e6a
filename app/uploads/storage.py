# app/uploads/storage.py
# Filesystem side of /uploads: containment checks, stat, chunked reads.
import mimetypes
from dataclasses import dataclass
from email.utils import formatdate
from pathlib import Path
from typing import Iterator, Optional

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class AssetInfo:
    path: Path
    size: int
    mtime: float

    @property
    def media_type(self) -> str:
        guessed, _ = mimetypes.guess_type(self.path.name)
        return guessed or "application/octet-stream"

    @property
    def etag(self) -> str:
        return f'W/"{self.size:x}-{int(self.mtime * 1000):x}"'

    @property
    def last_modified(self) -> str:
        return formatdate(self.mtime, usegmt=True)


def safe_rel_under(base: Path, target: Path) -> Optional[Path]:
    """
    Return target's path relative to base if target is inside base, else None.
    Prevents path traversal (symlinks included, both sides are resolved).
    """
    try:
        return target.resolve().relative_to(base.resolve())
    except (ValueError, OSError):
        return None


def resolve_asset(root: Path, rel_path: str) -> Optional[Path]:
    """Map the part after /uploads to a path under root, or None if it may not be served."""
    if not rel_path or "\x00" in rel_path:
        return None
    parts = [p for p in rel_path.replace("\\", "/").split("/") if p]
    # ".." and dotfiles are never served
    if not parts or any(p.startswith(".") for p in parts):
        return None
    candidate = root.joinpath(*parts)
    if safe_rel_under(root, candidate) is None:
        return None
    return candidate.resolve()


def stat_asset(root: Path, rel_path: str) -> Optional[AssetInfo]:
    path = resolve_asset(root, rel_path)
    if path is None or not path.is_file():
        return None
    st = path.stat()
    return AssetInfo(path=path, size=st.st_size, mtime=st.st_mtime)


def iter_file(path: Path, start: int, length: int, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    # Sync generator; StreamingResponse drives it from the threadpool. If the
    # client goes away the generator is dropped and the file closes with it.
    remaining = length
    with open(path, "rb") as fh:
        fh.seek(start)
        while remaining > 0:
            chunk = fh.read(min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
