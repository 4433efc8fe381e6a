import re
from dataclasses import dataclass
from typing import Optional

_SPEC_RE = re.compile(r"^(\d*)-(\d*)$")


class RangeNotSatisfiable(Exception):
    """Malformed or out-of-bounds Range header; answer 416."""


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int  # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total: int) -> str:
        return f"bytes {self.start}-{self.end}/{total}"


def unsatisfied_range(total: int) -> str:
    return f"bytes */{total}"


def parse_range(header: Optional[str], size: int) -> Optional[ByteRange]:
    """
    Parse a single-range ``Range`` header against a resource of ``size`` bytes.

    Returns None when there is no header. Accepts ``bytes=a-b``, ``bytes=a-``
    and the suffix form ``bytes=-n``; an end past EOF is clamped. Anything else
    (other units, several ranges, start past EOF, start after end) raises
    RangeNotSatisfiable.
    """
    if header is None:
        return None

    unit, sep, spec = header.strip().partition("=")
    if not sep or unit.strip().lower() != "bytes":
        raise RangeNotSatisfiable(header)

    spec = spec.strip()
    if "," in spec:
        raise RangeNotSatisfiable(header)

    m = _SPEC_RE.match(spec)
    if not m or (not m.group(1) and not m.group(2)):
        raise RangeNotSatisfiable(header)
    first, last = m.group(1), m.group(2)

    if not first:
        suffix = int(last)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiable(header)
        return ByteRange(max(size - suffix, 0), size - 1)

    start = int(first)
    end = int(last) if last else size - 1
    if start >= size or end < start:
        raise RangeNotSatisfiable(header)
    return ByteRange(start, min(end, size - 1))
