"""Versioned binary encoding for leg paths.

Layout (big-endian)::

    u8   version
    i32  count            -1 when the path is absent, 0 for an empty path
    i32  lat_1e6, i32 lon_1e6   repeated count times
"""

import struct
from collections.abc import Sequence

from transit_trips.domain.models.location import Point

PATH_ENCODING_VERSION = 1
ABSENT_PATH_COUNT = -1

_HEADER = struct.Struct(">Bi")
_POINT = struct.Struct(">ii")


def encode_path(path: Sequence[Point] | None) -> bytes:
    """Encode a path, keeping "absent" distinct from "empty"."""
    if path is None:
        return _HEADER.pack(PATH_ENCODING_VERSION, ABSENT_PATH_COUNT)

    out = bytearray(_HEADER.pack(PATH_ENCODING_VERSION, len(path)))
    for point in path:
        out += _POINT.pack(point.lat_1e6, point.lon_1e6)
    return bytes(out)


def decode_path(data: bytes) -> tuple[Point, ...] | None:
    """Decode bytes produced by encode_path.

    Raises:
        ValueError: On an unknown version, a negative count other than the
            absent marker, or a length that doesn't match the count.
    """
    if len(data) < _HEADER.size:
        raise ValueError(f"path data too short: {len(data)} bytes")

    version, count = _HEADER.unpack_from(data)
    if version != PATH_ENCODING_VERSION:
        raise ValueError(f"unsupported path encoding version: {version}")
    if count == ABSENT_PATH_COUNT:
        if len(data) != _HEADER.size:
            raise ValueError("trailing bytes after absent path marker")
        return None
    if count < 0:
        raise ValueError(f"invalid path point count: {count}")

    expected = _HEADER.size + count * _POINT.size
    if len(data) != expected:
        raise ValueError(f"path data length {len(data)} does not match {count} points")

    return tuple(
        Point.from_1e6(*_POINT.unpack_from(data, _HEADER.size + i * _POINT.size))
        for i in range(count)
    )
