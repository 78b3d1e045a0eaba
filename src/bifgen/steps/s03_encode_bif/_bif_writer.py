"""BIF writer: header, offset index and concatenated JPEG payloads.

Layout (all integers little-endian):

    0   8   magic  "BIF\\0\\0\\0\\0\\0"
    8   4   version (1)
    12  4   frame count
    16  4   interval in milliseconds
    20  4   thumbnail width
    24  4   thumbnail height
    28  36  reserved, zero
    64  8 * (count + 1)   absolute offsets; the last one is the file size
    ... JPEG payloads in index order

An absent frame has no payload, so its offset equals the next one.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import BinaryIO, Sequence, Union

from bifgen.core.contracts import Frame
from bifgen.core.exceptions import EmptyInput

logger = logging.getLogger(__name__)

BIF_MAGIC = b"BIF\x00\x00\x00\x00\x00"
BIF_VERSION = 1
HEADER_SIZE = 64
RESERVED_SIZE = 36
OFFSET_SIZE = 8

_HEADER_FIELDS = struct.Struct("<5I")

FrameLike = Union[Frame, bytes, None]


def _payload(frame: FrameLike) -> bytes:
    if isinstance(frame, Frame):
        return frame.data or b""
    return frame or b""


def pack_header(frame_count: int, interval_ms: int, width: int, height: int) -> bytes:
    return (
        BIF_MAGIC
        + _HEADER_FIELDS.pack(BIF_VERSION, frame_count, interval_ms, width, height)
        + bytes(RESERVED_SIZE)
    )


def compute_offsets(sizes: Sequence[int]) -> list[int]:
    """Absolute payload offsets for frames of the given byte sizes, plus the end sentinel."""
    index_size = (len(sizes) + 1) * OFFSET_SIZE
    cur = HEADER_SIZE + index_size
    offsets = []
    for size in sizes:
        offsets.append(cur)
        cur += size
    offsets.append(cur)
    return offsets


def encode_bif(
    frames: Sequence[FrameLike],
    destination: BinaryIO,
    interval: float,
    width: int,
    height: int,
) -> int:
    """Write a complete BIF document to ``destination``.

    Offsets are computed from the payload sizes before anything is written,
    so the sink only needs ``write()``. Returns the number of bytes written.

    Raises:
        EmptyInput: ``frames`` is empty.
    """
    frame_count = len(frames)
    if frame_count == 0:
        raise EmptyInput("No frames to write")

    payloads = [_payload(f) for f in frames]
    offsets = compute_offsets([len(p) for p in payloads])
    interval_ms = int(round(interval * 1000))

    destination.write(pack_header(frame_count, interval_ms, width, height))
    destination.write(struct.pack(f"<{len(offsets)}Q", *offsets))
    for payload in payloads:
        if payload:
            destination.write(payload)

    absent = sum(1 for p in payloads if not p)
    logger.debug(f"BIF: {frame_count} frames ({absent} absent), {offsets[-1]} bytes")
    return offsets[-1]


def write_bif_file(
    frames: Sequence[FrameLike],
    output_path: Path,
    interval: float,
    width: int,
    height: int,
) -> Path:
    """Create or overwrite ``output_path`` with a BIF document.

    A write failure leaves whatever was already written on disk.
    """
    if len(frames) == 0:
        raise EmptyInput("No frames to write")
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wb") as f:
        size = encode_bif(frames, f, interval, width, height)
    logger.info(f"Wrote {output_path} ({size} bytes, {len(frames)} frames)")
    return output_path
