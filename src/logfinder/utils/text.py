"""Line reading and decoding helpers for log content."""

from __future__ import annotations

import codecs
from typing import BinaryIO, Iterator

DEFAULT_BUFFER_SIZE = 4096


def iter_lines(stream: BinaryIO, *, buffer_size: int = DEFAULT_BUFFER_SIZE) -> Iterator[bytes]:
    """Yield the lines of a binary stream without their terminators.

    At most ``buffer_size`` bytes are requested per read. A line longer than
    the buffer is reassembled from consecutive reads, so memory stays at the
    buffer plus the line currently being built.
    """
    if buffer_size < 1:
        raise ValueError("buffer_size must be positive")

    pending = bytearray()
    while True:
        chunk = stream.read(buffer_size)
        if not chunk:
            break
        start = 0
        while True:
            end = chunk.find(b"\n", start)
            if end < 0:
                pending += chunk[start:]
                break
            pending += chunk[start:end]
            yield _strip_cr(pending)
            pending.clear()
            start = end + 1

    if pending:
        yield _strip_cr(pending)


def _strip_cr(line: bytearray) -> bytes:
    if line.endswith(b"\r"):
        return bytes(line[:-1])
    return bytes(line)


def decode_line(line: bytes) -> str:
    """Decode one line, honouring a leading UTF-16 byte-order mark.

    Lines without a UTF-16 BOM are read as UTF-8. Bytes that do not decode
    are kept as surrogate escapes instead of raising.
    """
    if line.startswith(codecs.BOM_UTF16_LE):
        encoding = "utf-16-le"
    elif line.startswith(codecs.BOM_UTF16_BE):
        encoding = "utf-16-be"
    else:
        return line.decode("utf-8", errors="surrogateescape")

    payload = line[2:]
    if len(payload) % 2:
        # a newline split leaves half of the final code unit behind
        payload = payload[:-1]
    try:
        return payload.decode(encoding)
    except UnicodeDecodeError:
        return line.decode("utf-8", errors="surrogateescape")
