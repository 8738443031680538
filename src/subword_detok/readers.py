"""Record readers: line splitting, decimal id parsing and packed uint16 id files."""
from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Sequence

import numpy as np

from subword_detok.errors import DecodeError
from subword_detok.logging import get_logger

logger = get_logger(__name__)

PIECE_SEPARATOR = " "
ID_DTYPE = np.dtype("<u2")

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


def split_line(line: str) -> list[str]:
    """Split on single spaces; consecutive spaces yield empty tokens."""
    return line.split(PIECE_SEPARATOR)


def parse_id(token: str, strict: bool = False) -> int:
    """
    Parse a decimal id the way C ``atoi`` does.

    Leading whitespace and a sign are accepted, trailing garbage is ignored and
    a token with no leading digits becomes 0. With ``strict`` the whole token
    must be a decimal integer.
    """
    if strict:
        if _DECIMAL_INT.fullmatch(token) is None:
            raise DecodeError(f"Invalid id token: {token!r}")
        return int(token)
    match = _LEADING_INT.match(token)
    if match is None:
        return 0
    return int(match.group(1))


def pieces_to_ids(pieces: Sequence[str], strict: bool = False) -> list[int]:
    return [parse_id(piece, strict=strict) for piece in pieces]


def decode_id_buffer(data: bytes) -> list[int]:
    """Unpack little-endian uint16 values; a trailing odd byte is dropped."""
    usable = len(data) - len(data) % ID_DTYPE.itemsize
    return np.frombuffer(data[:usable], dtype=ID_DTYPE).astype(np.int64).tolist()


def read_binary_ids(filename: str | Path) -> list[int]:
    """
    Read a whole file of packed little-endian uint16 ids.

    An unreadable file is reported and yields an empty list; an empty filename
    reads binary standard input.
    """
    if filename == "":
        return decode_id_buffer(sys.stdin.buffer.read())
    try:
        with open(filename, "rb") as handle:
            data = handle.read()
    except OSError as e:
        logger.error("Unable to open the file: %s (%s)", filename, e)
        return []
    ids = decode_id_buffer(data)
    if len(data) % ID_DTYPE.itemsize:
        logger.debug("Dropped trailing odd byte of %s", filename)
    logger.debug("Read %d ids from %s", len(ids), filename)
    return ids
