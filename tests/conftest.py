"""
Pytest configuration and shared fixtures for subword-detok tests.
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import Sequence

import pytest

from subword_detok.engine import DecodedPiece, DecodedRecord
from subword_detok.errors import DecodeError

SPACE_MARK = "▁"

# Small vocabulary standing in for a trained sentencepiece model.
TEST_VOCAB = {
    "<unk>": 0,
    "<s>": 1,
    "</s>": 2,
    f"{SPACE_MARK}Hello": 3,
    f"{SPACE_MARK}world": 4,
    "a": 5,
    "b": 6,
    "c": 7,
}


class FakeEngine:
    """In-memory ``DecodeEngine`` that records every call it receives."""

    def __init__(self, vocab: dict[str, int] | None = None):
        self.vocab = dict(vocab or TEST_VOCAB)
        self.id_to_piece = {v: k for k, v in self.vocab.items()}
        self.calls: list[tuple[str, list]] = []

    def _surfaces(self, pieces: Sequence[str]) -> list[str]:
        return [piece.replace(SPACE_MARK, " ") for piece in pieces]

    def _text(self, pieces: Sequence[str]) -> str:
        return "".join(self._surfaces(pieces)).lstrip(" ")

    def _pieces_for(self, ids: Sequence[int]) -> list[str]:
        try:
            return [self.id_to_piece[i] for i in ids]
        except KeyError as e:
            raise DecodeError(f"piece id is out of range: {e}") from e

    def _record(self, pieces: Sequence[str]) -> DecodedRecord:
        out: list[DecodedPiece] = []
        offset = 0
        for piece, surface in zip(pieces, self._surfaces(pieces)):
            size = len(surface.encode("utf-8"))
            out.append(
                DecodedPiece(
                    piece=piece,
                    id=self.vocab.get(piece, 0),
                    surface=surface,
                    begin=offset,
                    end=offset + size,
                )
            )
            offset += size
        return DecodedRecord(text=self._text(pieces), pieces=out)

    def decode_pieces(self, pieces: Sequence[str]) -> str:
        self.calls.append(("decode_pieces", list(pieces)))
        return self._text(pieces)

    def decode_ids(self, ids: Sequence[int]) -> str:
        self.calls.append(("decode_ids", list(ids)))
        return self._text(self._pieces_for(ids))

    def decode_pieces_as_record(self, pieces: Sequence[str]) -> DecodedRecord:
        self.calls.append(("decode_pieces_as_record", list(pieces)))
        return self._record(pieces)

    def decode_ids_as_record(self, ids: Sequence[int]) -> DecodedRecord:
        self.calls.append(("decode_ids_as_record", list(ids)))
        return self._record(self._pieces_for(ids))


class FakeEngineLoader:
    """Stands in for ``SentencePieceEngine.load`` and remembers its arguments."""

    def __init__(self, engine: FakeEngine):
        self.engine = engine
        self.loads: list[tuple[str, str]] = []

    def __call__(self, model: str, extra_options: str = "") -> FakeEngine:
        self.loads.append((model, extra_options))
        return self.engine


def write_ids(path: Path, ids: Sequence[int], trailing: bytes = b"") -> Path:
    path.write_bytes(struct.pack(f"<{len(ids)}H", *ids) + trailing)
    return path


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def engine_loader(fake_engine: FakeEngine) -> FakeEngineLoader:
    return FakeEngineLoader(fake_engine)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Returns a temporary directory for test input and output."""
    return tmp_path


@pytest.fixture
def model_file(temp_dir: Path) -> Path:
    """A placeholder model path; the fake loader never reads it."""
    path = temp_dir / "test.model"
    path.write_bytes(b"")
    return path
