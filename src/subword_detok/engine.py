"""Decode engine contract and the sentencepiece-backed implementation."""

from __future__ import annotations

from typing import Any, List, Protocol, Sequence

import sentencepiece as spm
from pydantic import BaseModel, ConfigDict, Field

from subword_detok.errors import ConfigError, DecodeError
from subword_detok.logging import get_logger

logger = get_logger(__name__)

_ENGINE_ERRORS = (RuntimeError, OSError, IndexError, TypeError, ValueError)


class DecodedPiece(BaseModel):
    """One piece of a structured decode result.

    Attributes:
        piece: Vocabulary piece string.
        id: Vocabulary id of the piece.
        surface: Text the piece contributes to the detokenized output.
        begin: Byte offset of ``surface`` in ``DecodedRecord.text``.
        end: Byte offset one past the end of ``surface``.
    """

    model_config = ConfigDict(frozen=True)

    piece: str
    id: int
    surface: str = ""
    begin: int = 0
    end: int = 0


class DecodedRecord(BaseModel):
    """Structured decode result keeping piece boundaries and offsets."""

    model_config = ConfigDict(frozen=True)

    text: str
    score: float = 0.0
    pieces: List[DecodedPiece] = Field(default_factory=list)


class DecodeEngine(Protocol):
    """Operations the pipeline needs from a loaded vocabulary model."""

    def decode_pieces(self, pieces: Sequence[str]) -> str:
        """Decode pieces into text."""
        ...

    def decode_ids(self, ids: Sequence[int]) -> str:
        """Decode ids into text."""
        ...

    def decode_pieces_as_record(self, pieces: Sequence[str]) -> DecodedRecord:
        """Decode pieces into a structured record."""
        ...

    def decode_ids_as_record(self, ids: Sequence[int]) -> DecodedRecord:
        """Decode ids into a structured record."""
        ...


def record_from_proto(proto: Any) -> DecodedRecord:
    """Convert a sentencepiece ``ImmutableSentencePieceText`` into a record."""
    return DecodedRecord(
        text=proto.text,
        score=float(getattr(proto, "score", 0.0)),
        pieces=[
            DecodedPiece(
                piece=p.piece,
                id=p.id,
                surface=p.surface,
                begin=p.begin,
                end=p.end,
            )
            for p in proto.pieces
        ],
    )


def _preview(record: Sequence[Any], limit: int = 8) -> str:
    head = " ".join(str(item) for item in record[:limit])
    return head + (" ..." if len(record) > limit else "")


class SentencePieceEngine:
    """``DecodeEngine`` backed by ``sentencepiece.SentencePieceProcessor``."""

    def __init__(self, processor: Any):
        self.processor = processor

    @classmethod
    def load(cls, model: str, extra_options: str = "") -> SentencePieceEngine:
        """
        Load a model file and apply decode extra options.

        Args:
            model: Path to a sentencepiece ``.model`` file.
            extra_options: ':' separated options such as ``"reverse:bos:eos"``.

        Raises:
            ConfigError: If the path is empty, the model cannot be loaded, or
                the options are rejected.
        """
        if not model:
            raise ConfigError("--model must not be empty")
        processor = spm.SentencePieceProcessor()
        try:
            processor.Load(model)
        except _ENGINE_ERRORS as e:
            raise ConfigError(f"Failed to load model {model}: {e}") from e
        try:
            processor.SetDecodeExtraOptions(extra_options)
        except _ENGINE_ERRORS as e:
            raise ConfigError(f"Invalid extra options {extra_options!r}: {e}") from e
        logger.info(
            "Loaded model %s (vocab size %d, extra options %r)",
            model,
            processor.GetPieceSize(),
            extra_options,
        )
        return cls(processor)

    def _call(self, method: str, record: Sequence[Any]) -> Any:
        try:
            return getattr(self.processor, method)(list(record))
        except _ENGINE_ERRORS as e:
            raise DecodeError(f"Failed to decode [{_preview(record)}]: {e}") from e

    def decode_pieces(self, pieces: Sequence[str]) -> str:
        return self._call("DecodePieces", pieces)

    def decode_ids(self, ids: Sequence[int]) -> str:
        return self._call("DecodeIds", ids)

    def decode_pieces_as_record(self, pieces: Sequence[str]) -> DecodedRecord:
        return record_from_proto(self._call("DecodePiecesAsImmutableProto", pieces))

    def decode_ids_as_record(self, ids: Sequence[int]) -> DecodedRecord:
        return record_from_proto(self._call("DecodeIdsAsImmutableProto", ids))
