"""Detokenize subword pieces, decimal ids or packed binary ids back into text."""

from subword_detok.config import DecodeConfig
from subword_detok.engine import DecodedPiece, DecodedRecord, DecodeEngine, SentencePieceEngine
from subword_detok.errors import ConfigError, DecodeError, DetokError, SourceError
from subword_detok.modes import DecodeMode, select_mode
from subword_detok.pipeline import DecodePipeline, run_decode

__all__ = [
    "ConfigError",
    "DecodeConfig",
    "DecodeEngine",
    "DecodeError",
    "DecodeMode",
    "DecodePipeline",
    "DecodedPiece",
    "DecodedRecord",
    "DetokError",
    "SentencePieceEngine",
    "SourceError",
    "run_decode",
    "select_mode",
]
