"""Selection of the single decode mode used for a whole run."""
from __future__ import annotations

from enum import Enum

from subword_detok.errors import ConfigError

INPUT_FORMATS = ("piece", "id", "map")
OUTPUT_FORMATS = ("string", "proto")


class DecodeMode(Enum):
    """Every valid (input format, output format) pair."""

    PIECE_TO_STRING = ("piece", "string")
    PIECE_TO_PROTO = ("piece", "proto")
    ID_TO_STRING = ("id", "string")
    ID_TO_PROTO = ("id", "proto")
    MAP_TO_STRING = ("map", "string")
    MAP_TO_PROTO = ("map", "proto")

    @property
    def input_format(self) -> str:
        return self.value[0]

    @property
    def output_format(self) -> str:
        return self.value[1]

    @property
    def reads_lines(self) -> bool:
        """True when each input line is one record; ``map`` reads whole files."""
        return self.input_format != "map"


def select_mode(input_format: str, output_format: str) -> DecodeMode:
    """
    Resolve format names to a decode mode.

    Raises:
        ConfigError: For an unknown input format (checked first) or an unknown
            output format.
    """
    if input_format not in INPUT_FORMATS:
        raise ConfigError(f"Unknown input format: {input_format}")
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format: {output_format}")
    return DecodeMode((input_format, output_format))
