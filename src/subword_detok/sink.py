"""The single output destination of a run."""
from __future__ import annotations

import io
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from subword_detok.engine import DecodedRecord
from subword_detok.errors import SourceError
from subword_detok.logging import get_logger

logger = get_logger(__name__)


class OutputSink:
    """Line-oriented writer over one text handle."""

    def __init__(self, handle: TextIO, name: str = "<stdout>"):
        self.handle = handle
        self.name = name
        self.records_written = 0

    def write_line(self, text: str) -> None:
        self.handle.write(text)
        self.handle.write("\n")
        self.records_written += 1

    def write_record(self, record: DecodedRecord) -> None:
        """Write a structured record as one JSON object per line."""
        self.write_line(record.model_dump_json())


@contextmanager
def open_output_sink(destination: str = "") -> Iterator[OutputSink]:
    """
    Open the run's output sink; an empty destination means standard output.

    The file is closed on every exit path. Standard output is written as UTF-8
    through its binary buffer, flushed, and left open.

    Raises:
        SourceError: If the destination cannot be opened for writing.
    """
    if not destination:
        sys.stdout.flush()
        stream = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", newline="\n")
        try:
            yield OutputSink(stream)
        finally:
            stream.flush()
            stream.detach()
        return

    try:
        handle = open(destination, "w", encoding="utf-8", newline="\n")
    except OSError as e:
        raise SourceError(f"Cannot open output {destination}: {e}") from e
    with handle:
        yield OutputSink(handle, name=destination)
    logger.debug("Closed output %s", destination)
