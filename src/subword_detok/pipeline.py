"""Streaming decode driver: sources in, one decoded record per unit out."""
from __future__ import annotations

import io
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Sequence, TextIO

from subword_detok.config import DecodeConfig
from subword_detok.engine import DecodeEngine, SentencePieceEngine
from subword_detok.errors import ConfigError, SourceError
from subword_detok.logging import get_logger
from subword_detok.modes import DecodeMode, select_mode
from subword_detok.readers import pieces_to_ids, read_binary_ids, split_line
from subword_detok.sink import OutputSink, open_output_sink

logger = get_logger(__name__)

EngineLoader = Callable[[str, str], DecodeEngine]


@contextmanager
def open_text_source(source: str) -> Iterator[TextIO]:
    """
    Open one line-oriented UTF-8 source; an empty name means standard input.

    Only a newline ends a line; a carriage return stays part of the line text.
    """
    if not source:
        stream = io.TextIOWrapper(sys.stdin.buffer, encoding="utf-8", newline="\n")
        try:
            yield stream
        finally:
            stream.detach()
        return
    try:
        handle = open(source, encoding="utf-8", newline="\n")
    except OSError as e:
        raise SourceError(f"Cannot open input {source}: {e}") from e
    with handle:
        yield handle


class DecodePipeline:
    """
    Feeds records through one fixed decode mode into one sink.

    Text formats produce one record per line, ``map`` one record per file.
    """

    def __init__(
        self,
        engine: DecodeEngine,
        sink: OutputSink,
        mode: DecodeMode,
        strict_ids: bool = False,
    ):
        self.engine = engine
        self.sink = sink
        self.mode = mode
        self.strict_ids = strict_ids

    def process(self, record: Sequence[str] | Sequence[int]) -> None:
        """Decode one record and write the result."""
        match self.mode:
            case DecodeMode.PIECE_TO_STRING:
                self.sink.write_line(self.engine.decode_pieces(record))
            case DecodeMode.PIECE_TO_PROTO:
                self.sink.write_record(self.engine.decode_pieces_as_record(record))
            case DecodeMode.ID_TO_STRING:
                ids = pieces_to_ids(record, strict=self.strict_ids)
                self.sink.write_line(self.engine.decode_ids(ids))
            case DecodeMode.ID_TO_PROTO:
                ids = pieces_to_ids(record, strict=self.strict_ids)
                self.sink.write_record(self.engine.decode_ids_as_record(ids))
            case DecodeMode.MAP_TO_STRING:
                self.sink.write_line(self.engine.decode_ids(record))
            case DecodeMode.MAP_TO_PROTO:
                self.sink.write_record(self.engine.decode_ids_as_record(record))

    def run_source(self, source: str) -> int:
        """Process every record of one source and return the record count."""
        name = source or "<stdin>"
        if not self.mode.reads_lines:
            self.process(read_binary_ids(source))
            logger.debug("Decoded %s as one id record", name)
            return 1

        count = 0
        with open_text_source(source) as handle:
            try:
                for line in handle:
                    self.process(split_line(line.rstrip("\n")))
                    count += 1
            except UnicodeDecodeError as e:
                raise SourceError(f"Invalid UTF-8 in {name} after line {count}: {e}") from e
        logger.debug("Decoded %d lines from %s", count, name)
        return count

    def run(self, sources: Sequence[str]) -> int:
        """Process sources strictly in order; returns the total record count."""
        return sum(self.run_source(source) for source in sources)


def run_decode(
    config: DecodeConfig,
    engine_loader: EngineLoader = SentencePieceEngine.load,
) -> int:
    """
    Run a whole decode job described by ``config``.

    The mode is selected and the model loaded before the sink is opened, so a
    configuration error leaves no output behind.

    Returns:
        Number of records processed.
    """
    if not config.model:
        raise ConfigError("--model must not be empty")
    mode = select_mode(config.input_format, config.output_format)
    engine = engine_loader(config.model, config.extra_options)
    sources = config.input_sources()

    with open_output_sink(config.output) as sink:
        pipeline = DecodePipeline(engine, sink, mode, strict_ids=config.strict_ids)
        total = pipeline.run(sources)

    logger.info(
        "Decoded %d records from %d source(s) as %s -> %s",
        total,
        len(sources),
        mode.input_format,
        mode.output_format,
    )
    return total
