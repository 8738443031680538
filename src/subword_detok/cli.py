from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from subword_detok.config import DecodeConfig, build_config, load_config_file
from subword_detok.engine import SentencePieceEngine
from subword_detok.errors import DetokError
from subword_detok.logging import (
    configure_file_logging,
    configure_logging,
    get_logger,
    parse_level,
)
from subword_detok.modes import INPUT_FORMATS, OUTPUT_FORMATS
from subword_detok.pipeline import EngineLoader, run_decode

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser for detokenization."""
    parser = argparse.ArgumentParser(
        prog="subword-detok",
        description="Decode subword pieces or piece ids back into text with a sentencepiece model.",
    )
    parser.add_argument(
        "sources",
        nargs="*",
        help="Input files, used when --input is empty (default: stdin).",
    )
    parser.add_argument("--model", type=str, default=None, help="Model file name (required).")
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Input filename (empty: positional sources or stdin).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output filename (empty: stdout).",
    )
    parser.add_argument(
        "--input_format",
        "--input-format",
        dest="input_format",
        type=str,
        default=None,
        help=f"Choose from {', '.join(INPUT_FORMATS)} (default: piece).",
    )
    parser.add_argument(
        "--output_format",
        "--output-format",
        dest="output_format",
        type=str,
        default=None,
        help=f"Choose from {', '.join(OUTPUT_FORMATS)} (default: string).",
    )
    parser.add_argument(
        "--extra_options",
        "--extra-options",
        dest="extra_options",
        type=str,
        default=None,
        help="':' separated decoder extra options, e.g. \"reverse:bos:eos\".",
    )
    parser.add_argument(
        "--strict_ids",
        "--strict-ids",
        dest="strict_ids",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Reject non-numeric id tokens instead of decoding them as id 0.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON file with default values for the options above.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Log level for stderr output (default: WARNING).",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write DEBUG logs to this file.",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> DecodeConfig:
    defaults = load_config_file(args.config) if args.config else None
    return build_config(
        {
            "model": args.model,
            "input": args.input,
            "output": args.output,
            "input_format": args.input_format,
            "output_format": args.output_format,
            "extra_options": args.extra_options,
            "sources": args.sources or None,
            "strict_ids": args.strict_ids,
        },
        defaults,
    )


def main(
    argv: Sequence[str] | None = None,
    engine_loader: EngineLoader = SentencePieceEngine.load,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = parse_level(args.log_level)
    except ValueError as e:
        parser.error(str(e))
    configure_logging(level=level)
    if args.log_file:
        configure_file_logging(Path(args.log_file))

    try:
        config = config_from_args(args)
        run_decode(config, engine_loader=engine_loader)
    except DetokError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
