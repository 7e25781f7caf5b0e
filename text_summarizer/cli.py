"""
Command line entry point.

Usage examples:
  text-summarizer https://example.com/news/1234 --target-size 1024 --timeout 5 --max-iterations 200
  python -m text_summarizer path/to/file.txt --count 3 --stats
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .acquisition import is_url, load_text
from .constants import DEFAULT_MAX_ITERATIONS, DEFAULT_TARGET_SIZE, DEFAULT_TIMEOUT
from .datatypes import SIMILARITY_MODES, SummarizationRequest, SummarizationResult
from .errors import AcquisitionFailure, InvalidParameters, RankingTimeout
from .summarize import summarize

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="text-summarizer",
        description="Extractive summary of a web page or text file, bounded in size and time.",
    )
    parser.add_argument("source", help="http(s) URL or path to a .txt/.md/.rtf file")
    budget = parser.add_mutually_exclusive_group()
    budget.add_argument("--target-size", type=int, default=None,
                        help=f"Target summary size in characters (default {DEFAULT_TARGET_SIZE})")
    budget.add_argument("--count", type=int, default=None, help="Number of sentences to keep")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help="Ranking deadline in seconds (default %(default)s)")
    parser.add_argument("--max-iterations", "--maxIteration", dest="max_iterations", type=int,
                        default=DEFAULT_MAX_ITERATIONS, help="Ranking round cap (default %(default)s)")
    parser.add_argument("--similarity", choices=SIMILARITY_MODES, default="overlap",
                        help="Sentence similarity measure (default %(default)s)")
    parser.add_argument("--stats", action="store_true", help="Print run statistics before the summary")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level (stderr)")
    return parser


def format_stats(source: str, result: SummarizationResult, timeout: float) -> str:
    label = "URL" if is_url(source) else "File"
    lines = [
        f"{label}: {source}",
        f"Contents size: {result.total_chars}",
        f"Sentences: {result.sentence_count}",
        f"Mean sentence length: {result.mean_sentence_length:.1f}",
        f"Target sentence count: {result.target_sentence_count}",
        f"Required compression: {result.compression_ratio:.4f}",
        f"Timeout: {timeout:g}",
        f"Ranking rounds: {result.iterations}",
    ]
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        request = SummarizationRequest(
            text="",
            target_size=args.target_size,
            target_count=args.count,
            max_iterations=args.max_iterations,
            timeout=args.timeout,
            similarity=args.similarity,
        )
    except InvalidParameters as exc:
        print(f"Invalid parameters: {exc}", file=sys.stderr)
        return 2

    try:
        contents = load_text(args.source)
    except AcquisitionFailure as exc:
        kind = "page" if is_url(args.source) else "file"
        print(f"Could not load {kind}: {exc.reason}", file=sys.stderr)
        return 1

    try:
        result = summarize(replace(request, text=contents))
    except RankingTimeout as exc:
        print(f"Could not summarize text: {exc}", file=sys.stderr)
        return 1

    if args.stats:
        print(format_stats(args.source, result, args.timeout))
        print()
    print(result.text)
    return 0
