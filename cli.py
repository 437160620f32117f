#!/usr/bin/env python3
"""Command-line interface for Georgian word validation."""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def _load_service(args):
    """Load config and build the validation service, exiting on config errors."""
    from geoword.config import load_config
    from geoword.service import WordValidationService
    from geoword.utils.logging import setup_logging

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: {args.config} not found")
        print("Copy config.json.sample to config.json and configure your providers")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(args.log_level or config.log_level, json_format=config.log_json)
    return WordValidationService.from_config(config)


def _print_result(result, as_json: bool):
    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False))
        return

    verdict = "VALID" if result.valid else "INVALID"
    cached = " (cached)" if result.cached else ""
    print(f"{result.word}: {verdict} confidence={result.confidence:.2f} source={result.source}{cached}")
    for signal in result.signals:
        mark = "+" if signal.valid else "-"
        error = f" error={signal.error}" if signal.error else ""
        print(f"    {mark} {signal.name.value:<12} {signal.confidence:.2f} {signal.source}{error}")
    if result.stats:
        print(f"    votes: {result.stats.valid_count} valid / {result.stats.invalid_count} invalid, "
              f"weighted={result.stats.weighted_confidence:.2f}")


def cmd_validate(args):
    """Validate one or more words given on the command line."""
    service = _load_service(args)
    for word in args.words:
        _print_result(service.validate(word, use_cache=not args.no_cache), args.json)


def cmd_batch(args):
    """Validate words from a file, one per line."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}")
        sys.exit(1)

    words = [line.strip() for line in input_path.read_text(encoding="utf-8").splitlines() if line.strip()]
    print(f"Loaded {len(words)} words")

    service = _load_service(args)
    try:
        results = service.validate_many(words)
    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(130)

    for result in results:
        _print_result(result, args.json)

    valid = sum(1 for r in results if r.valid)
    if not args.json:
        print(f"\n{valid}/{len(results)} valid")


def cmd_track(args):
    """Record that a user used a word."""
    service = _load_service(args)
    service.track_usage(args.word, args.user)
    stats = _read_stats(service, args.word)
    if stats:
        print(f"{stats.word}: {stats.usage_count} uses by {stats.unique_users} users")


def _read_stats(service, word):
    """Fetch word stats, exiting with a message if the store is unreadable."""
    from geoword.store import StoreError

    try:
        return service.get_stats(word)
    except StoreError as e:
        print(f"Error: could not read usage statistics: {e}")
        sys.exit(1)


def cmd_stats(args):
    """Show usage statistics for a word."""
    service = _load_service(args)
    stats = _read_stats(service, args.word)
    if stats is None:
        print(f"No usage recorded for {args.word}")
        return
    print(f"{stats.word}")
    print(f"  uses:         {stats.usage_count}")
    print(f"  unique users: {stats.unique_users}")
    print(f"  first seen:   {stats.first_seen}")
    print(f"  last seen:    {stats.last_seen}")


def cmd_seed(args):
    """Pre-populate the verdict cache with curated common words."""
    from geoword.seed_words import COMMON_GEORGIAN_WORDS

    service = _load_service(args)
    if service.verdict_cache is None:
        print("Error: verdict cache is disabled in config")
        sys.exit(1)

    if args.file:
        words = [w.strip() for w in Path(args.file).read_text(encoding="utf-8").splitlines() if w.strip()]
    else:
        words = list(COMMON_GEORGIAN_WORDS)

    seeded = service.verdict_cache.seed(words, confidence=args.confidence)
    print(f"Seeded {seeded}/{len(words)} words")


def cmd_clear_cache(args):
    """Remove every cached verdict."""
    service = _load_service(args)
    if service.verdict_cache is None:
        print("Verdict cache is disabled")
        return
    service.verdict_cache.clear()
    print("Verdict cache cleared")


def main():
    parser = argparse.ArgumentParser(
        description="Georgian word validation - decide whether a word is real Georgian"
    )
    parser.add_argument(
        "--config", "-c",
        default="config.json",
        help="Path to configuration file (default: config.json)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override log level from config (DEBUG, INFO, WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate words")
    validate_parser.add_argument("words", nargs="+", help="Words to validate")
    validate_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Bypass the verdict cache"
    )
    validate_parser.add_argument("--json", action="store_true", help="Print JSON results")
    validate_parser.set_defaults(func=cmd_validate)

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Validate words from a file")
    batch_parser.add_argument("input", help="File with one word per line")
    batch_parser.add_argument("--json", action="store_true", help="Print JSON results")
    batch_parser.set_defaults(func=cmd_batch)

    # Track command
    track_parser = subparsers.add_parser("track", help="Record word usage by a user")
    track_parser.add_argument("word", help="Word that was used")
    track_parser.add_argument("user", help="User id")
    track_parser.set_defaults(func=cmd_track)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show usage statistics for a word")
    stats_parser.add_argument("word", help="Word to look up")
    stats_parser.set_defaults(func=cmd_stats)

    # Seed command
    seed_parser = subparsers.add_parser("seed", help="Seed the verdict cache with common words")
    seed_parser.add_argument(
        "--file", "-f",
        help="File with one word per line (default: built-in common words)"
    )
    seed_parser.add_argument(
        "--confidence",
        type=float,
        default=0.95,
        help="Confidence stored for seeded words (default: 0.95)"
    )
    seed_parser.set_defaults(func=cmd_seed)

    # Clear cache command
    clear_parser = subparsers.add_parser("clear-cache", help="Remove all cached verdicts")
    clear_parser.set_defaults(func=cmd_clear_cache)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
