#!/usr/bin/env python3
"""Seed the verdict cache with common Georgian words.

Seeded words are stored as valid verdicts with source "seed", so the most
frequent words are answered without any API call.

Usage:
    python scripts/seed_common_words.py
    python scripts/seed_common_words.py --file words.txt --ttl-days 90
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from geoword.config import load_config
from geoword.seed_words import COMMON_GEORGIAN_WORDS
from geoword.store import create_verdict_cache
from geoword.utils.logging import setup_logging


def read_words(path: Path):
    """Read one word per line, skipping blanks and # comments."""
    words = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                words.append(line)
    return words


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Seed the verdict cache with common Georgian words.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s --file my_words.txt
  %(prog)s --config prod.json --ttl-days 90
        """
    )
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--file', type=Path, help='Word list, one per line (default: built-in list)')
    parser.add_argument('--confidence', type=float, default=0.95, help='Confidence for seeded verdicts')
    parser.add_argument('--ttl-days', type=int, default=None, help='Override the cache TTL')

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(config.log_level, json_format=config.log_json)

    if args.ttl_days is not None:
        config.verdict_cache.ttl_days = args.ttl_days

    cache = create_verdict_cache(config.store, config.verdict_cache)
    if cache is None:
        print("Error: verdict cache is disabled in config")
        sys.exit(1)

    if args.file:
        if not args.file.exists():
            print(f"Error: word list not found: {args.file}")
            sys.exit(1)
        words = read_words(args.file)
    else:
        words = list(COMMON_GEORGIAN_WORDS)

    print(f"Seeding {len(words)} words (ttl={config.verdict_cache.ttl_days} days)...")
    seeded = cache.seed(words, confidence=args.confidence)
    print(f"✓ Seeded {seeded} words")


if __name__ == '__main__':
    main()
