#!/usr/bin/env python3
"""
wordkit CLI
===========
Command-line interface for training models and generating words.

Usage:
    wordkit train corpus.txt -o deDE.json --language deDE --levels 3
    wordkit generate deDE.json -n 10 --min 4 --max 9
    wordkit languages
"""

import argparse
import logging
import sys
from pathlib import Path

from wordkit import __version__, create
from wordkit.entropy import get_rng
from wordkit.languages import default_language, get_alphabet, list_languages
from wordkit.normalized_table import GenerationOptions
from wordkit.serialization import load, save
from wordkit.settings import get_setting


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}")


def setup_logging(verbose: bool = False, quiet: bool = False):
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = getattr(logging, str(get_setting('logging.level', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=get_setting('logging.format', '%(levelname)s %(name)s: %(message)s'),
        stream=sys.stderr,
    )


# =============================================================================
# Commands
# =============================================================================

def cmd_train(args, out: Output):
    """Train a model from a corpus file and save it."""
    corpus = Path(args.corpus)
    if not corpus.exists():
        out.error(f"Corpus not found: {corpus}")
        return 1

    table = create(args.language, args.levels)
    with open(corpus, 'r', encoding=args.encoding) as f:
        words = table.parse_text_lines(f, capitals_only=args.capitals)

    save(table.get_normalized_table(), args.output)
    out.success(f"Learned {words} words, model saved to {args.output}")
    return 0


def cmd_generate(args, out: Output):
    """Generate words from a saved model."""
    model = load(args.model)
    options = GenerationOptions(
        min_length=args.min_length,
        max_length=args.max_length,
        levels=args.levels,
        end_backtrack=args.end_backtrack,
        end_prob_index=args.end_prob_index,
        end_weight=args.end_weight,
    )
    rng = get_rng(args.seed)

    if args.unique:
        words = model.generate_batch(args.count, options, rng)
    else:
        words = [model.generate_word(options, rng) for _ in range(args.count)]

    for word in words:
        print(word)
    return 0


def cmd_languages(args, out: Output):
    """List available alphabets."""
    default = default_language()
    for name in list_languages():
        marker = '*' if name == default else ' '
        out.print(f"{marker} {name:<14} {get_alphabet(name).chars}")
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='wordkit',
        description='wordkit - Markov Pseudo-Word Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s train corpus.txt -o deDE.json --language deDE
  %(prog)s generate deDE.json -n 20 --min 5 --max 9
  %(prog)s generate deDE.json -n 20 --unique --seed 42
  %(prog)s languages
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging and tracebacks')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- train ---
    p = subparsers.add_parser('train', aliases=['t'], help='Train a model from a text corpus')
    p.add_argument('corpus', help='Text file to learn from')
    p.add_argument('-o', '--output', required=True, help='Model file to write (JSON)')
    p.add_argument('--language', '-l', help='Alphabet id (default: model.language in app.yaml)')
    p.add_argument('--levels', type=int, help='Maximum context length (default: model.levels)')
    p.add_argument('--capitals', '-c', action='store_true',
                   help='Only learn words starting with an uppercase letter')
    p.add_argument('--encoding', default='utf-8', help='Corpus encoding (default: utf-8)')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate words from a model')
    p.add_argument('model', help='Model file written by train')
    p.add_argument('-n', '--count', type=int, default=10, help='Number of words (default: 10)')
    p.add_argument('--min', dest='min_length', type=int, help='Minimum word length')
    p.add_argument('--max', dest='max_length', type=int, help='Maximum word length')
    p.add_argument('--levels', type=int, help='Use at most this many context characters')
    p.add_argument('--end-backtrack', type=int, help='Additional levels to backtrack when ending words')
    p.add_argument('--end-prob-index', type=int, help='Explicit end probability index')
    p.add_argument('--end-weight', type=float, help='Weight of the cosine end factor')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')
    p.add_argument('--unique', '-u', action='store_true', help='Only distinct words')

    # --- languages ---
    subparsers.add_parser('languages', aliases=['langs'], help='List available alphabets')

    # Parse
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        't': 'train',
        'gen': 'generate', 'g': 'generate',
        'langs': 'languages',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    # Dispatch
    commands = {
        'train': cmd_train,
        'generate': cmd_generate,
        'languages': cmd_languages,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
