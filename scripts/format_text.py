"""
Format a block of chat text from the command line.

Usage:
    python3 scripts/format_text.py '*"Hi."* she said'
    cat reply.txt | python3 scripts/format_text.py --strip-quote-emphasis

Output:
    The formatted text, or an advisory when no text was given.
"""

import argparse
import sys

from format_fixer.config import settings
from format_fixer.models.format import FormatOptions
from format_fixer.services.formatting.pipeline import run_format_command


def build_options(args: argparse.Namespace) -> FormatOptions:
    """Settings defaults, overridden by any flag that was passed."""
    options = settings.format_options()
    return options.model_copy(
        update={
            "strip_quote_emphasis": args.strip_quote_emphasis or options.strip_quote_emphasis,
            "uncensor": options.uncensor and not args.no_uncensor,
            "promote_quote_emphasis": args.promote_quote_emphasis
            or options.promote_quote_emphasis,
        }
    )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Repair emphasis and quote markup")
    parser.add_argument("text", nargs="*", help="Text to format (default: read stdin)")
    parser.add_argument(
        "--strip-quote-emphasis",
        action="store_true",
        help="Remove asterisks wrapping quoted dialogue",
    )
    parser.add_argument(
        "--no-uncensor",
        action="store_true",
        help="Leave masked profanity as written",
    )
    parser.add_argument(
        "--promote-quote-emphasis",
        action="store_true",
        help="Also bold single-word emphasis inside quotes",
    )
    args = parser.parse_args(argv)

    text = " ".join(args.text) if args.text else sys.stdin.read()
    print(run_format_command(text, build_options(args)))


if __name__ == "__main__":
    main()
