"""
Resolve a book from the command line.

Usage:
    python scripts/resolve_book.py --isbn 0439708184
    python scripts/resolve_book.py --isbn 9780439708180 --parallel
    python scripts/resolve_book.py --title "Cien años de soledad" --author "García Márquez"
"""

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

# Load env vars
load_dotenv()

from bibresolver.config import get_settings
from bibresolver.errors import InvalidQueryError
from bibresolver.logging_setup import configure_logging
from bibresolver.models import BibliographicQuery
from bibresolver.service import BookResolutionService


def parse_args():
    parser = argparse.ArgumentParser(description="Resolve a book and its classifications")
    parser.add_argument("--isbn", help="ISBN-10 or ISBN-13")
    parser.add_argument("--title", help="Book title")
    parser.add_argument("--author", help="Author name")
    parser.add_argument("--publisher", help="Publisher name")
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Also search classifications by the title and author found for the ISBN",
    )
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings)

    query = BibliographicQuery(
        isbn=args.isbn,
        title=args.title,
        author=args.author,
        publisher=args.publisher,
    )

    async with BookResolutionService(settings) as service:
        try:
            if args.parallel and query.isbn:
                record = await service.resolve_by_isbn_parallel(query.isbn)
            else:
                record = await service.resolve(query)
        except InvalidQueryError as e:
            print(f"Error: {e.message}. {e.detail}", file=sys.stderr)
            return 2

    if record is None:
        print("No match found", file=sys.stderr)
        return 1

    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
