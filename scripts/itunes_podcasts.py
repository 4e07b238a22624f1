#!/usr/bin/env python3
"""CLI script to query the iTunes podcast directory and print normalized results as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from api.itunes.enums import Country, Entity, Language, PodcastGenre
from api.itunes.query import FilterSet
from api.itunes.wrappers import ITunesWrapper

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(str(_PROJECT_ROOT / "config" / "local.env"))


def _enum_arg(enum_cls):
    def _parse(value: str):
        try:
            return enum_cls.parse(value)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e)) from e

    _parse.__name__ = enum_cls.__name__
    return _parse


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search, look up and list trending podcasts from the iTunes directory.",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2).")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Free-text directory search.")
    search.add_argument("term", help="Search term.")
    search.add_argument("--country", type=_enum_arg(Country), help="Country code, e.g. US.")
    search.add_argument(
        "--entity", type=_enum_arg(Entity), help="podcast, podcastEpisode or both."
    )
    search.add_argument("--genre", type=_enum_arg(PodcastGenre), help="Genre id or name.")
    search.add_argument("--lang", type=_enum_arg(Language), help="Language code, e.g. en.")
    search.add_argument("--attribute", help="Restrict the term to one attribute.")
    search.add_argument("--explicit", choices=["Yes", "No"], help="Explicit content filter.")
    search.add_argument("--version", type=int, help="Result format version.")

    lookup = sub.add_parser("lookup", help="Fetch podcasts by collection id.")
    lookup.add_argument("ids", nargs="+", help="One or more collection ids.")

    trending = sub.add_parser("trending", help="Top podcasts chart for a country.")
    trending.add_argument(
        "--country", type=_enum_arg(Country), default=Country.UNITED_STATES, help="Default: US."
    )
    trending.add_argument("--limit", type=int, default=25, help="Chart size (default: 25).")
    trending.add_argument(
        "--ids-only", action="store_true", help="Print chart ids without the lookup."
    )

    category = sub.add_parser("category", help="List podcasts of a genre.")
    category.add_argument("genre", type=_enum_arg(PodcastGenre), help="Genre id or name.")
    category.add_argument(
        "--entity", type=_enum_arg(Entity), default=Entity.PODCAST, help="Default: podcast."
    )
    category.add_argument("--limit", type=int, default=25, help="Result limit (default: 25).")

    return parser.parse_args(argv)


async def _run(args: argparse.Namespace, wrapper: ITunesWrapper) -> Any:
    if args.command == "search":
        filters = FilterSet(
            term=args.term,
            country=args.country,
            entity=args.entity,
            attribute=args.attribute,
            genre=args.genre,
            language=args.lang,
            version=args.version,
            explicit=args.explicit,
        )
        return await wrapper.search(filters)
    if args.command == "lookup":
        return await wrapper.lookup(args.ids)
    if args.command == "trending":
        if args.ids_only:
            return await wrapper.trending_ids(args.country, args.limit)
        return await wrapper.trending_items(args.country, args.limit)
    return await wrapper.by_category(args.genre, args.entity, args.limit)


async def main() -> None:
    args = _parse_args()

    wrapper = ITunesWrapper()
    try:
        result = await _run(args, wrapper)
    finally:
        await wrapper.close()

    print(json.dumps(result.to_dict(), indent=args.indent, default=str, ensure_ascii=False))

    if result.error:
        print(f"Error running {args.command}: {result.error}", file=sys.stderr)
        sys.exit(2)
    sys.exit(0)


if __name__ == "__main__":
    asyncio.run(main())
