#!/usr/bin/env python3
"""
MediaWiki page importer - command line entry point.

Walks a generator on a remote wiki and writes one JSON record per page.

Settings come from (lowest to highest precedence): built-in defaults, a JSON
config file (--config), MW_* environment variables, command line flags.

Usage:
    mwimport --url https://en.wikipedia.org/w/api.php --arg gapprefix=Plato
    mwimport --config enwiki.json --generate categorymembers \\
        --arg gcmtitle=Category:Philosophers --arg gaplimit --arg gapfilterredir
    mwimport --config enwiki.json --arg rvlimit --split-dir ./pages
"""

import argparse
import json
import logging
import sys
from itertools import islice
from pathlib import Path
from typing import Optional

from mwimport.config import DEFAULT_GENERATOR, GENERATORS, env_overrides, load_config_file, resolve
from mwimport.errors import ConfigError, MediaWikiError
from mwimport.filename_utils import title_to_filename
from mwimport.logging_config import setup_logging
from mwimport.page_stream import PageStream


def parse_arg(value: str) -> tuple:
    """Parse KEY=VALUE into (key, value); a bare KEY means (key, None)."""
    key, sep, val = value.partition("=")
    if not key:
        raise argparse.ArgumentTypeError(f"invalid argument {value!r}, expected KEY=VALUE")
    return key, (val if sep else None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mwimport",
        description="Import pages from a MediaWiki site through a query generator",
    )
    parser.add_argument("--config", help="JSON config file (url, generate, lgname, lgpassword, args)")
    parser.add_argument("--url", help="API endpoint, e.g. https://en.wikipedia.org/w/api.php")
    parser.add_argument(
        "--generate",
        choices=sorted(GENERATORS),
        help=f"Generator to walk (default: {DEFAULT_GENERATOR})",
    )
    parser.add_argument("--lgname", help="Login name (bot password user)")
    parser.add_argument("--lgpassword", help="Login password (only used together with --lgname)")
    parser.add_argument(
        "--arg",
        dest="extra",
        action="append",
        type=parse_arg,
        default=[],
        metavar="KEY[=VALUE]",
        help="Extra query argument; a bare KEY removes a default (repeatable)",
    )
    parser.add_argument("--args-json", help="Extra query arguments as a JSON object (null removes a default)")
    parser.add_argument("--output", "-o", help="Write JSON Lines here instead of stdout")
    parser.add_argument("--split-dir", help="Write one JSON file per page into this directory")
    parser.add_argument("--limit", type=int, help="Stop after this many pages")
    parser.add_argument("--log-dir", help="Directory for the rotating log file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--trace", action="store_true", help="Log raw HTTP requests and responses")
    return parser


def collect_settings(args: argparse.Namespace, environ=None) -> dict:
    """Merge config file, environment and flags into raw settings for resolve()."""
    raw = load_config_file(args.config) if args.config else {}
    raw.update(env_overrides(environ))

    for key in ("url", "generate", "lgname", "lgpassword"):
        value = getattr(args, key)
        if value is not None:
            raw[key] = value
    if args.trace:
        raw["trace"] = True

    extra = dict(raw.get("args") or {})
    if args.args_json:
        try:
            from_json = json.loads(args.args_json)
        except ValueError as e:
            raise ConfigError(f"--args-json is not valid JSON: {e}") from e
        if not isinstance(from_json, dict):
            raise ConfigError("--args-json must be a JSON object")
        extra.update(from_json)
    extra.update(dict(args.extra))
    raw["args"] = extra

    return raw


def write_pages(pages, output, split_dir: Optional[Path], logger: logging.Logger) -> int:
    count = 0
    for page in pages:
        output.write(json.dumps(page, ensure_ascii=False) + "\n")
        if split_dir is not None:
            path = split_dir / title_to_filename(page.get("title", str(page.get("pageid"))))
            path.write_text(json.dumps(page, ensure_ascii=False, indent=2), encoding="utf-8")
        count += 1
        if count % 100 == 0:
            logger.info(f"Imported {count} pages...")
    return count


def main(argv=None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(
        name="mwimport",
        log_dir=args.log_dir,
        level=logging.DEBUG if (args.verbose or args.trace) else logging.INFO,
    )

    try:
        config = resolve(collect_settings(args))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    logger.info(f"Importing from {config.api_url} (generator={config.generator})")

    split_dir = Path(args.split_dir) if args.split_dir else None
    if split_dir is not None:
        split_dir.mkdir(parents=True, exist_ok=True)

    output = open(args.output, "w", encoding="utf-8") if args.output else sys.stdout
    try:
        with PageStream(config) as stream:
            pages = islice(stream, args.limit) if args.limit is not None else stream
            count = write_pages(pages, output, split_dir, logger)
    except MediaWikiError as e:
        logger.error(f"Import failed: {e}")
        return 1
    finally:
        if output is not sys.stdout:
            output.close()

    logger.info(f"=== IMPORT COMPLETE === Pages: {count}, Batches: {stream.fetched_batches}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
