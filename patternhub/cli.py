"""
Maintenance commands.

    patternhub cache:patterns [--all]   Clear cached catalogue pages
    patternhub init-db [--no-seed]      Create tables and seed demo data
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from patternhub.core.logging_config import configure_logging
from patternhub.core.cache import CacheStore, cache as default_cache
from patternhub.core.cache_keys import CacheTags
from patternhub.db.database import init_db
from patternhub.db.seeder import seed_admin, seed_catalog

logger = logging.getLogger(__name__)


def clear_pattern_cache(store: CacheStore, flush_all: bool = False) -> int:
    """Evict catalogue, category and pattern entries (or everything) and return the count."""
    if flush_all:
        return store.flush()
    removed = store.forget_tag_prefixes(CacheTags.families())
    return removed + store.purge_expired()


def _cache_patterns(args: argparse.Namespace) -> None:
    removed = clear_pattern_cache(default_cache, flush_all=args.all)
    scope = "all" if args.all else "patterns"
    print(f"Cleared {removed} cache entries ({scope}).")


def _init_db(args: argparse.Namespace) -> None:
    init_db()
    if not args.no_seed:
        seed_admin()
        seed_catalog()
    print("Database initialized.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="patternhub", description="PatternHub maintenance commands")
    commands = parser.add_subparsers(dest="command", required=True)

    cache_cmd = commands.add_parser("cache:patterns", help="Clear cached catalogue and pattern pages")
    cache_cmd.add_argument("--all", action="store_true", help="Flush the whole cache instead")
    cache_cmd.set_defaults(handler=_cache_patterns)

    init_cmd = commands.add_parser("init-db", help="Create tables and seed the demo catalogue")
    init_cmd.add_argument("--no-seed", action="store_true", help="Only create tables")
    init_cmd.set_defaults(handler=_init_db)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    logger.info("Running command %s", args.command)
    try:
        args.handler(args)
    except Exception:
        logger.error("Command %s failed", args.command, exc_info=True)
        print(f"Command {args.command} failed; see the log for details.", file=sys.stderr)
        return 1
    logger.info("Command %s finished", args.command)
    return 0


if __name__ == "__main__":
    sys.exit(main())
