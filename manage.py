#!/usr/bin/env python3
"""
Admin tasks for the iConnect store.

Usage:
    python manage.py reconcile             # Create missing tables/columns, backfill IDs
    python manage.py invalidate dashboard  # Expire every cache key of a category
    python manage.py rebuild ventas        # Expire a category and recompute the dashboard
    python manage.py stats                 # Print dashboard stats (cached if warm)
    python manage.py purge                 # Drop expired rows from a persistent cache
    python manage.py ... --debug           # Verbose console logging
"""

import json
import sys

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.container import Container
from app.errors import AppError, LockTimeoutError
from app.repositories.common.cache import CacheRepository
from settings.logging import setup_logging
from web.api import build_actions


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(LockTimeoutError),
    reraise=True,
)
def run_reconcile(container: Container):
    """Reconcile all registered tables, retrying while another run holds the lock."""
    report = container.reconciler.reconcile()

    print("\n" + "=" * 60)
    print(f"SCHEMA RECONCILIATION ({container.registry.fingerprint})")
    print("=" * 60)
    if not report:
        print("Nothing to do, schema is up to date.")
    for change in report:
        print(f"  + {change}")
    for failure in report.failures:
        print(f"  ! {failure.table}: {failure.message}")
    print("=" * 60 + "\n")
    return report.ok


def run_purge(container: Container) -> int:
    removed = container.host_cache.purge_expired()
    kind = "rows" if isinstance(container.host_cache, CacheRepository) else "entries"
    print(f"Purged {removed} expired cache {kind}.")
    return removed


def main():
    args = sys.argv[1:]
    debug = "--debug" in args
    args = [a for a in args if a != "--debug"]

    logger = setup_logging(level="DEBUG" if debug else "INFO", to_file=True)

    if not args or args[0] in ("-h", "--help"):
        print(__doc__)
        sys.exit(0 if args else 1)

    command, rest = args[0], args[1:]
    container = Container().init()
    try:
        if command == "reconcile":
            ok = run_reconcile(container)
            sys.exit(0 if ok else 1)

        if command == "purge":
            run_purge(container)
            return

        actions = build_actions(container)
        if command == "invalidate":
            response = actions.dispatch("invalidate_cache", {"category": rest[0] if rest else None})
        elif command == "rebuild":
            response = actions.dispatch("rebuild_cache", {"category": rest[0] if rest else None})
        elif command == "stats":
            response = actions.dispatch("dashboard_stats")
        else:
            print(__doc__)
            sys.exit(1)

        print(json.dumps(response, ensure_ascii=False, indent=2))
        sys.exit(0 if response["status"] == "success" else 1)
    except AppError as e:
        logger.error("{} ({})", e.message, e.kind)
        sys.exit(1)
    finally:
        container.close()


if __name__ == "__main__":
    main()
