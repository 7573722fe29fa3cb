"""CLI utility to detect and repair drifted ledger running balances."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from ..database import session_scope
from ..services.ledger import LedgerService
from ..services.observability import ObservabilityService

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Compare stored ledger balances against balances re-derived from the full "
            "history. Suitable for cron or scheduled jobs."
        )
    )
    parser.add_argument(
        "--user-id",
        help="Only check the ledger owned by this user.",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Overwrite drifted stored balances with the re-derived values.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every drifted entry.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    with session_scope() as db:
        with ObservabilityService.timed_event(
            db, "ledger.reconcile", tags={"apply": args.apply}
        ) as run:
            drifted = LedgerService.find_drift(db, args.user_id)
            run["drifted"] = len(drifted)
            for entry, derived in drifted:
                LOGGER.debug(
                    "Entry %s for %s: stored %s, derived %s",
                    entry.id,
                    entry.party_name,
                    entry.balance,
                    derived,
                )
                if args.apply:
                    entry.balance = derived

    if not drifted:
        LOGGER.info("Ledger balances are consistent")
        return 0

    if args.apply:
        LOGGER.warning("Repaired %s drifted ledger balances", len(drifted))
        return 0

    LOGGER.warning("%s ledger entries have drifted balances; rerun with --apply", len(drifted))
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
