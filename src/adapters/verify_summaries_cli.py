"""CLI adapter reporting summaries that drifted from their records."""

from src.infrastructure.container import build_site_ledger
from src.infrastructure.logging.logger import get_app_logger


def main() -> int:
    """Print every drifted summary; exit with 1 when any was found."""
    logger = get_app_logger()
    ledger = build_site_ledger()
    drifts = ledger.verify_summaries()

    if not drifts:
        print("All site summaries match their records.")
        return 0

    for drift in drifts:
        if drift.missing:
            print(f"{drift.site_id}: summary missing")
            continue
        details = ", ".join(
            f"{name}={delta}" for name, delta in sorted(drift.deltas.items())
        )
        print(f"{drift.site_id}: {details}")
    logger.warning(
        f"{len(drifts)} site summaries drifted; "
        "run recompute_sites_cli to repair them"
    )
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
