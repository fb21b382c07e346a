"""CLI adapter to rebuild site summaries from their records.

Without arguments every site is recomputed; otherwise only the site ids
given on the command line. Sites whose stored summary differed are listed.
"""

import sys

from src.domain.errors import NotFoundError, RecomputeError
from src.infrastructure.container import build_site_ledger
from src.infrastructure.logging.logger import get_app_logger


def main(argv: list[str] | None = None) -> int:
    """Run the recompute use case and print the repaired sites."""
    logger = get_app_logger()
    site_ids = sys.argv[1:] if argv is None else argv
    ledger = build_site_ledger()

    try:
        result = ledger.recompute_all(site_ids or None)
    except (NotFoundError, RecomputeError) as exc:
        logger.error(str(exc))
        return 1

    print(
        f"Recomputed {result.site_count} site summaries, "
        f"repaired {len(result.repaired_site_ids)}."
    )
    for site_id in result.repaired_site_ids:
        print(f"  repaired: {site_id}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
