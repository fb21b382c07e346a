"""CLI adapter creating the ledger tables on the configured database."""

from src.infrastructure.container import build_database_adapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.schema import create_schema


def main() -> None:
    """Create missing ledger tables and indexes."""
    logger = get_app_logger()
    engine = build_database_adapter().get_ledger_engine()
    create_schema(engine)
    logger.info(f"Ledger schema ready on {engine.url}")


if __name__ == "__main__":  # pragma: no cover
    main()
