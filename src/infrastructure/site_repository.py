"""SQLAlchemy repository for construction sites."""

from sqlalchemy import text
from sqlalchemy.engine import Connection

from src.application.ports.ledger_store import SiteRepositoryPort
from src.domain.models import Site
from src.infrastructure.sql_params import bind_timestamp
from src.utils.utils import parse_datetime

INSERT_SITE_SQL = text(
    """
    INSERT INTO sites (
        id,
        name,
        location,
        supervisor_id,
        is_completed,
        created_at
    )
    VALUES (
        :id,
        :name,
        :location,
        :supervisor_id,
        :is_completed,
        :created_at
    )
    """
)

SELECT_SITE_SQL = text(
    """
    SELECT id, name, location, supervisor_id, is_completed, created_at
    FROM sites
    WHERE id = :site_id
    """
)

SELECT_SITE_IDS_SQL = text("SELECT id FROM sites ORDER BY id")

COMPLETE_SITE_SQL = text(
    "UPDATE sites SET is_completed = :is_completed WHERE id = :site_id"
)

DELETE_SITE_SQL = text("DELETE FROM sites WHERE id = :site_id")


class SqlAlchemySiteRepository(SiteRepositoryPort):
    """Site registry backed by the ledger database."""

    def insert_site(self, conn: Connection, site: Site) -> None:
        conn.execute(
            INSERT_SITE_SQL,
            {
                "id": site.id,
                "name": site.name,
                "location": site.location,
                "supervisor_id": site.supervisor_id,
                "is_completed": site.is_completed,
                "created_at": bind_timestamp(conn, site.created_at),
            },
        )

    def fetch_site(self, conn: Connection, site_id: str) -> Site | None:
        row = conn.execute(SELECT_SITE_SQL, {"site_id": site_id}).first()
        if row is None:
            return None
        return Site(
            id=row.id,
            name=row.name,
            location=row.location,
            supervisor_id=row.supervisor_id,
            is_completed=bool(row.is_completed),
            created_at=parse_datetime(row.created_at),
        )

    def fetch_site_ids(self, conn: Connection) -> list[str]:
        rows = conn.execute(SELECT_SITE_IDS_SQL).all()
        return [row.id for row in rows]

    def mark_completed(self, conn: Connection, site_id: str) -> bool:
        result = conn.execute(
            COMPLETE_SITE_SQL,
            {"site_id": site_id, "is_completed": True},
        )
        return result.rowcount > 0

    def delete_site(self, conn: Connection, site_id: str) -> bool:
        result = conn.execute(DELETE_SITE_SQL, {"site_id": site_id})
        return result.rowcount > 0


__all__ = ["SqlAlchemySiteRepository"]
