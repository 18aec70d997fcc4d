from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .company_model import DEFAULT_ALLOWED_RADIUS, Company
from .company_repository import CompanyRepository

_SELECT = "SELECT company_id, name, cif, office_latitude, office_longitude, allowed_radius FROM companies"


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


def _row_to_company(row: dict) -> Company:
    radius = row.get("allowed_radius")
    return Company(
        company_id=int(row["company_id"]),
        name=row["name"],
        cif=row.get("cif"),
        office_latitude=_optional_float(row.get("office_latitude")),
        office_longitude=_optional_float(row.get("office_longitude")),
        allowed_radius=DEFAULT_ALLOWED_RADIUS if radius is None else int(radius),
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY name")
            return [_row_to_company(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE company_id=%s", (int(company_id),))
            row = fetchone(cur)
            return _row_to_company(row) if row else None

    def create(
        self,
        *,
        name: str,
        cif: Optional[str],
        office_latitude: Optional[float] = None,
        office_longitude: Optional[float] = None,
        allowed_radius: int = DEFAULT_ALLOWED_RADIUS,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO companies(name, cif, office_latitude, office_longitude, allowed_radius)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, cif, office_latitude, office_longitude, int(allowed_radius)),
            )
            return int(cur.lastrowid)
