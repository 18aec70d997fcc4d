from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DocumentCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Document
from .repository import DocumentRepository

_COLUMNS = "document_id, employee_id, name, category, file_key, created_at"


def _row_to_document(row: dict) -> Document:
    return Document(
        document_id=int(row["document_id"]),
        employee_id=row.get("employee_id"),
        name=row["name"],
        category=DocumentCategory(row["category"]),
        file_key=row["file_key"],
        created_at=row.get("created_at"),
    )


class MySQLDocumentRepository(DocumentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, employee_id: Optional[int], name: str, category: DocumentCategory, file_key: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO documents(employee_id, name, category, file_key) VALUES(%s,%s,%s,%s)",
                (employee_id, name, category.value, file_key),
            )
            return int(cur.lastrowid)

    def get_by_id(self, document_id: int) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM documents WHERE document_id=%s", (int(document_id),))
            row = fetchone(cur)
            return _row_to_document(row) if row else None

    def list_for_employee(self, employee_id: int) -> Sequence[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM documents WHERE employee_id=%s ORDER BY created_at DESC, document_id DESC",
                (int(employee_id),),
            )
            return [_row_to_document(r) for r in fetchall(cur)]

    def delete(self, document_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM documents WHERE document_id=%s", (int(document_id),))
            return cur.rowcount > 0
