from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DocumentCategory
from .model import Document


class DocumentRepository(Protocol):
    def create(self, *, employee_id: Optional[int], name: str, category: DocumentCategory, file_key: str) -> int:
        raise NotImplementedError

    def get_by_id(self, document_id: int) -> Optional[Document]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Document]:
        raise NotImplementedError

    def delete(self, document_id: int) -> bool:
        raise NotImplementedError
