from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollBatchStatus
from .model import PayrollBatch, PayrollRow, PayrollRowData


class PayrollRepository(Protocol):
    def create_batch(
        self, *, year: int, month: int, source_filename: str, file_key: str, created_by: Optional[int]
    ) -> int:
        raise NotImplementedError

    def get_batch(self, batch_id: int) -> Optional[PayrollBatch]:
        raise NotImplementedError

    def list_batches(self, *, limit: int = 100) -> Sequence[PayrollBatch]:
        raise NotImplementedError

    def set_status(self, batch_id: int, status: PayrollBatchStatus) -> bool:
        raise NotImplementedError

    def replace_rows(self, batch_id: int, rows: Sequence[PayrollRowData]) -> int:
        """Delete the batch's rows and insert ``rows``; returns the inserted count."""
        raise NotImplementedError

    def list_rows(self, batch_id: int) -> Sequence[PayrollRow]:
        raise NotImplementedError
