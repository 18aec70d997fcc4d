"""Payroll spreadsheet import: upload, column mapping, typed rows."""

from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.spreadsheet import is_blank
from ..core.enums import PayrollBatchStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..storage.service import LocalStorage
from .model import PayrollBatch, PayrollRow, PayrollRowData, UploadResult
from .repository import PayrollRepository

log = get_logger("payroll.import")

TARGET_FIELDS = ("employee_name", "employee_dni", "gross", "ss_company", "ss_employee", "irpf", "net")
MONEY_FIELDS = ("gross", "ss_company", "ss_employee", "irpf", "net")
ALLOWED_EXTENSIONS = {".csv", ".xlsx", ".xls"}


def parse_money(value: Any) -> float:
    """Spanish-formatted amount: ``"1.200,50"`` -> 1200.5; blanks and garbage -> 0."""

    if is_blank(value):
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raw = str(value).replace("€", "").replace(" ", "").strip()
    raw = raw.replace(".", "").replace(",", ".")
    try:
        return float(raw)
    except ValueError:
        return 0.0


def read_table(data: bytes, filename: str) -> pd.DataFrame:
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Formato no soportado (usa .csv o .xlsx)")
    try:
        if ext == ".csv":
            frame = pd.read_csv(io.BytesIO(data), sep=None, engine="python", dtype=str, encoding="utf-8-sig")
        else:
            frame = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=object)
    except Exception as exc:
        raise ValidationError(f"Error al procesar el archivo: {exc}") from exc
    frame.columns = [str(c).strip() for c in frame.columns]
    return frame


def _plain(value: Any) -> Any:
    if is_blank(value):
        return None
    if isinstance(value, (datetime, pd.Timestamp)):
        return value.isoformat()
    if isinstance(value, (int, float, str, bool)):
        return value
    return str(value)


class PayrollImportService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        storage: LocalStorage,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._storage = storage
        self._clock = clock

    def upload(self, *, data: bytes, filename: str, user_id: Optional[int]) -> UploadResult:
        if not data:
            raise ValidationError("No se ha subido ningún archivo")
        headers = list(read_table(data, filename).columns)
        if not headers:
            raise ValidationError("El archivo no tiene cabecera")

        now = self._clock()
        key = self._storage.save_bytes(f"payroll/{now.year}-{now.month:02d}", filename, data)
        batch_id = self._payroll.create_batch(
            year=now.year, month=now.month, source_filename=filename, file_key=key, created_by=user_id
        )
        log.info("Payroll batch %s uploaded (%s, %s columns)", batch_id, filename, len(headers))
        return UploadResult(
            batch_id=batch_id,
            headers=headers,
            message="Archivo subido correctamente. Por favor configura el mapeo.",
        )

    def get_batch(self, batch_id: int) -> PayrollBatch:
        batch = self._payroll.get_batch(int(batch_id))
        if not batch:
            raise NotFoundError("Lote de nóminas no encontrado")
        return batch

    def apply_mapping(self, batch_id: int, rules: Mapping[str, str]) -> int:
        """Map source columns onto payroll fields and replace the batch rows."""

        batch = self.get_batch(batch_id)
        rules = {k: str(v).strip() for k, v in (rules or {}).items() if v and str(v).strip()}
        unknown = sorted(set(rules) - set(TARGET_FIELDS))
        if unknown:
            raise ValidationError(f"Campos de destino no válidos: {', '.join(unknown)}")
        if not rules:
            raise ValidationError("Debes mapear al menos una columna")

        frame = read_table(self._storage.read(batch.file_key), batch.source_filename)
        missing = sorted(set(rules.values()) - set(frame.columns))
        if missing:
            raise ValidationError(f"Columnas no encontradas en el archivo: {', '.join(missing)}")

        rows = [self._row(record, rules) for record in frame.to_dict(orient="records") if not self._empty(record)]
        count = self._payroll.replace_rows(batch.batch_id, rows)
        self._payroll.set_status(batch.batch_id, PayrollBatchStatus.MAPPED)

        linked = sum(1 for r in rows if r.employee_id)
        log.info("Payroll batch %s mapped: rows=%s linked=%s", batch.batch_id, count, linked)
        return count

    @staticmethod
    def _empty(record: Mapping[str, Any]) -> bool:
        return all(is_blank(v) for v in record.values())

    def _row(self, record: Mapping[str, Any], rules: Mapping[str, str]) -> PayrollRowData:
        def value(field: str) -> Any:
            column = rules.get(field)
            return record.get(column) if column else None

        raw_name = value("employee_name")
        raw_dni = value("employee_dni")
        dni = None if is_blank(raw_dni) else str(raw_dni).replace(" ", "").replace("-", "").upper()
        employee = self._employees.get_by_dni(dni) if dni else None

        money = {f: parse_money(value(f)) for f in MONEY_FIELDS}
        return PayrollRowData(
            raw_employee_name="N/A" if is_blank(raw_name) else str(raw_name).strip(),
            employee_dni=dni,
            employee_id=employee.employee_id if employee else None,
            extra_data={str(k): _plain(v) for k, v in record.items()},
            **money,
        )

    def rows(self, batch_id: int) -> Sequence[PayrollRow]:
        self.get_batch(batch_id)
        return self._payroll.list_rows(int(batch_id))

    def list_batches(self) -> Sequence[PayrollBatch]:
        return self._payroll.list_batches()
