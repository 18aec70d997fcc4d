from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import optional_text, require_non_empty
from ..core.enums import AssetCategory, DocumentCategory, DocumentKind
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..inventory.service import InventoryService
from ..storage.service import LocalStorage
from . import pdf_forms
from .metadata import read_metadata
from .model import DeliveryItem, Document
from .model145 import fill_model_145, model_145_fields
from .qr import build_payload, qr_png
from .repository import DocumentRepository

log = get_logger("documents")

KIND_CATEGORY = {
    DocumentKind.UNIFORM: DocumentCategory.OTHER,
    DocumentKind.EPI: DocumentCategory.PRL,
    DocumentKind.TECH_DEVICE: DocumentCategory.OTHER,
    DocumentKind.MODEL_145: DocumentCategory.CONTRACT,
}


@dataclass(frozen=True)
class DocumentSettings:
    company_city: str
    signatory_name: str
    model_145_template: str
    logo_path: Optional[str] = None


class DocumentService:
    def __init__(
        self,
        documents: DocumentRepository,
        employees: EmployeeRepository,
        inventory: InventoryService,
        storage: LocalStorage,
        settings: DocumentSettings,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._documents = documents
        self._employees = employees
        self._inventory = inventory
        self._storage = storage
        self._settings = settings
        self._clock = clock

    # helpers

    def _employee(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Empleado no encontrado")
        return emp

    def _context(self, emp: Employee, now: datetime) -> pdf_forms.FormContext:
        return pdf_forms.FormContext(
            company_name=emp.company_name or "N/A",
            company_cif=emp.company_cif or "N/A",
            employee_name=emp.full_name,
            employee_dni=emp.dni,
            job_title=emp.job_title or "N/A",
            city=self._settings.company_city,
            day=now.date(),
            logo_path=self._settings.logo_path,
        )

    def _store(self, emp: Employee, *, file_prefix: str, pdf: bytes, name: str, category: DocumentCategory) -> Document:
        stamp = self._clock().strftime("%Y%m%d%H%M%S")
        key = self._storage.save_bytes(f"documents/EXP_{emp.employee_id}", f"{file_prefix}_{emp.dni}_{stamp}.pdf", pdf)
        document_id = self._documents.create(employee_id=emp.employee_id, name=name, category=category, file_key=key)
        log.info("Generated document %s (%s) for employee %s", document_id, name, emp.employee_id)
        return Document(
            document_id=document_id, employee_id=emp.employee_id, name=name, category=category, file_key=key
        )

    @staticmethod
    def _clean_items(items: Sequence[DeliveryItem]) -> list[DeliveryItem]:
        cleaned = [DeliveryItem(name=i.name.strip(), size=optional_text(i.size)) for i in items if i.name and i.name.strip()]
        if not cleaned:
            raise ValidationError("Debes indicar al menos un artículo")
        return cleaned

    def _assign(
        self,
        emp: Employee,
        items: Sequence[DeliveryItem],
        *,
        category: AssetCategory,
        note: str,
        user_id: Optional[int],
        serial_number: Optional[str] = None,
    ) -> None:
        for item in items:
            item_id = self._inventory.consume_by_name(item.name, user_id=user_id, employee_id=emp.employee_id)
            size_note = f" (Talla: {item.size})" if item.size else ""
            self._inventory.create_asset(
                employee_id=emp.employee_id,
                category=category,
                name=item.name,
                serial_number=serial_number,
                notes=f"{note}{size_note}",
                inventory_item_id=item_id,
            )

    # receipts: render + record only

    def generate_uniform_receipt(self, employee_id: int, items: Sequence[DeliveryItem]) -> Document:
        emp = self._employee(employee_id)
        items = self._clean_items(items)
        now = self._clock()
        subject = build_payload(DocumentKind.UNIFORM.value, emp.employee_id, now)
        pdf = pdf_forms.render_uniform_delivery(self._context(emp, now), items, subject=subject, qr_image=qr_png(subject))
        return self._store(
            emp,
            file_prefix="Entrega_Uniforme",
            pdf=pdf,
            name="Entrega Uniforme (Generado)",
            category=KIND_CATEGORY[DocumentKind.UNIFORM],
        )

    def generate_epi_receipt(self, employee_id: int, items: Sequence[DeliveryItem]) -> Document:
        emp = self._employee(employee_id)
        items = self._clean_items(items)
        now = self._clock()
        subject = build_payload(DocumentKind.EPI.value, emp.employee_id, now)
        pdf = pdf_forms.render_epi_delivery(self._context(emp, now), items, subject=subject, qr_image=qr_png(subject))
        return self._store(
            emp,
            file_prefix="Entrega_EPIs",
            pdf=pdf,
            name="Entrega EPIs (Generado)",
            category=KIND_CATEGORY[DocumentKind.EPI],
        )

    def generate_tech_device_receipt(self, employee_id: int, device_name: str, serial_number: Optional[str]) -> Document:
        emp = self._employee(employee_id)
        device_name = require_non_empty(device_name, "Dispositivo")
        serial_number = optional_text(serial_number) or "N/A"
        now = self._clock()
        subject = build_payload(
            DocumentKind.TECH_DEVICE.value, emp.employee_id, now, name=device_name, sn=serial_number
        )
        pdf = pdf_forms.render_tech_device_delivery(
            self._context(emp, now), device_name, serial_number, subject=subject, qr_image=qr_png(subject)
        )
        return self._store(
            emp,
            file_prefix="Entrega_Material_Tecnologico",
            pdf=pdf,
            name=f"Entrega {device_name}",
            category=KIND_CATEGORY[DocumentKind.TECH_DEVICE],
        )

    # full generation: render + record + assets + stock

    def generate_uniform(self, employee_id: int, items: Sequence[DeliveryItem], *, user_id: Optional[int] = None) -> Document:
        doc = self.generate_uniform_receipt(employee_id, items)
        self._assign(
            self._employee(employee_id),
            self._clean_items(items),
            category=AssetCategory.UNIFORM,
            note="Generado automáticamente al crear Acta de Entrega Uniforme",
            user_id=user_id,
        )
        return doc

    def generate_epi(self, employee_id: int, items: Sequence[DeliveryItem], *, user_id: Optional[int] = None) -> Document:
        doc = self.generate_epi_receipt(employee_id, items)
        self._assign(
            self._employee(employee_id),
            self._clean_items(items),
            category=AssetCategory.EPI,
            note="Generado automáticamente al crear Acta de Entrega EPI",
            user_id=user_id,
        )
        return doc

    def generate_tech_device(
        self, employee_id: int, device_name: str, serial_number: Optional[str], *, user_id: Optional[int] = None
    ) -> Document:
        doc = self.generate_tech_device_receipt(employee_id, device_name, serial_number)
        self._assign(
            self._employee(employee_id),
            [DeliveryItem(name=device_name.strip())],
            category=AssetCategory.TECH,
            note="Generado automáticamente al crear Acta de Entrega Material Tecnológico",
            user_id=user_id,
            serial_number=optional_text(serial_number),
        )
        return doc

    def generate_receipt_for_item(
        self,
        item_id: int,
        employee_id: int,
        *,
        device_name: Optional[str] = None,
        serial_number: Optional[str] = None,
    ) -> Document:
        """Receipt for an inventory item, picking the form from the item category."""

        item = self._inventory.get_item(item_id)
        name = optional_text(device_name) or item.name
        if item.category == AssetCategory.TECH:
            return self.generate_tech_device_receipt(employee_id, name, serial_number)
        if item.category == AssetCategory.UNIFORM:
            return self.generate_uniform_receipt(employee_id, [DeliveryItem(name=name, size=item.size)])
        return self.generate_epi_receipt(employee_id, [DeliveryItem(name=name, size=item.size)])

    def model_145_template(self) -> Path:
        template = Path(self._settings.model_145_template)
        if not template.is_file():
            raise NotFoundError("Plantilla Modelo 145 no encontrada")
        return template

    def generate_model_145(self, employee_id: int) -> Document:
        emp = self._employee(employee_id)
        template = self.model_145_template()

        now = self._clock()
        values = model_145_fields(
            first_name=emp.first_name,
            last_name=emp.last_name,
            dni=emp.dni,
            birth_date=emp.birth_date,
            company_name=emp.company_name,
            city=self._settings.company_city,
            day=now.date(),
        )
        pdf = fill_model_145(
            template.read_bytes(),
            values,
            signatory=self._settings.signatory_name,
            subject=build_payload(DocumentKind.MODEL_145.value, emp.employee_id, now),
        )
        return self._store(
            emp,
            file_prefix="Modelo_145",
            pdf=pdf,
            name="Modelo 145 (Relleno)",
            category=KIND_CATEGORY[DocumentKind.MODEL_145],
        )

    # uploads and records

    @staticmethod
    def read_metadata(pdf_bytes: bytes) -> Optional[dict]:
        return read_metadata(pdf_bytes)

    def upload(
        self, *, employee_id: int, filename: str, data: bytes, category: DocumentCategory, name: Optional[str] = None
    ) -> Document:
        emp = self._employee(employee_id)
        if not data:
            raise ValidationError("El archivo está vacío")
        key = self._storage.save_bytes(f"documents/EXP_{emp.employee_id}", filename, data)
        doc_name = optional_text(name) or Path(filename or "documento").stem
        document_id = self._documents.create(employee_id=emp.employee_id, name=doc_name, category=category, file_key=key)
        return Document(document_id=document_id, employee_id=emp.employee_id, name=doc_name, category=category, file_key=key)

    def upload_and_classify(self, pdf_bytes: bytes, filename: str) -> Document:
        """Store a signed PDF under the employee named in its embedded metadata."""

        meta = read_metadata(pdf_bytes)
        if not meta or "eid" not in meta:
            raise ValidationError("El PDF no contiene metadatos de asignación")

        try:
            employee_id = int(meta["eid"])
        except (TypeError, ValueError):
            raise ValidationError("Metadatos de asignación no válidos")

        try:
            kind = DocumentKind(meta.get("t"))
        except ValueError:
            kind = None
        category = KIND_CATEGORY.get(kind, DocumentCategory.OTHER)

        doc = self.upload(
            employee_id=employee_id,
            filename=filename,
            data=pdf_bytes,
            category=category,
            name=f"{Path(filename or 'documento').stem} (Firmado)",
        )
        log.info("Signed PDF %s classified to employee %s (%s)", filename, employee_id, meta.get("t"))
        return doc

    def list_for_employee(self, employee_id: int) -> Sequence[Document]:
        return self._documents.list_for_employee(int(employee_id))

    def get(self, document_id: int) -> Document:
        doc = self._documents.get_by_id(int(document_id))
        if not doc:
            raise NotFoundError("Documento no encontrado")
        return doc

    def download(self, document_id: int) -> tuple[Document, bytes]:
        doc = self.get(document_id)
        return doc, self._storage.read(doc.file_key)

    def delete(self, document_id: int) -> None:
        doc = self.get(document_id)
        self._documents.delete(doc.document_id)
        if not self._storage.delete(doc.file_key):
            log.warning("Document %s file already missing: %s", doc.document_id, doc.file_key)
