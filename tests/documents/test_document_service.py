from __future__ import annotations

import io
import json

import pytest
from PyPDF2 import PdfReader
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from tests.fakes import make_employee
from workforce.core.enums import AssetCategory, DocumentCategory
from workforce.core.exceptions import NotFoundError, ValidationError
from workforce.documents.model import DeliveryItem
from workforce.documents.qr import build_payload, qr_png


def test_qr_payload_is_compact_json(fixed_now):
    payload = build_payload("TECH_DEVICE", 7, fixed_now, name="Portátil", sn=None)

    assert json.loads(payload) == {"t": "TECH_DEVICE", "name": "Portátil", "eid": 7, "d": "2025-03-12T09:30:00"}
    assert " " not in payload
    assert qr_png(payload).startswith(b"\x89PNG")


def test_uniform_receipt_is_stored_with_metadata(container, repos):
    repos.employees.add(make_employee(1, dni="12345678Z"))

    doc = container.document_service.generate_uniform_receipt(1, [DeliveryItem(name="Chaqueta", size="M")])

    _, pdf = container.document_service.download(doc.document_id)
    assert pdf.startswith(b"%PDF")
    assert doc.category == DocumentCategory.OTHER
    assert doc.file_key.startswith("documents/EXP_1/")
    assert "Entrega_Uniforme_12345678Z_20250312093000" in doc.file_key
    meta = container.document_service.read_metadata(pdf)
    assert meta == {"t": "UNIFORME", "eid": 1, "d": "2025-03-12T09:30:00"}


def test_epi_generation_assigns_assets_and_consumes_stock(container, repos):
    repos.employees.add(make_employee(1))
    item_id = container.inventory_service.create_item(
        name="Guantes", category=AssetCategory.EPI, size=None, quantity=4, min_quantity=0
    )

    doc = container.document_service.generate_epi(
        1, [DeliveryItem(name="guantes"), DeliveryItem(name="Mascarilla", size="Única"), DeliveryItem(name="  ")], user_id=9
    )

    assert doc.category == DocumentCategory.PRL
    assert repos.inventory.get_item(item_id).quantity == 3
    assets = repos.assets.list(employee_id=1)
    assert [(a.name, a.inventory_item_id) for a in assets] == [("guantes", item_id), ("Mascarilla", None)]
    assert assets[1].notes.endswith("(Talla: Única)")


def test_delivery_needs_items(container, repos):
    repos.employees.add(make_employee(1))

    with pytest.raises(ValidationError):
        container.document_service.generate_uniform_receipt(1, [DeliveryItem(name=" ")])


def test_tech_device_receipt_embeds_device(container, repos):
    repos.employees.add(make_employee(1))

    doc = container.document_service.generate_tech_device(1, "Portátil Dell", None, user_id=9)

    assert doc.name == "Entrega Portátil Dell"
    _, pdf = container.document_service.download(doc.document_id)
    meta = container.document_service.read_metadata(pdf)
    assert (meta["t"], meta["name"], meta["sn"]) == ("TECH_DEVICE", "Portátil Dell", "N/A")
    [asset] = repos.assets.list(employee_id=1)
    assert asset.category == AssetCategory.TECH


def test_signed_upload_is_classified_by_metadata(container, repos):
    repos.employees.add(make_employee(1))
    generated = container.document_service.generate_epi_receipt(1, [DeliveryItem(name="Casco")])
    _, pdf = container.document_service.download(generated.document_id)

    doc = container.document_service.upload_and_classify(pdf, "acta_epi.pdf")

    assert doc.employee_id == 1
    assert doc.category == DocumentCategory.PRL
    assert doc.name == "acta_epi (Firmado)"
    assert len(container.document_service.list_for_employee(1)) == 2


def test_upload_without_metadata_is_rejected(container):
    with pytest.raises(ValidationError):
        container.document_service.upload_and_classify(b"not a pdf", "scan.pdf")


def _fillable_template(names) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for i, name in enumerate(names):
        c.acroForm.textfield(name=name, x=72, y=700 - i * 40, width=250, height=20)
    c.showPage()
    c.save()
    return buf.getvalue()


def test_model_145_fills_template_fields(container, repos, tmp_path):
    repos.employees.add(make_employee(1, dni="12345678Z", first_name="Ana", last_name="López"))
    (tmp_path / "modelo145.pdf").write_bytes(_fillable_template(["Apellidos y Nombre", "NIF", "En"]))

    doc = container.document_service.generate_model_145(1)

    assert doc.name == "Modelo 145 (Relleno)"
    _, pdf = container.document_service.download(doc.document_id)
    reader = PdfReader(io.BytesIO(pdf))
    assert len(reader.pages) == 1
    fields = reader.get_fields()
    assert fields["NIF"]["/V"] == "12345678Z"
    assert fields["Apellidos y Nombre"]["/V"] == "López, Ana"
    assert fields["En"]["/V"] == "Palma de Mallorca"
    assert "Firmante Pruebas" in reader.pages[0].extract_text()
    assert container.document_service.read_metadata(pdf)["t"] == "MODEL_145"


def test_model_145_requires_template(container, repos):
    repos.employees.add(make_employee(1))

    with pytest.raises(NotFoundError):
        container.document_service.generate_model_145(1)


def test_delete_removes_file(container, repos):
    repos.employees.add(make_employee(1))
    doc = container.document_service.upload(
        employee_id=1, filename="contrato.pdf", data=b"%PDF-1.4", category=DocumentCategory.CONTRACT
    )

    container.document_service.delete(doc.document_id)

    assert container.document_service.list_for_employee(1) == []
    assert not (container.storage.root / doc.file_key).exists()
    with pytest.raises(NotFoundError):
        container.document_service.get(doc.document_id)
