from __future__ import annotations

import io
import mimetypes
from pathlib import Path

from flask import Flask, request, send_file

from ..common.validators import parse_enum
from ..common.web import current_employee_id, current_role, current_user_id, hr_required, json_body, login_required, ok
from ..core.enums import DocumentCategory, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container
from .model import DeliveryItem


def delivery_items(raw) -> list[DeliveryItem]:
    """``[{"name": ..., "size": ...}]`` or plain names."""

    items = []
    for entry in raw or []:
        if isinstance(entry, str):
            items.append(DeliveryItem(name=entry))
        elif isinstance(entry, dict):
            items.append(DeliveryItem(name=str(entry.get("name") or ""), size=entry.get("size")))
    return items


def _require_employee_id(body: dict) -> int:
    try:
        return int(body.get("employee_id"))
    except (TypeError, ValueError):
        raise ValidationError("Empleado es obligatorio")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/documents/employee/<int:employee_id>", methods=["GET"], endpoint="employee_documents")
    @login_required
    def employee_documents(employee_id: int):
        if current_role() not in {Role.ADMIN, Role.HR} and current_employee_id() != employee_id:
            raise AuthorizationError("No tienes permisos")
        return ok(container.document_service.list_for_employee(employee_id))

    @app.route("/api/documents/<int:document_id>/download", methods=["GET"], endpoint="download_document")
    @login_required
    def download_document(document_id: int):
        doc, data = container.document_service.download(document_id)
        if current_role() not in {Role.ADMIN, Role.HR} and current_employee_id() != doc.employee_id:
            raise AuthorizationError("No tienes permisos")
        filename = Path(doc.file_key).name
        mimetype = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        return send_file(io.BytesIO(data), mimetype=mimetype, as_attachment=True, download_name=filename)

    @app.route("/api/documents/<int:document_id>", methods=["DELETE"], endpoint="delete_document")
    @hr_required
    def delete_document(document_id: int):
        container.document_service.delete(document_id)
        return ok(message="Documento eliminado")

    @app.route("/api/documents/upload", methods=["POST"], endpoint="upload_document")
    @hr_required
    def upload_document():
        upload = request.files.get("file")
        if not upload:
            raise ValidationError("No se ha subido ningún archivo")
        try:
            employee_id = int(request.form.get("employee_id", ""))
        except ValueError:
            raise ValidationError("Empleado es obligatorio")
        doc = container.document_service.upload(
            employee_id=employee_id,
            filename=upload.filename or "documento",
            data=upload.read(),
            category=parse_enum(DocumentCategory, request.form.get("category") or "OTHER", "Categoría"),
            name=request.form.get("name"),
        )
        return ok(doc, "Documento subido", 201)

    @app.route("/api/documents/upload-signed", methods=["POST"], endpoint="upload_signed_document")
    @hr_required
    def upload_signed_document():
        upload = request.files.get("file")
        if not upload:
            raise ValidationError("No se ha subido ningún archivo")
        doc = container.document_service.upload_and_classify(upload.read(), upload.filename or "documento.pdf")
        return ok(doc, "Documento asignado automáticamente", 201)

    @app.route("/api/documents/metadata", methods=["POST"], endpoint="document_metadata")
    @hr_required
    def document_metadata():
        upload = request.files.get("file")
        if not upload:
            raise ValidationError("No se ha subido ningún archivo")
        return ok(container.document_service.read_metadata(upload.read()))

    @app.route("/api/documents/generate/uniform", methods=["POST"], endpoint="generate_uniform")
    @hr_required
    def generate_uniform():
        body = json_body()
        doc = container.document_service.generate_uniform(
            _require_employee_id(body), delivery_items(body.get("items")), user_id=current_user_id()
        )
        return ok(doc, "Acta de entrega de uniforme generada", 201)

    @app.route("/api/documents/generate/epi", methods=["POST"], endpoint="generate_epi")
    @hr_required
    def generate_epi():
        body = json_body()
        doc = container.document_service.generate_epi(
            _require_employee_id(body), delivery_items(body.get("items")), user_id=current_user_id()
        )
        return ok(doc, "Acta de entrega de EPIs generada", 201)

    @app.route("/api/documents/generate/tech-device", methods=["POST"], endpoint="generate_tech_device")
    @hr_required
    def generate_tech_device():
        body = json_body()
        doc = container.document_service.generate_tech_device(
            _require_employee_id(body),
            body.get("device_name") or "",
            body.get("serial_number"),
            user_id=current_user_id(),
        )
        return ok(doc, "Acta de entrega de material tecnológico generada", 201)

    @app.route("/api/documents/generate/model-145", methods=["POST"], endpoint="generate_model_145")
    @hr_required
    def generate_model_145():
        doc = container.document_service.generate_model_145(_require_employee_id(json_body()))
        return ok(doc, "Modelo 145 generado", 201)
