"""Delivery forms (actas de entrega) drawn on A4 with reportlab."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from .model import DeliveryItem

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
QR_SIZE = 75
BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class FormContext:
    """Header data shared by every form."""

    company_name: str
    company_cif: str
    employee_name: str
    employee_dni: str
    job_title: str
    city: str
    day: date
    logo_path: Optional[str] = None


class _FormWriter:
    """Top-down text cursor over a reportlab canvas."""

    def __init__(self, ctx: FormContext, *, subject: str, qr_image: bytes, title: str):
        self.ctx = ctx
        self.buf = io.BytesIO()
        self.c = canvas.Canvas(self.buf, pagesize=A4)
        self.c.setTitle(title)
        self.c.setSubject(subject)
        self.c.setAuthor(ctx.company_name)
        self._qr = qr_image
        self.y = PAGE_HEIGHT - MARGIN

        self._draw_page_furniture()
        self.heading(title)

    def _draw_page_furniture(self) -> None:
        if self.ctx.logo_path and os.path.isfile(self.ctx.logo_path):
            self.c.drawImage(
                self.ctx.logo_path, MARGIN, PAGE_HEIGHT - MARGIN - 50, width=100, height=50, preserveAspectRatio=True, mask="auto"
            )
            self.y -= 60
        # bottom-right corner
        self.c.drawImage(ImageReader(io.BytesIO(self._qr)), PAGE_WIDTH - MARGIN - QR_SIZE, 40, width=QR_SIZE, height=QR_SIZE)

    def _ensure_room(self, needed: float) -> None:
        if self.y - needed < 130:
            self.c.showPage()
            self.y = PAGE_HEIGHT - MARGIN
            self._draw_page_furniture()

    def heading(self, text: str) -> None:
        self.c.setFont(BOLD_FONT, 15)
        for line in simpleSplit(text, BOLD_FONT, 15, PAGE_WIDTH - 2 * MARGIN):
            self.c.drawCentredString(PAGE_WIDTH / 2, self.y, line)
            self.y -= 20
        self.y -= 10

    def line(self, text: str, *, bold: bool = False, size: int = 11) -> None:
        font = BOLD_FONT if bold else BODY_FONT
        lines = simpleSplit(text, font, size, PAGE_WIDTH - 2 * MARGIN) or [""]
        self._ensure_room(len(lines) * (size + 4))
        self.c.setFont(font, size)
        for part in lines:
            self.c.drawString(MARGIN, self.y, part)
            self.y -= size + 4

    def gap(self, lines: float = 1) -> None:
        self.y -= 15 * lines

    def company_and_employee(self, *, with_job_title: bool = True) -> None:
        self.line("DATOS DE LA EMPRESA:", bold=True)
        self.line(f"Nombre: {self.ctx.company_name}")
        self.line(f"CIF: {self.ctx.company_cif}")
        self.gap()
        self.line("DATOS DEL TRABAJADOR:", bold=True)
        self.line(f"Nombre: {self.ctx.employee_name}", bold=True)
        self.line(f"DNI: {self.ctx.employee_dni}")
        if with_job_title:
            self.line(f"Puesto: {self.ctx.job_title}")
        self.gap()

    def signatures(self, left: str, right: Optional[str]) -> None:
        self._ensure_room(90)
        self.gap(2)
        self.c.setFont(BODY_FONT, 11)
        self.c.drawString(MARGIN, self.y, left)
        if right:
            self.c.drawString(PAGE_WIDTH / 2 + 20, self.y, right)
        self.y -= 60
        self.line(f"En {self.ctx.city}, a {self.ctx.day.strftime('%d/%m/%Y')}")

    def finish(self) -> bytes:
        self.c.showPage()
        self.c.save()
        return self.buf.getvalue()


def _item_list(w: _FormWriter, items: Sequence[DeliveryItem]) -> None:
    for item in items:
        w.line(f"- {item.label}")
    w.gap()


def render_uniform_delivery(ctx: FormContext, items: Sequence[DeliveryItem], *, subject: str, qr_image: bytes) -> bytes:
    w = _FormWriter(ctx, subject=subject, qr_image=qr_image, title="ACTA DE ENTREGA DE UNIFORME Y ROPA DE TRABAJO")
    w.company_and_employee()
    w.line("D./Dña. declara haber recibido por parte de la empresa las siguientes prendas de uniforme y ropa de trabajo:")
    w.gap()
    _item_list(w, items)
    w.line(
        "El trabajador se compromete a la correcta conservación y limpieza de las prendas entregadas, "
        "debiendo devolverlas en caso de cese de la relación laboral."
    )
    w.signatures("Firma Empresa:", "Firma Trabajador:")
    return w.finish()


def render_epi_delivery(ctx: FormContext, items: Sequence[DeliveryItem], *, subject: str, qr_image: bytes) -> bytes:
    w = _FormWriter(
        ctx, subject=subject, qr_image=qr_image, title="ACTA DE ENTREGA DE EQUIPOS DE PROTECCIÓN INDIVIDUAL (EPI)"
    )
    w.company_and_employee()
    w.line(
        "D./Dña. declara haber recibido por parte de la empresa los siguientes Equipos de Protección "
        "Individual, así como la información sobre su uso y mantenimiento:"
    )
    w.gap()
    _item_list(w, items)
    w.line(
        "El trabajador se compromete a utilizar y cuidar correctamente los equipos entregados, informando "
        "a su superior de cualquier defecto o pérdida de los mismos."
    )
    w.signatures("Firma Empresa:", "Firma Trabajador:")
    return w.finish()


TECH_DEVICE_CLAUSES = (
    "1. El trabajador recibe el material descrito en perfecto estado de funcionamiento y se compromete a "
    "utilizarlo exclusivamente para fines laborales.",
    "2. El trabajador se hace responsable de la custodia del equipo. En caso de pérdida, rotura o robo por "
    "negligencia, el trabajador asumirá los costes de reparación o sustitución del dispositivo.",
    "3. A la finalización de la relación laboral, el trabajador devolverá el equipo y sus accesorios en el "
    "mismo estado en que se le entregó, salvo el desgaste normal por el uso.",
)


def render_tech_device_delivery(
    ctx: FormContext, device_name: str, serial_number: str, *, subject: str, qr_image: bytes
) -> bytes:
    w = _FormWriter(ctx, subject=subject, qr_image=qr_image, title="ACTA DE ENTREGA DE MATERIAL TECNOLÓGICO")
    w.company_and_employee(with_job_title=False)
    w.line("MATERIAL ENTREGADO:", bold=True)
    w.line(f"Dispositivo: {device_name}")
    w.line(f"Número de Serie / IMEI: {serial_number}")
    w.gap()
    w.line("CONDICIONES DE USO Y RESPONSABILIDAD:", bold=True)
    for clause in TECH_DEVICE_CLAUSES:
        w.gap(0.5)
        w.line(clause)
    w.signatures("Recibí (Firma Trabajador):", None)
    return w.finish()


def signature_overlay(text: str, *, width: float, height: float, x: float = 350, y: float = 75) -> bytes:
    """Single transparent page with ``text`` at (x, y); merged over each page of a filled form."""

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height))
    c.setFont(BODY_FONT, 10)
    c.drawString(x, y, text)
    c.showPage()
    c.save()
    return buf.getvalue()
