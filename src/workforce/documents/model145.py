"""Modelo 145 (IRPF withholding data) filled from a fillable template with PyPDF2."""

from __future__ import annotations

import io
from datetime import date
from typing import Optional

from PyPDF2 import PdfReader, PdfWriter

from .pdf_forms import signature_overlay

SPANISH_MONTHS = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def model_145_fields(
    *,
    first_name: str,
    last_name: str,
    dni: str,
    birth_date: Optional[date],
    company_name: Optional[str],
    city: str,
    day: date,
) -> dict[str, str]:
    """Values keyed by the template's field names (original page, then the copy page)."""

    full_name = f"{last_name}, {first_name}"
    birth_year = str(birth_date.year) if birth_date else ""
    month = SPANISH_MONTHS[day.month - 1]

    fields = {
        "Apellidos y Nombre": full_name,
        "NIF": dni,
        "Año de nacimiento": birth_year,
        "La empresa o entidad": company_name or "",
        "En": city,
        "día": f"{day.day:02d}",
        "de": month,
        "de_2": str(day.year),
        # copy page
        "Apellidos y Nombre_2": full_name,
        "NIF_2": dni,
        "Año de nacimiento_2": birth_year,
        "La empresa o entidad_2": company_name or "",
        "En_2": city,
        "día_2": f"{day.day:02d}",
        "de_3": month,
        "de_4": str(day.year),
    }
    return {k: v for k, v in fields.items() if v}


def fill_model_145(template: bytes, values: dict[str, str], *, signatory: str, subject: str) -> bytes:
    reader = PdfReader(io.BytesIO(template))
    # clone_from keeps the pages and the AcroForm of the template
    writer = PdfWriter(clone_from=reader)

    present = set((reader.get_fields() or {}).keys())
    values = {k: v for k, v in values.items() if k in present}

    for page in writer.pages:
        if values:
            writer.update_page_form_field_values(page, values)
        if signatory:
            overlay = PdfReader(
                io.BytesIO(
                    signature_overlay(
                        signatory, width=float(page.mediabox.width), height=float(page.mediabox.height)
                    )
                )
            )
            page.merge_page(overlay.pages[0])

    writer.add_metadata({"/Subject": subject})

    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()

