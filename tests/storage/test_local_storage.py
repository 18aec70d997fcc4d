from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes import fixed_clock
from workforce.core.exceptions import NotFoundError, ValidationError
from workforce.storage.service import LocalStorage, sanitize_filename


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "files", clock=fixed_clock(datetime(2025, 3, 12, 9, 30, 0)))


def test_sanitize_filename():
    assert sanitize_filename("Nómina enero.pdf") == "Nomina_enero.pdf"
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("") == "file"


def test_save_and_read_under_root(storage):
    key = storage.save_bytes("documents/EXP_1", "Entrega Uniforme.pdf", b"%PDF")

    assert key == "documents/EXP_1/20250312T093000000000_Entrega_Uniforme.pdf"
    assert storage.read(key) == b"%PDF"
    assert storage.delete(key) is True
    assert storage.delete(key) is False
    with pytest.raises(NotFoundError):
        storage.read(key)


def test_keys_cannot_leave_the_root(storage, tmp_path):
    (tmp_path / "secret.txt").write_text("x")

    for key in ("../secret.txt", "documents/../../secret.txt", str(tmp_path / "secret.txt"), ""):
        with pytest.raises(ValidationError):
            storage.path_for(key)
    with pytest.raises(ValidationError):
        storage.read("../secret.txt")
