import io
import zipfile

import pytest

from backend.app.zip_creator import ZipInputFile, create_zip


def test_create_zip_keeps_order_and_content():
    files = [
        ZipInputFile(filename="vragenlijsten_01.pdf", payload=b"%PDF-1 first"),
        ZipInputFile(filename="vragenlijsten_02.pdf", payload=b"%PDF-1 second" * 100),
    ]
    archive = create_zip(files)

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.namelist() == ["vragenlijsten_01.pdf", "vragenlijsten_02.pdf"]
        assert zf.read("vragenlijsten_02.pdf") == b"%PDF-1 second" * 100
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())


def test_create_zip_rejects_duplicate_names():
    files = [ZipInputFile(filename="a.pdf", payload=b"1"), ZipInputFile(filename="a.pdf", payload=b"2")]
    with pytest.raises(ValueError):
        create_zip(files)


def test_create_zip_empty():
    with zipfile.ZipFile(io.BytesIO(create_zip([]))) as zf:
        assert zf.namelist() == []
