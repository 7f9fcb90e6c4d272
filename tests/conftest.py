import pytest
from pathlib import Path

from nutrient_dws import NutrientClient
from tests.helpers.transport import RecordingTransport, PDF_BYTES


@pytest.fixture
def test_data_dir(tmp_path):
    return tmp_path


@pytest.fixture
def sample_pdf(test_data_dir) -> Path:
    path = test_data_dir / "sample.pdf"
    path.write_bytes(PDF_BYTES)
    return path


@pytest.fixture
def sample_png(test_data_dir) -> Path:
    path = test_data_dir / "sample.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake image")
    return path


@pytest.fixture
def sample_xfdf(test_data_dir) -> Path:
    path = test_data_dir / "annotations.xfdf"
    path.write_text(
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<xfdf xmlns="http://ns.adobe.com/xfdf/"><annots/></xfdf>'
    )
    return path


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(transport):
    with NutrientClient(api_key="test_api_key", transport=transport) as client:
        yield client
