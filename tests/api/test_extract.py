from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import app
from services.providers import ProviderError

client = TestClient(app)

HEADERS = {"X-Mistral-Api-Key": "test-key"}
PDF = {"pdf": ("test.pdf", b"%PDF-1.4 dummy content", "application/pdf")}


@patch("api.actions.extract.MistralOcrClient")
def test_extract(mock_client_cls, provider_payload):
    mock_client_cls.return_value.extract.return_value = provider_payload

    response = client.post("/api/extract", files=PDF, headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["pageCount"] == 2
    assert data["source"] == "mistral"
    assert "<h1>Title</h1>" in data["html"]
    segment = data["pages"][0]["lines"][1]["segments"][1]
    assert segment["text"] == "bold"
    assert segment["style"]["fontWeight"] == 600
    assert data["pages"][0]["images"][0]["position"]["topLeft"] == {"x": 10.0, "y": 300.0}
    mock_client_cls.assert_called_once()
    assert mock_client_cls.call_args.args[0] == "test-key"
    mock_client_cls.return_value.extract.assert_called_once_with(b"%PDF-1.4 dummy content")


@patch("api.actions.extract.MistralOcrClient")
def test_extract_empty_result(mock_client_cls):
    mock_client_cls.return_value.extract.return_value = {}

    response = client.post("/api/extract", files=PDF, headers=HEADERS)

    assert response.status_code == 502
    assert response.json() == {"error": "OCR returned no extractable content."}


@patch("api.actions.extract.MistralOcrClient")
def test_extract_provider_failure(mock_client_cls):
    mock_client_cls.return_value.extract.side_effect = ProviderError(
        "Mistral OCR 500: boom", status_code=500, details="boom"
    )

    response = client.post("/api/extract", files=PDF, headers=HEADERS)

    assert response.status_code == 502
    assert response.json()["error"] == "Mistral OCR 500: boom"


def test_extract_requires_api_key():
    response = client.post("/api/extract", files=PDF)
    assert response.status_code == 400
    assert "API key" in response.json()["error"]


def test_extract_rejects_non_pdf():
    files = {"pdf": ("notes.txt", b"hello", "text/plain")}
    response = client.post("/api/extract", files=files, headers=HEADERS)
    assert response.status_code == 400
    assert response.json() == {"error": "Only PDF files are supported."}


def test_extract_requires_upload():
    response = client.post("/api/extract", headers=HEADERS)
    assert response.status_code == 400


def test_extract_rejects_oversized_upload(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "0")
    response = client.post("/api/extract", files=PDF, headers=HEADERS)
    assert response.status_code == 400
    assert "upload limit" in response.json()["error"]
