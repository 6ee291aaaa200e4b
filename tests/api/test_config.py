from fastapi.testclient import TestClient
from api.main import app

client = TestClient(app)

def test_config():
    response = client.get("/api/config")
    assert response.status_code == 200
    data = response.json()
    assert data["ocr_model"] == "mistral-ocr-latest"
    assert data["api_key_header"] == "X-Mistral-Api-Key"

def test_config_reflects_environment(monkeypatch):
    monkeypatch.setenv("MISTRAL_OCR_MODEL", "custom-ocr")
    response = client.get("/api/config")
    assert response.json()["ocr_model"] == "custom-ocr"
