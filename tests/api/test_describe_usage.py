from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import app
from services.providers import ProviderError

client = TestClient(app)

HEADERS = {"X-Mistral-Api-Key": "test-key"}


@patch("api.actions.describe.VisionDescriber")
def test_describe_image(mock_vision_cls):
    mock_vision_cls.return_value.describe.return_value = "A red circle."

    response = client.post(
        "/api/describe-image",
        json={"base64": "data:image/png;base64,QUJD"},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.json() == {"description": "A red circle."}
    mock_vision_cls.return_value.describe.assert_called_once_with("QUJD")


@patch("api.actions.describe.VisionDescriber")
def test_describe_image_without_answer(mock_vision_cls):
    mock_vision_cls.return_value.describe.return_value = None

    response = client.post("/api/describe-image", json={"base64": "QUJD"}, headers=HEADERS)

    assert response.status_code == 502


@patch("api.actions.describe.VisionDescriber")
def test_describe_image_model_failure(mock_vision_cls):
    mock_vision_cls.return_value.describe.side_effect = RuntimeError("model down")

    response = client.post("/api/describe-image", json={"base64": "QUJD"}, headers=HEADERS)

    assert response.status_code == 502
    assert response.json()["error"] == "Image description failed."


def test_describe_image_requires_payload():
    response = client.post("/api/describe-image", json={}, headers=HEADERS)
    assert response.status_code == 400


def test_usage_unsupported_without_url():
    response = client.get("/api/usage", headers=HEADERS)
    assert response.status_code == 501
    assert response.json()["unsupported"] is True


@patch("api.actions.usage.fetch_usage")
def test_usage_proxies_provider(mock_fetch, monkeypatch):
    monkeypatch.setenv("MISTRAL_USAGE_API_URL", "https://usage.example/v1")
    mock_fetch.return_value = {"tokens": 3}

    response = client.get("/api/usage", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"data": {"tokens": 3}}


@patch("api.actions.usage.fetch_usage")
def test_usage_mirrors_upstream_status(mock_fetch, monkeypatch):
    monkeypatch.setenv("MISTRAL_USAGE_API_URL", "https://usage.example/v1")
    mock_fetch.side_effect = ProviderError("Usage request failed (403)", status_code=403)

    response = client.get("/api/usage", headers=HEADERS)

    assert response.status_code == 403
    assert response.json()["error"] == "Usage request failed (403)"
