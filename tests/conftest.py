# tests/conftest.py
import pytest

from core.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    # Settings are cached per process; env overrides need a fresh instance.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def provider_payload():
    """A Mistral-style OCR answer: markdown pages with one image."""
    return {
        "pages": [
            {
                "index": 0,
                "markdown": "# Title\n\nSome **bold** text.",
                "images": [
                    {
                        "id": "img-0.jpeg",
                        "top_left_x": 10,
                        "top_left_y": 300,
                        "bottom_right_x": 210,
                        "bottom_right_y": 400,
                        "image_base64": "data:image/jpeg;base64,QUJDREVGR0hJSktMTU5PUA==",
                    }
                ],
            },
            {
                "index": 1,
                "markdown": "Second page",
                "images": [],
            },
        ],
        "model": "mistral-ocr-latest",
    }
