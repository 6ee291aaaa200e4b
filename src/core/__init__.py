"""Runtime configuration; ``.env`` is loaded into the environment on import."""

from dotenv import load_dotenv

from .config import DEFAULT_VISION_PROMPT, Settings, get_settings

load_dotenv()

__all__ = ["DEFAULT_VISION_PROMPT", "Settings", "get_settings"]
