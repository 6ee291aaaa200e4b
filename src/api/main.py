from __future__ import annotations

from fastapi import FastAPI

from api.actions import config, describe, export, extract, health, usage
from api.errors import register_error_handlers
from pdfextract import __version__

app = FastAPI(title="PDF Extract API", version=__version__)

register_error_handlers(app)

for action in (health, config, extract, export, describe, usage):
    app.include_router(action.router, prefix="/api")
