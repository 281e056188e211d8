# app/main.py
import logging

from fastapi import FastAPI

from .catalog import catalog_router
from .config import get_settings


settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Book Explorer",
    description="Search the Open Library catalogue and browse matching books.",
    version="1.0.0",
)

app.include_router(catalog_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
