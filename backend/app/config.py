"""Application settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_ENV_PATH)

DEFAULT_FOOTER_CONTINUE_TEXT = "Let op: de vragenlijst gaat verder op de achterkant."
DEFAULT_FOOTER_END_TEXT = "Einde van de vragenlijst. Bedankt voor het invullen."


@dataclass(frozen=True)
class Settings:
    cors_allow_origins: tuple[str, ...]
    file_io_endpoint: str
    file_io_expires: str
    pdf_download_timeout: float
    logo_download_timeout: float
    upload_timeout: float
    max_zip_bytes: int
    debug_plan_enabled: bool
    footer_continue_text: str
    footer_end_text: str


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer for environment variable {name}: {raw!r}") from exc


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@lru_cache()
def get_settings() -> Settings:
    origins_env = os.getenv("CORS_ALLOW_ORIGINS", "*")
    origins = tuple(origin.strip() for origin in origins_env.split(",") if origin.strip())
    if not origins:
        origins = ("*",)

    max_zip_mb = _int_env("MAX_ZIP_MB", 2048)

    return Settings(
        cors_allow_origins=origins,
        file_io_endpoint=os.getenv("FILE_IO_ENDPOINT", "https://file.io/"),
        file_io_expires=os.getenv("FILE_IO_EXPIRES", "14d"),
        pdf_download_timeout=float(_int_env("PDF_DOWNLOAD_TIMEOUT", 30)),
        logo_download_timeout=float(_int_env("LOGO_DOWNLOAD_TIMEOUT", 10)),
        upload_timeout=float(_int_env("UPLOAD_TIMEOUT", 300)),
        max_zip_bytes=max_zip_mb * 1024 * 1024,
        debug_plan_enabled=_bool_env("ENABLE_DEBUG_PLAN", True),
        footer_continue_text=os.getenv("FOOTER_CONTINUE_TEXT", DEFAULT_FOOTER_CONTINUE_TEXT),
        footer_end_text=os.getenv("FOOTER_END_TEXT", DEFAULT_FOOTER_END_TEXT),
    )
