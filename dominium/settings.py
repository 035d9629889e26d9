from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


DEFAULT_SPREADSHEET_ID = "1AVL0xdYRou9fnoVO_AdE0jwPOsEBWoBP3u8J33y1egE"


def _env(name: str, default: str = ""):
    return field(default_factory=lambda: os.environ.get(name, default))


def _default_index_html() -> Path:
    return (Path(__file__).resolve().parent / "web" / "index.html").resolve()


@dataclass(frozen=True)
class Settings:
    # App
    APP_NAME: str = _env("APP_NAME", "Dominium demo")
    PORT: int = field(default_factory=lambda: int(os.environ.get("PORT", "5173")))
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")

    # Static UI
    INDEX_HTML: Path = field(
        default_factory=lambda: Path(os.environ.get("INDEX_HTML") or _default_index_html())
    )

    # Google Sheets
    SPREADSHEET_ID: str = _env("SPREADSHEET_ID", DEFAULT_SPREADSHEET_ID)
    # Raw service account JSON (Railway style); takes precedence over the key file.
    GOOGLE_SERVICE_ACCOUNT_JSON: str = _env("GOOGLE_SERVICE_ACCOUNT_JSON", "")
    GOOGLE_CREDENTIALS_FILE: str = _env("GOOGLE_CREDENTIALS_FILE", "credentials.json")
    CATALOG_RANGE: str = _env("CATALOG_RANGE", "Productos!A:D")
    LEDGER_RANGE: str = _env("LEDGER_RANGE", "Cajas!A:E")

    # Per-code lock around add-product lookup+append (single process only).
    ADD_PRODUCT_LOCK: bool = field(
        default_factory=lambda: os.environ.get("ADD_PRODUCT_LOCK", "false").lower() == "true"
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "INDEX_HTML", Path(self.INDEX_HTML).resolve())
        object.__setattr__(self, "PORT", int(self.PORT))
        object.__setattr__(self, "SPREADSHEET_ID", str(self.SPREADSHEET_ID or "").strip())

    def spreadsheet_url(self) -> str:
        if not self.SPREADSHEET_ID:
            return ""
        return f"https://docs.google.com/spreadsheets/d/{self.SPREADSHEET_ID}/edit"
