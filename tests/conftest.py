from __future__ import annotations

import pytest

from dominium.errors import RemoteServiceError
from dominium.settings import Settings
from dominium.web_server import create_app

HEADER = ["codigo", "nombre", "precio_sugerido_venta", "detalle"]


class FakeSheets:
    """In-memory stand-in for SheetsClient, keyed by sheet name."""

    def __init__(self, tables: dict[str, list[list]] | None = None):
        self.tables = {k: [list(r) for r in v] for k, v in (tables or {}).items()}
        self.reads: list[str] = []
        self.appends: list[tuple[str, list]] = []
        self.fail_with: str | None = None

    @staticmethod
    def _sheet(range_spec: str) -> str:
        return range_spec.split("!", 1)[0]

    def read_range(self, range_spec: str) -> list[list]:
        if self.fail_with:
            raise RemoteServiceError(self.fail_with)
        self.reads.append(range_spec)
        return [list(r) for r in self.tables.get(self._sheet(range_spec), [])]

    def append_row(self, range_spec: str, row: list) -> None:
        if self.fail_with:
            raise RemoteServiceError(self.fail_with)
        self.appends.append((range_spec, list(row)))
        self.tables.setdefault(self._sheet(range_spec), []).append(list(row))


@pytest.fixture
def index_html(tmp_path):
    p = tmp_path / "index.html"
    p.write_text("<!doctype html><title>Dominium</title>", encoding="utf-8")
    return p


@pytest.fixture
def settings(index_html, tmp_path):
    return Settings(
        SPREADSHEET_ID="sheet-123",
        GOOGLE_SERVICE_ACCOUNT_JSON="",
        GOOGLE_CREDENTIALS_FILE=str(tmp_path / "missing-credentials.json"),
        INDEX_HTML=index_html,
        ADD_PRODUCT_LOCK=False,
    )


@pytest.fixture
def sheets():
    return FakeSheets(
        {
            "Productos": [
                HEADER,
                ["A1", "Café molido", "4500", "Bolsa 500 g"],
                [" B2 ", "Yerba", "3200"],
                ["C3", "Azúcar", "1200", ""],
            ],
            "Cajas": [["codigo", "nombre", "precio", "detalle", "cantidad"]],
        }
    )


@pytest.fixture
def client(settings, sheets):
    app = create_app(settings, sheets)
    app.config.update(TESTING=True)
    return app.test_client()
