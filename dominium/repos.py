from __future__ import annotations

from dataclasses import asdict, dataclass

from dominium.settings import Settings


def _cell(row: list, i: int) -> str:
    if i >= len(row) or row[i] is None:
        return ""
    return str(row[i])


@dataclass(frozen=True)
class Product:
    """Fila de la hoja Productos (columnas A-D, en ese orden)."""

    codigo: str
    nombre: str
    precio_sugerido_venta: str
    detalle: str = ""

    @classmethod
    def from_row(cls, row: list) -> "Product":
        return cls(
            codigo=_cell(row, 0).strip(),
            nombre=_cell(row, 1),
            precio_sugerido_venta=_cell(row, 2),
            detalle=_cell(row, 3),
        )

    def to_row(self) -> list[str]:
        return [self.codigo, self.nombre, self.precio_sugerido_venta, self.detalle]

    def to_dict(self) -> dict:
        return asdict(self)


class ProductRepo:
    def __init__(self, sheets, settings: Settings):
        self.sheets = sheets
        self.settings = settings

    def _data_rows(self) -> list[list]:
        rows = self.sheets.read_range(self.settings.CATALOG_RANGE)
        # Row 1 is always the header.
        return rows[1:]

    def find_by_code(self, code: str) -> Product | None:
        wanted = (code or "").strip()
        if not wanted:
            return None
        for row in self._data_rows():
            if _cell(row or [], 0).strip() == wanted:
                return Product.from_row(row)
        return None

    def list_products(self) -> list[Product]:
        out: list[Product] = []
        for row in self._data_rows():
            p = Product.from_row(row or [])
            if p.codigo:
                out.append(p)
        return out

    def add(self, product: Product) -> None:
        self.sheets.append_row(self.settings.CATALOG_RANGE, product.to_row())


class CajaRepo:
    # No aggregation: every sale line is a single unit.
    QUANTITY = "1"

    def __init__(self, sheets, settings: Settings):
        self.sheets = sheets
        self.settings = settings

    def record_sale(self, product: Product) -> list[str]:
        row = product.to_row() + [self.QUANTITY]
        self.sheets.append_row(self.settings.LEDGER_RANGE, row)
        return row
