from __future__ import annotations

import logging
import threading
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from typing import Any, Iterator

from dominium.errors import NotFoundError, ValidationError
from dominium.repos import CajaRepo, Product, ProductRepo
from dominium.settings import Settings

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Producto no existe en Productos"


def clean(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value).strip()


def _require(value: str, field_name: str) -> None:
    if not value:
        raise ValidationError(f"{field_name} requerido")


@dataclass(frozen=True)
class AddProductResult:
    product: Product
    already_exists: bool = False


class CodeLocks:
    """Advisory locks keyed by product code.

    Only serializes requests inside this process; other workers or operators
    editing the sheet can still create duplicates.
    """

    def __init__(self):
        self._guard = threading.Lock()
        # code -> [lock, number of holders/waiters]
        self._locks: dict[str, list] = {}

    @contextmanager
    def hold(self, code: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(code, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[code]


class CajaService:
    def __init__(self, sheets, settings: Settings):
        self.settings = settings
        self.products = ProductRepo(sheets, settings)
        self.cajas = CajaRepo(sheets, settings)
        self._locks = CodeLocks() if settings.ADD_PRODUCT_LOCK else None

    def _lock_for(self, code: str):
        if self._locks is None:
            return nullcontext()
        return self._locks.hold(code)

    def add_product(
        self,
        codigo: Any,
        nombre: Any,
        precio_sugerido_venta: Any,
        detalle: Any = "",
    ) -> AddProductResult:
        product = Product(
            codigo=clean(codigo),
            nombre=clean(nombre),
            precio_sugerido_venta=clean(precio_sugerido_venta),
            detalle=clean(detalle),
        )
        _require(product.codigo, "codigo")
        _require(product.nombre, "nombre")
        _require(product.precio_sugerido_venta, "precio_sugerido_venta")

        with self._lock_for(product.codigo):
            existing = self.products.find_by_code(product.codigo)
            if existing is not None:
                logger.info(f"Producto {product.codigo} ya existe; no se agrega")
                return AddProductResult(product=existing, already_exists=True)

            self.products.add(product)

        logger.info(f"Producto {product.codigo} agregado a {self.settings.CATALOG_RANGE}")
        return AddProductResult(product=product)

    def add_to_caja(self, codigo: Any) -> Product:
        code = clean(codigo)
        _require(code, "codigo")

        product = self.products.find_by_code(code)
        if product is None:
            raise NotFoundError(PRODUCT_NOT_FOUND)

        self.cajas.record_sale(product)
        logger.info(f"Venta registrada: {product.codigo} ({product.nombre})")
        return product
