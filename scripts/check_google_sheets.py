"""
Prueba de conexión con Google Sheets.

Verifica que:
1. Las credenciales de la cuenta de servicio estén configuradas
2. La hoja Productos se pueda leer
3. (Opcional) Un código exista en el catálogo

Uso:
    python scripts/check_google_sheets.py [CODIGO]
"""

from __future__ import annotations

import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dominium.errors import DominiumError
from dominium.google_sheets import SheetsClient
from dominium.repos import ProductRepo
from dominium.settings import Settings


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    print("=" * 60)
    print("Google Sheets - prueba de conexión")
    print("=" * 60)
    print()

    settings = Settings()
    sheets = SheetsClient(settings)

    print("📋 Configuración actual:")
    print(f"  SPREADSHEET_ID: {settings.SPREADSHEET_ID or '(no configurado)'}")
    print(f"  Credenciales: {sheets.credentials_source.describe()}")
    print(f"  Catálogo: {settings.CATALOG_RANGE}")
    print(f"  Cajas: {settings.LEDGER_RANGE}")
    print()

    repo = ProductRepo(sheets, settings)
    try:
        products = repo.list_products()
        print(f"✅ Catálogo leído: {len(products)} productos")
        for p in products[:5]:
            print(f"  {p.codigo} - {p.nombre} ({p.precio_sugerido_venta})")

        if argv:
            code = argv[0]
            found = repo.find_by_code(code)
            if found is None:
                print(f"⚠️  El código {code!r} no existe en Productos")
            else:
                print(f"✅ {found.codigo}: {found.nombre} - {found.detalle or 'sin detalle'}")
    except DominiumError as e:
        print(f"❌ {e.message}")
        return 1

    print()
    print(f"📊 Spreadsheet URL: {settings.spreadsheet_url()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
