from __future__ import annotations

import argparse
import logging
import socket

from dominium.google_sheets import SheetsClient
from dominium.settings import Settings
from dominium.web_server import create_app


def _ensure_port_free(host: str, port: int) -> bool:
    # Returns True if we can bind (port free), False otherwise.
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((host, port))
            return True
        finally:
            s.close()
    except OSError:
        return False


def main(argv: list[str] | None = None) -> int:
    settings = Settings()

    p = argparse.ArgumentParser(description="Dominium demo - Productos / Cajas sobre Google Sheets")
    p.add_argument("--host", default="0.0.0.0", help="Bind host (use 0.0.0.0 for LAN)")
    p.add_argument("--port", type=int, default=settings.PORT, help="Port (default: $PORT or 5173)")
    p.add_argument("--debug", action="store_true", help="Flask debug mode")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not _ensure_port_free(args.host, args.port):
        print(f"El puerto está ocupado: {args.host}:{args.port}")
        return 2

    app = create_app(settings, SheetsClient(settings))

    print(f"{settings.APP_NAME} corriendo en http://127.0.0.1:{args.port}")
    print(f"Spreadsheet: {settings.spreadsheet_url() or '(no configurado)'}")

    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
