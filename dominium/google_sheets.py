"""
Adaptador de Google Sheets: lectura y append de rangos.

El spreadsheet hace de "base de datos" del demo. Solo se usan dos operaciones
de la API v4:

    sheets.read_range("Productos!A:D")          -> [[celda, ...], ...]
    sheets.append_row("Cajas!A:E", [...])

Credenciales (cuenta de servicio), en orden:
1. GOOGLE_SERVICE_ACCOUNT_JSON con el JSON completo de la llave
2. Archivo indicado en GOOGLE_CREDENTIALS_FILE (por defecto credentials.json)

No hay reintentos: cualquier error del backend sube como RemoteServiceError.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from dominium.errors import ConfigurationError, RemoteServiceError
from dominium.settings import Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _credentials_from_info(info: Any, origin: str) -> service_account.Credentials:
    if not isinstance(info, dict) or info.get("type") != "service_account":
        raise ConfigurationError(f"{origin} no contiene una llave de cuenta de servicio.")

    info = dict(info)
    # Keys pasted into env vars often arrive with literal "\n".
    if isinstance(info.get("private_key"), str):
        info["private_key"] = info["private_key"].replace("\\n", "\n")

    try:
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except (ValueError, KeyError, TypeError) as e:
        raise ConfigurationError(f"{origin} no es una llave de cuenta de servicio válida: {e}") from e


class EnvJsonCredentials:
    """Llave de cuenta de servicio pegada completa en una variable de entorno."""

    def __init__(self, raw_json: str, env_name: str = "GOOGLE_SERVICE_ACCOUNT_JSON"):
        self.raw_json = raw_json
        self.env_name = env_name

    def describe(self) -> str:
        return f"variable de entorno {self.env_name}"

    def load(self) -> service_account.Credentials:
        if not (self.raw_json or "").strip():
            raise ConfigurationError(f"Falta {self.env_name} en variables de entorno.")
        try:
            info = json.loads(self.raw_json)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"{self.env_name} no es JSON válido. Pégalo completo con llaves {{ }}."
            ) from e
        return _credentials_from_info(info, self.env_name)


class KeyFileCredentials:
    """Llave de cuenta de servicio en un archivo local."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def describe(self) -> str:
        return f"archivo {self.path}"

    def load(self) -> service_account.Credentials:
        if not self.path.exists():
            raise ConfigurationError(
                f"Archivo de credenciales {self.path} no encontrado. "
                "Descárgalo desde Google Cloud Console o define GOOGLE_SERVICE_ACCOUNT_JSON."
            )
        try:
            info = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"No se pudo leer {self.path}: {e}") from e
        return _credentials_from_info(info, str(self.path))


def credentials_source_from_settings(settings: Settings):
    if (settings.GOOGLE_SERVICE_ACCOUNT_JSON or "").strip():
        return EnvJsonCredentials(settings.GOOGLE_SERVICE_ACCOUNT_JSON)
    return KeyFileCredentials(settings.GOOGLE_CREDENTIALS_FILE)


def _error_message(e: Exception) -> str:
    if isinstance(e, HttpError):
        reason = getattr(e, "reason", None)
        if reason:
            return str(reason)
    return str(e) or e.__class__.__name__


class SheetsClient:
    """Lectura/append sobre el spreadsheet configurado.

    Cada llamada autentica y construye su propio servicio: el cliente HTTP de
    googleapiclient no es seguro entre hilos y Flask atiende en varios.
    """

    def __init__(
        self,
        settings: Settings,
        credentials_source=None,
        service_builder: Callable[..., Any] = build,
    ):
        self.settings = settings
        self.credentials_source = credentials_source or credentials_source_from_settings(settings)
        self._service_builder = service_builder

    def _values(self):
        if not self.settings.SPREADSHEET_ID:
            raise ConfigurationError("Falta SPREADSHEET_ID en la configuración.")
        creds = self.credentials_source.load()
        service = self._service_builder("sheets", "v4", credentials=creds, cache_discovery=False)
        return service.spreadsheets().values()

    def read_range(self, range_spec: str) -> list[list[str]]:
        logger.debug(f"Leyendo {range_spec}")
        try:
            result = self._values().get(
                spreadsheetId=self.settings.SPREADSHEET_ID,
                range=range_spec,
            ).execute()
        except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"Error leyendo {range_spec} desde Google Sheets: {e}")
            raise RemoteServiceError(_error_message(e)) from e

        rows = result.get("values", []) or []
        return [list(r or []) for r in rows]

    def append_row(self, range_spec: str, row: list[str]) -> None:
        logger.debug(f"Agregando fila a {range_spec}: {row}")
        try:
            self._values().append(
                spreadsheetId=self.settings.SPREADSHEET_ID,
                range=range_spec,
                valueInputOption="USER_ENTERED",
                body={"values": [list(row)]},
            ).execute()
        except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"Error agregando fila a {range_spec} en Google Sheets: {e}")
            raise RemoteServiceError(_error_message(e)) from e
