"""
Cliente mínimo de Monday.com GraphQL API (sin SDKs externos).

Requisitos cubiertos:
- requests
- solo lectura: cualquier query que contenga "mutation" se rechaza antes
  de tocar la red (SafetyViolationError)
- paginación por cursor (items_page / next_items_page)
- reintentos acotados para 429 y 5xx
"""

from __future__ import annotations

import re
import time
from typing import Any, Optional

import requests
from loguru import logger

from dashboard.shared.exceptions.monday import MondayApiError, SafetyViolationError

from .types import MondayBoard, MondayColumn, MondayCredentials, MondayItem


_MUTATION_RE = re.compile("mutation", re.IGNORECASE)

# Largo maximo del cuerpo de respuesta que se adjunta a un error HTTP
ERROR_BODY_LIMIT = 200

_ITEM_FIELDS = """
    id
    name
    group { title }
    column_values { id text value }
"""

FIRST_PAGE_QUERY = f"""
query ($boardId: [ID!], $limit: Int!) {{
    boards(ids: $boardId) {{
        items_page(limit: $limit) {{
            cursor
            items {{ {_ITEM_FIELDS} }}
        }}
    }}
}}
"""

NEXT_PAGE_QUERY = f"""
query ($cursor: String!, $limit: Int!) {{
    next_items_page(limit: $limit, cursor: $cursor) {{
        cursor
        items {{ {_ITEM_FIELDS} }}
    }}
}}
"""

BOARD_QUERY = """
query ($boardId: [ID!]) {
    boards(ids: $boardId) {
        id
        name
        columns { id title type }
    }
}
"""

ME_QUERY = "query { me { name email } }"


def ensure_read_only(query: str) -> None:
    """
    Red de seguridad: la integración es contractualmente de solo lectura.

    Busca el substring sin parsear GraphQL: también rechaza
    un campo o comentario que contenga la palabra.
    """
    if _MUTATION_RE.search(query or ""):
        raise SafetyViolationError()


class MondayClient:
    """
    Cliente HTTP de Monday.com.

    Importante:
    - No hace cast de tipos de columnas: eso se decide en el mapper.
    - Es síncrono; los casos de uso lo invocan vía asyncio.to_thread.
    """

    def __init__(
        self,
        credentials: MondayCredentials,
        *,
        session: Optional[requests.Session] = None,
        api_url: str = "https://api.monday.com/v2",
        api_version: str = "2024-10",
        timeout_s: int = 30,
        page_size: int = 500,
        max_retries: int = 2,
        min_backoff_s: float = 1.0,
        max_backoff_s: float = 20.0,
    ) -> None:
        self._creds = credentials
        self._api_url = api_url
        self._api_version = api_version
        self._timeout_s = timeout_s
        self._page_size = page_size
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._session = session or requests.Session()

    def execute_query(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Ejecuta una query GraphQL de solo lectura y retorna `data`.

        - mutation en el texto -> SafetyViolationError (sin llamada de red)
        - HTTP no-2xx -> MondayApiError con status y cuerpo truncado
        - `errors` en el payload -> MondayApiError con el primer mensaje
        """
        ensure_read_only(query)

        payload = self._request_json({"query": query, "variables": variables or {}})

        errors = payload.get("errors") or []
        if errors:
            first = errors[0]
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise MondayApiError(f"Monday.com GraphQL error: {message}")

        return payload.get("data") or {}

    def fetch_all_items(self, board_id: str) -> list[MondayItem]:
        """
        Trae todos los items del board, página por página.

        Termina cuando no hay cursor o cuando una página llega vacía
        (aunque traiga cursor), así un cursor que nunca se agota no
        produce un loop infinito.
        """
        data = self.execute_query(
            FIRST_PAGE_QUERY,
            {"boardId": [str(board_id)], "limit": self._page_size},
        )
        boards = data.get("boards") or []
        page = (boards[0] or {}).get("items_page") if boards else None
        if not page:
            return []

        raw_items: list[dict[str, Any]] = list(page.get("items") or [])
        if not raw_items:
            return []
        cursor = page.get("cursor")
        pages = 1

        while cursor:
            data = self.execute_query(
                NEXT_PAGE_QUERY,
                {"cursor": cursor, "limit": self._page_size},
            )
            next_page = data.get("next_items_page") or {}
            items = next_page.get("items") or []
            if not items:
                break
            raw_items.extend(items)
            cursor = next_page.get("cursor")
            pages += 1

        logger.debug(f"Board {board_id}: {len(raw_items)} items en {pages} pagina(s)")
        return [MondayItem.from_api(item) for item in raw_items]

    def fetch_board(self, board_id: str) -> Optional[MondayBoard]:
        """Retorna nombre y columnas del board, o None si no existe."""
        data = self.execute_query(BOARD_QUERY, {"boardId": [str(board_id)]})
        boards = data.get("boards") or []
        if not boards or not boards[0]:
            return None
        raw = boards[0]
        return MondayBoard(
            id=str(raw.get("id") or board_id),
            name=raw.get("name") or "",
            columns=[MondayColumn.from_api(c) for c in (raw.get("columns") or [])],
        )

    def fetch_board_columns(self, board_id: str) -> list[MondayColumn]:
        board = self.fetch_board(board_id)
        return board.columns if board else []

    def whoami(self) -> dict[str, Any]:
        """Usuario dueño del token (para probar la conexión)."""
        return self.execute_query(ME_QUERY).get("me") or {}

    def _request_json(self, body: dict[str, Any]) -> dict[str, Any]:
        """
        POST con backoff para 429/5xx.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial.
        - 5xx: exponencial.
        - 4xx (no 429): error inmediato (config/auth mal).
        """
        headers = {
            "Authorization": self._creds.token,
            "API-Version": self._api_version,
            "Content-Type": "application/json",
        }

        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.post(
                    self._api_url,
                    json=body,
                    headers=headers,
                    timeout=self._timeout_s,
                )
            except requests.Timeout as e:
                raise MondayApiError(f"Monday.com API timeout after {self._timeout_s}s") from e
            except requests.RequestException as e:
                raise MondayApiError(f"Monday.com API request failed: {e}") from e

            if 200 <= resp.status_code < 300:
                try:
                    return resp.json()
                except ValueError as e:
                    raise MondayApiError(
                        "Monday.com API returned a non-JSON body", http_status=resp.status_code
                    ) from e

            retryable = resp.status_code == 429 or 500 <= resp.status_code < 600
            if retryable and attempt < self._max_retries:
                sleep_s = self._retry_delay(resp, attempt)
                logger.warning(
                    f"Monday.com HTTP {resp.status_code}, reintento {attempt + 1}/{self._max_retries} en {sleep_s:.1f}s"
                )
                time.sleep(sleep_s)
                continue

            raise MondayApiError(
                f"Monday.com API error: HTTP {resp.status_code}: {(resp.text or '')[:ERROR_BODY_LIMIT]}",
                http_status=resp.status_code,
            )

        # Inalcanzable: el último intento siempre retorna o lanza
        raise MondayApiError("Monday.com API error: retries exhausted")

    def _retry_delay(self, resp: requests.Response, attempt: int) -> float:
        retry_after = resp.headers.get("Retry-After")
        if retry_after:
            try:
                return max(0.0, min(self._max_backoff_s, float(retry_after)))
            except ValueError:
                pass
        return min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
