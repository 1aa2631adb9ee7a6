"""
Tipos y utilidades puras para la integracion Monday.com -> base interna.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MondayCredentials:
    token: str


@dataclass(frozen=True)
class MondayColumnValue:
    """
    Valor de una columna en un item.

    - text: texto visible (lo que muestra la UI de Monday)
    - value: valor crudo, normalmente JSON serializado (puede ser None)
    """

    id: str
    text: str = ""
    value: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MondayColumnValue":
        return cls(
            id=str(data.get("id") or ""),
            text=data.get("text") or "",
            value=data.get("value"),
        )


@dataclass(frozen=True)
class MondayItem:
    """Item de un board. Efimero: solo existe durante una corrida."""

    id: str
    name: str
    group_title: Optional[str] = None
    column_values: list[MondayColumnValue] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MondayItem":
        group = data.get("group") or {}
        return cls(
            id=str(data.get("id")),
            name=data.get("name") or "",
            group_title=group.get("title") or None,
            column_values=[
                MondayColumnValue.from_api(cv) for cv in (data.get("column_values") or [])
            ],
        )


@dataclass(frozen=True)
class MondayColumn:
    id: str
    title: str
    type: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MondayColumn":
        return cls(
            id=str(data.get("id") or ""),
            title=data.get("title") or "",
            type=data.get("type"),
        )


@dataclass(frozen=True)
class MondayBoard:
    id: str
    name: str
    columns: list[MondayColumn] = field(default_factory=list)
