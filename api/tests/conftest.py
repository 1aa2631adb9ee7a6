"""
Configuración de fixtures para pytest.
"""
from typing import AsyncGenerator, Dict, List, Optional, Union

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from dashboard.infrastructure.database.session import Base
from dashboard.infrastructure.external.monday.types import (
    MondayBoard,
    MondayColumn,
    MondayColumnValue,
    MondayItem,
)


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


def make_item(
    item_id: str,
    name: str = "",
    columns: Optional[Dict[str, Union[str, tuple]]] = None,
    group: Optional[str] = None,
) -> MondayItem:
    """
    Item de Monday.com para tests.

    columns: column_id -> texto visible, o (texto, valor_crudo)
    """
    values = []
    for column_id, spec in (columns or {}).items():
        text, raw = spec if isinstance(spec, tuple) else (spec, None)
        values.append(MondayColumnValue(id=column_id, text=text, value=raw))
    return MondayItem(id=item_id, name=name, group_title=group, column_values=values)


class FakeMondayClient:
    """
    Cliente en memoria con la misma interfaz que MondayClient.

    items: board_id -> lista de items, o una excepcion a lanzar en el fetch
    """

    def __init__(
        self,
        items: Optional[Dict[str, Union[List[MondayItem], Exception]]] = None,
        columns: Optional[Dict[str, List[MondayColumn]]] = None,
        me: Optional[dict] = None,
    ):
        self.items = items or {}
        self.columns = columns or {}
        self.me = me if me is not None else {"name": "Test User", "email": "test@example.com"}
        self.fetched: List[str] = []

    def fetch_all_items(self, board_id: str) -> List[MondayItem]:
        self.fetched.append(board_id)
        result = self.items.get(board_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def fetch_board(self, board_id: str) -> Optional[MondayBoard]:
        if board_id not in self.columns:
            return None
        return MondayBoard(id=board_id, name=f"Board {board_id}", columns=self.columns[board_id])

    def fetch_board_columns(self, board_id: str) -> List[MondayColumn]:
        return list(self.columns.get(board_id, []))

    def whoami(self) -> dict:
        if isinstance(self.me, Exception):
            raise self.me
        return self.me


class FakeCredentialProvider:
    """Tokens por usuario; registra cada consulta."""

    def __init__(self, tokens: Optional[Dict[int, str]] = None):
        self.tokens = tokens or {}
        self.calls: List[tuple] = []

    async def get_credential(self, user_id, service):
        self.calls.append((user_id, service))
        return self.tokens.get(user_id)


@pytest.fixture
def fake_credentials() -> FakeCredentialProvider:
    return FakeCredentialProvider({1: "user-token"})
