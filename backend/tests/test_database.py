"""
Quizo Backend — Persistence Gateway Tests
==========================================

What:  Tests for app.database: error translation in execute(), the
       per-request session scope, and the health ping.
How:   Mock sessions for failure injection; the SQLite store for ping.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError

from app import database
from app.exceptions import DatabaseError, StoreUnavailableError
from app.models.quiz import Quiz


class TestExecute:
    """execute() maps driver failures onto the application taxonomy."""

    @pytest.mark.asyncio
    async def test_operational_error_is_store_unavailable(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
        )

        with pytest.raises(StoreUnavailableError) as exc_info:
            await database.execute(mock_db_session, select(Quiz))

        assert exc_info.value.context["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_interface_error_is_store_unavailable(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=InterfaceError("SELECT 1", {}, Exception("connection closed"))
        )

        with pytest.raises(StoreUnavailableError):
            await database.execute(mock_db_session, select(Quiz))

    @pytest.mark.asyncio
    async def test_os_error_is_store_unavailable(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=ConnectionRefusedError("refused"))

        with pytest.raises(StoreUnavailableError):
            await database.execute(mock_db_session, select(Quiz))

    @pytest.mark.asyncio
    async def test_statement_failure_is_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await database.execute(mock_db_session, select(Quiz))

        # Driver text stays out of the client-facing message
        assert "NOT NULL" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_success_returns_result(self, mock_db_session):
        sentinel = MagicMock()
        mock_db_session.execute = AsyncMock(return_value=sentinel)

        assert await database.execute(mock_db_session, select(Quiz)) is sentinel


class TestSessionScope:
    """get_db_session() always gives the connection back."""

    def _factory_for(self, session):
        factory = MagicMock()
        factory.return_value.__aenter__.return_value = session
        factory.return_value.__aexit__.return_value = False
        return factory

    @pytest.mark.asyncio
    async def test_commits_and_closes_on_success(self, mock_db_session):
        with patch.object(database, "async_session_factory", self._factory_for(mock_db_session)):
            gen = database.get_db_session()
            session = await gen.__anext__()
            assert session is mock_db_session
            with pytest.raises(StopAsyncIteration):
                await gen.__anext__()

        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()
        mock_db_session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rolls_back_and_closes_on_error(self, mock_db_session):
        with patch.object(database, "async_session_factory", self._factory_for(mock_db_session)):
            gen = database.get_db_session()
            await gen.__anext__()
            with pytest.raises(RuntimeError, match="handler failed"):
                await gen.athrow(RuntimeError("handler failed"))

        mock_db_session.commit.assert_not_awaited()
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.close.assert_awaited_once()


class TestPing:
    @pytest.mark.asyncio
    async def test_ping_reachable_store(self, setup_db):
        assert await database.ping() is True
