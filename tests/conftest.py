import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_notifier():
    """Mock notification dispatcher (dispatch is fire-and-forget, so not async)"""
    notifier = MagicMock()
    notifier.dispatch = MagicMock()
    notifier.drain = AsyncMock()
    return notifier
