"""
Shared pytest fixtures for Rating Gateway tests.

Provides fixtures for:
- An isolated cache directory for every test
- In-memory condition cache
- Mock rating view (sync and async)
- Gateway factory wired to both
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from rating_gateway import (
    InMemoryRatingConditionCache,
    RatingGateway,
    clear_current_gateway,
)
from rating_gateway.cache.json_cache import DATA_DIR_ENV_VAR


# =============================================================================
# Isolation
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point the default JSON cache at a temp directory and drop the global gateway."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv(DATA_DIR_ENV_VAR, str(data_dir))
    clear_current_gateway()
    yield data_dir
    clear_current_gateway()


# =============================================================================
# Cache / View Fixtures
# =============================================================================

@pytest.fixture
def memory_cache():
    """Fresh in-memory condition cache."""
    return InMemoryRatingConditionCache()


@pytest.fixture
def rating_view():
    """Mock rating view with a sync and an async open method."""
    view = MagicMock()
    view.try_open_rating_page = MagicMock(return_value=None)
    view.try_open_rating_page_async = AsyncMock(return_value=None)
    return view


@pytest.fixture
def gateway(rating_view, memory_cache):
    """Empty gateway using the mock view and the in-memory cache."""
    return RatingGateway(rating_view=rating_view, condition_cache=memory_cache)


@pytest.fixture
def make_gateway(rating_view, memory_cache):
    """Factory for gateways pre-filled with conditions."""
    def _create(conditions=None, view=None, cache=None):
        return RatingGateway(
            conditions,
            rating_view=rating_view if view is None else view,
            condition_cache=memory_cache if cache is None else cache,
        )
    return _create
