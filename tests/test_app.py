"""Application startup."""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.config import get_settings
from app.main import app, lifespan


@pytest.mark.asyncio
async def test_lifespan_configures_logging_and_creates_tables():
    with (
        patch("app.main.init_db", new_callable=AsyncMock) as init_db,
        patch("app.main.logging.basicConfig") as basic_config,
    ):
        async with lifespan(app):
            basic_config.assert_called_once()

    init_db.assert_awaited_once()
    assert basic_config.call_args.kwargs["level"] == get_settings().log_level.upper()
