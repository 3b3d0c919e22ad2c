"""Tests for the FastAPI application factory module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from audience_api.core.config import Settings
from audience_api.main import create_app

_TEST_SETTINGS = {"counting_api_base_url": "https://counts.example.com", "counting_api_key": "test-key"}


class TestCreateApp:
    """Tests for create_app."""

    @pytest.fixture
    def app(self):
        with patch("audience_api.main.get_settings") as mock_settings:
            mock_settings.return_value = Settings(_env_file=None, **_TEST_SETTINGS)  # type: ignore[call-arg]
            return create_app()

    def test_app_is_created(self, app) -> None:
        assert app is not None
        assert app.title == "Audience API"

    def test_app_has_openapi_schema(self, app) -> None:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/openapi.json")
        assert response.status_code == 200
        schema = response.json()
        assert schema["info"]["title"] == "Audience API"
        assert "/api/v1/audience/combined-filters" in schema["paths"]
        assert "/api/v1/audience/geographic-options" in schema["paths"]

    def test_value_error_handler_registered(self, app) -> None:
        handler = app.exception_handlers.get(ValueError)
        assert handler is not None


class TestAppLifespan:
    """Tests for lifespan management."""

    @pytest.mark.asyncio
    async def test_lifespan_opens_and_closes_client(self) -> None:
        """Lifespan creates the counting client and dimension cache, then closes the client."""
        from audience_api.main import lifespan

        mock_app = MagicMock()

        with (
            patch("audience_api.main.get_settings") as mock_get_settings,
            patch("audience_api.main.setup_logging") as mock_setup_logging,
            patch("audience_api.main.CountingServiceClient") as mock_client_cls,
        ):
            mock_get_settings.return_value = Settings(_env_file=None, **_TEST_SETTINGS)  # type: ignore[call-arg]
            mock_client_cls.return_value.close = AsyncMock()

            async with lifespan(mock_app):
                mock_setup_logging.assert_called_once()
                mock_client_cls.assert_called_once_with(
                    "https://counts.example.com",
                    api_key="test-key",
                    timeout=60.0,
                )
                assert mock_app.state.counting_client is mock_client_cls.return_value

            mock_client_cls.return_value.close.assert_awaited_once()
