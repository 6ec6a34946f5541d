"""
Tests for the server entry point.
"""

from unittest.mock import patch

import run_api
from books_api.main import app


def test_main_serves_app_in_process():
    """The app is served directly, without a reloader, on the configured address."""
    with patch("run_api.uvicorn.run") as mock_run:
        run_api.main()

    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args == (app,)
    assert kwargs.get("reload", False) is False
    assert kwargs["host"] == run_api.config.api_host
    assert kwargs["port"] == run_api.config.api_port


def test_main_keeps_structlog_handlers():
    """uvicorn's default logging config would replace the structlog handlers."""
    with patch("run_api.uvicorn.run") as mock_run:
        run_api.main()

    assert "log_config" in mock_run.call_args.kwargs
    assert mock_run.call_args.kwargs["log_config"] is None
