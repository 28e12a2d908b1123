"""
app/dependencies.py

Purpose: FastAPI dependencies

- Hands the per-process BotContext to route handlers
- Answers 503 CONFIGURATION_ERROR while the app runs degraded
"""

from fastapi import Request

from app.core.config import Settings, settings
from app.core.exceptions import ConfigurationError
from app.flow.context import BotContext


def get_config(request: Request) -> Settings:
    return getattr(request.app.state, "config", None) or settings


def get_bot_context(request: Request) -> BotContext:
    """
    Returns the context built at startup.

    Raises:
        ConfigurationError: If startup skipped building it (missing secrets)
    """
    ctx = getattr(request.app.state, "bot_context", None)
    if ctx is None:
        missing = getattr(request.app.state, "missing_settings", None) or []
        raise ConfigurationError(
            "Bot is not configured",
            details={"missing": missing}
        )
    return ctx
