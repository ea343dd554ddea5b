"""
Startup checks and logging setup.
"""

import logging

from kriedko.core.config import (
    DEFAULT_ADMIN_PASS,
    DEFAULT_ADMIN_TOKEN,
    DEFAULT_SESSION_SECRET,
    Settings,
    validate_production_config,
)

logger = logging.getLogger(__name__)


def configure_startup_logging(level: str = "INFO"):
    """Configure logging for the service"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def run_startup_checks(settings: Settings) -> list:
    """
    Validate configuration before serving traffic.

    Production refuses insecure defaults (raises ValueError); other
    environments only log warnings.

    Returns:
        List of warning messages
    """
    validate_production_config(settings)

    warnings = []
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        warnings.append("SESSION_SECRET is the development default")
    if settings.admin_pass == DEFAULT_ADMIN_PASS:
        warnings.append("ADMIN_PASS is the development default")
    if settings.admin_token == DEFAULT_ADMIN_TOKEN:
        warnings.append("ADMIN_TOKEN is the development default")

    for message in warnings:
        logger.warning(message)

    logger.info(
        f"Starting in {settings.environment.upper()} mode "
        f"with {settings.storage_backend.value} storage"
    )
    return warnings
