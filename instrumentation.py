# ABOUTME: OpenTelemetry instrumentation for Langfuse observability
# ABOUTME: Initializes the Langfuse client so each chapter run is traced as a span

import logging
from typing import Optional
from langfuse import Langfuse, get_client
from config import Settings

logger = logging.getLogger(__name__)


def is_langfuse_configured(settings: Settings) -> bool:
    """
    Check if Langfuse credentials are configured.

    Args:
        settings: Application settings

    Returns:
        True if both public_key and secret_key are set, False otherwise
    """
    return bool(
        settings.langfuse_public_key and
        settings.langfuse_secret_key
    )


def initialize_instrumentation(settings: Settings) -> Optional[Langfuse]:
    """
    Initialize Langfuse tracing.

    The Langfuse client registers itself as the OpenTelemetry tracer
    provider, so spans from opentelemetry's tracer are exported to it.

    If Langfuse credentials are not configured or rejected, this function
    does nothing (allowing the digest to run without observability).

    Args:
        settings: Application settings containing Langfuse credentials

    Returns:
        The Langfuse client, or None when tracing is disabled
    """
    if not is_langfuse_configured(settings):
        logger.info("Langfuse not configured - skipping instrumentation")
        return None

    logger.info("Initializing Langfuse instrumentation...")

    Langfuse(
        public_key=settings.langfuse_public_key,
        secret_key=settings.langfuse_secret_key,
        host=settings.langfuse_host
    )
    langfuse = get_client()
    if not langfuse.auth_check():
        logger.warning("Langfuse credentials rejected - skipping instrumentation")
        return None

    logger.info("Langfuse instrumentation initialized")
    return langfuse


def shutdown_instrumentation(langfuse: Optional[Langfuse]) -> None:
    """Flush pending spans before the process exits."""
    if langfuse is not None:
        langfuse.flush()
        langfuse.shutdown()
