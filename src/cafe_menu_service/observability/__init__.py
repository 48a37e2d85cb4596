"""OpenTelemetry instrumentation and logging setup for the menu service."""

from cafe_menu_service.observability.config import configure_logging, setup_observability
from cafe_menu_service.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
