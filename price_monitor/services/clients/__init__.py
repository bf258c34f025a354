"""API clients for external services."""

from price_monitor.services.clients.openai_client import OpenAIClient

__all__ = ["OpenAIClient"]
