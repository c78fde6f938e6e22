"""Adapter for the API-key documented economic-data provider."""

from .macro_service import MacroService

__all__ = ["MacroService"]
