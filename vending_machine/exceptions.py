"""Исключения автомата. Обычный поток операций их не использует, только сборка конфигурации."""
from typing import Dict, Optional


class VendingError(Exception):
    """Базовое исключение пакета."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class ConfigurationError(VendingError):
    """Конфигурация автомата структурно невозможна (номиналы, резерв, пороги)."""
    pass
