"""Factories for infrastructure components."""
from fileshare.infrastructure.factories.provider_factory import ProviderFactory

__all__ = ["ProviderFactory"]
