"""
Deal Hunter — exception hierarchy.

Provider and parse failures are absorbed by the search orchestrator, which
substitutes mock data. Only SettingsSaveFailure reaches the user.
"""

from __future__ import annotations


class DealHunterError(Exception):
    """Base exception for Deal Hunter failures."""


class MissingCredential(DealHunterError):
    """Raised when the selected provider has no API key configured."""


class ProviderCallFailure(DealHunterError):
    """Raised when a provider request fails (network, auth, rate limit, timeout)."""


class MalformedResponse(DealHunterError):
    """Raised when no JSON deal array can be extracted from a provider response."""


class SettingsSaveFailure(DealHunterError):
    """Raised when persisting settings fails."""
