"""
Error taxonomy for the catalog search app.
Provider failures are converted to these types inside the client adapter,
so presentation code never sees raw transport exceptions.
"""

from typing import Optional

# Message shown to users for any provider-side failure
GENERIC_ERROR_MESSAGE = "Something went wrong while contacting the streaming provider. Please try again later."
NOT_FOUND_MESSAGE = "Show not found"


class CatalogError(Exception):
	"""Base class for all errors raised by this package."""


class ProviderError(CatalogError):
	"""Network or provider-side failure (non-2xx response, timeout, bad payload)."""

	def __init__(self, message: str, status_code: Optional[int] = None):
		super().__init__(message)
		self.status_code = status_code


class NotFoundError(ProviderError):
	"""The provider reports that the requested show id does not exist."""

	def __init__(self, show_id: str, status_code: Optional[int] = 404):
		super().__init__(f"Show '{show_id}' not found", status_code=status_code)
		self.show_id = show_id


class ValidationError(CatalogError):
	"""User input rejected before any provider call (e.g. query too short)."""


class ConfigurationError(CatalogError):
	"""Fatal startup problem, such as a missing API credential."""
