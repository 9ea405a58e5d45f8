"""
Application settings.
Read once at startup from the environment (and .env / .env.local files).
The provider credential is required; without it the app refuses to start.
"""

from typing import Optional

from pydantic import Field, ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
	model_config = SettingsConfigDict(env_file=('.env', '.env.local'), extra='ignore', populate_by_name=True)

	rapidapi_key: str = Field(alias='RAPIDAPI_KEY', min_length=1)
	rapidapi_host: str = Field('streaming-availability.p.rapidapi.com', alias='RAPIDAPI_HOST')
	provider_base_url: Optional[str] = Field(None, alias='PROVIDER_BASE_URL')
	request_timeout_s: float = Field(15.0, alias='REQUEST_TIMEOUT_S')

	default_country: str = Field('us', alias='DEFAULT_COUNTRY')
	include_paid_options: bool = Field(False, alias='INCLUDE_PAID_OPTIONS')  # show rent/buy alongside streaming

	search_debounce_ms: int = Field(300, alias='SEARCH_DEBOUNCE_MS')
	min_query_length: int = Field(2, alias='MIN_QUERY_LENGTH')

	log_level: str = Field('INFO', alias='LOG_LEVEL')

	def resolved_base_url(self) -> str:
		return (self.provider_base_url or f"https://{self.rapidapi_host}").rstrip('/')


def load_settings(**overrides) -> Settings:
	"""Build Settings, turning a missing/empty RAPIDAPI_KEY into a ConfigurationError."""
	try:
		return Settings(**overrides)
	except PydanticValidationError as e:
		missing = [err for err in e.errors() if 'RAPIDAPI_KEY' in err.get('loc', ()) or 'rapidapi_key' in err.get('loc', ())]
		if missing:
			raise ConfigurationError("RAPIDAPI_KEY environment variable is not set") from e
		raise ConfigurationError(f"Invalid configuration: {e}") from e
