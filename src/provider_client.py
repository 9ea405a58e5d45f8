"""
Streaming provider client.
Thin adapter over the Streaming Availability API (RapidAPI, v4) exposing
title search and show lookup, decoded into typed models.
No retries or caching: every failure is converted to a ProviderError
(or NotFoundError) and handed to the caller.
"""

import time  # request latency for logs
from typing import Any, Dict, List, Optional  # type hints
from urllib.parse import quote  # ids go into the URL path

# HTTP client for the provider's REST API
import requests  # synchronous HTTP

from loguru import logger  # console logger

from .config import Settings
from .errors import NotFoundError, ProviderError
from .models import Title
from .response_parser import ResponseParser


DEFAULT_HOST = 'streaming-availability.p.rapidapi.com'
OUTPUT_LANGUAGE = 'en'


class AvailabilityClient:
	"""
	Wraps the two provider calls the app needs.
	Build one per process at startup and pass it to whatever needs it.
	"""

	def __init__(
		self,
		api_key: str,  # RapidAPI credential
		host: str = DEFAULT_HOST,  # RapidAPI host header value
		base_url: Optional[str] = None,  # defaults to https://{host}
		timeout: float = 15.0,  # per-request timeout in seconds
		session: Optional[requests.Session] = None,  # injectable for tests
	):
		if not api_key:
			raise ValueError("api_key is required")
		self.host = host
		self.base_url = (base_url or f"https://{host}").rstrip('/')
		self.timeout = timeout
		self.parser = ResponseParser()
		self.session = session or requests.Session()
		self.session.headers.update({
			'X-RapidAPI-Key': api_key,
			'X-RapidAPI-Host': host,
		})
		logger.info(f"[Client] Streaming provider client ready for {self.base_url} (API key present: True)")

	@classmethod
	def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "AvailabilityClient":
		return cls(
			api_key=settings.rapidapi_key,
			host=settings.rapidapi_host,
			base_url=settings.resolved_base_url(),
			timeout=settings.request_timeout_s,
			session=session,
		)

	def search(self, title: str, country: str = 'us') -> List[Title]:
		"""Search shows by title in one country."""
		params = {'title': title, 'country': country.lower(), 'output_language': OUTPUT_LANGUAGE}
		payload = self._get('/shows/search/title', params)
		shows = self.parser.parse_shows(payload)
		logger.info(f"[Client] search title='{title}' country={country} -> {len(shows)} shows")
		return shows

	def get_by_id(self, show_id: str, country: str = 'us') -> Title:
		"""Fetch one show with its streaming options; NotFoundError if the id is unknown."""
		params = {'country': country.lower(), 'output_language': OUTPUT_LANGUAGE}
		payload = self._get(f"/shows/{quote(str(show_id), safe='')}", params, show_id=show_id)
		show = self.parser.parse_show(payload)
		logger.info(
			f"[Client] show id={show_id} country={country} -> '{show.name}' "
			f"with {len(show.offers_for(country))} offers"
		)
		return show

	def close(self) -> None:
		self.session.close()

	def _get(self, path: str, params: Dict[str, Any], show_id: Optional[str] = None) -> Any:
		url = f"{self.base_url}{path}"
		start = time.time()
		try:
			response = self.session.get(url, params=params, timeout=self.timeout)
		except requests.RequestException as e:  # DNS, connection, timeout...
			logger.error(f"[Client] GET {path} failed: {e}")
			raise ProviderError(f"Could not reach the streaming provider: {e}") from e

		elapsed_ms = (time.time() - start) * 1000
		logger.debug(f"[Client] GET {path} -> {response.status_code} in {elapsed_ms:.1f} ms")

		if response.status_code == 404 and show_id is not None:
			raise NotFoundError(show_id)
		if not response.ok:
			logger.error(f"[Client] GET {path} returned {response.status_code}: {response.text[:200]}")
			raise ProviderError(
				f"Streaming provider returned {response.status_code}",
				status_code=response.status_code,
			)

		try:
			return response.json()
		except ValueError as e:  # body was not JSON
			logger.error(f"[Client] GET {path} returned invalid JSON: {e}")
			raise ProviderError("Streaming provider returned an invalid response") from e
