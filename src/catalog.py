"""
Catalog service module.
High-level API used by both the FastAPI server and the Streamlit UI:
validated title search and show details with normalized streaming options.
"""

from dataclasses import dataclass  # lightweight containers for results
from typing import List, Optional  # type annotations for clarity

from loguru import logger  # console logging

from .countries import display_name  # country code -> display name
from .live_search import MIN_QUERY_LENGTH, validate_query  # shared query rule
from .models import NormalizedOffer, Title  # core data classes
from .normalizer import StreamingOptionNormalizer  # dedupe/grouping logic
from .provider_client import AvailabilityClient  # provider adapter


@dataclass
class ShowDetails:
	show: Title  # decoded show
	country: str  # country the options belong to
	country_name: str  # display name (raw code if unknown)
	options: List[NormalizedOffer]  # deduped, display-ready offers

	@property
	def available(self) -> bool:
		"""False means 'nothing streamable in this country', not a fetch failure."""
		return bool(self.options)


class CatalogService:
	"""
	Combines the provider client and the normalizer.
	Provider errors (ProviderError / NotFoundError) propagate unchanged for the caller to map.
	"""

	def __init__(
		self,
		client: AvailabilityClient,  # injected provider adapter
		normalizer: Optional[StreamingOptionNormalizer] = None,  # default: streaming only
		min_query_length: int = MIN_QUERY_LENGTH,  # shorter queries are not searched
	):
		self.client = client
		self.normalizer = normalizer or StreamingOptionNormalizer()
		self.min_query_length = min_query_length

	def search(self, text: str, country: str) -> List[Title]:
		"""Search by title; raises ValidationError for too-short queries without calling the provider."""
		query = validate_query(text, self.min_query_length)
		logger.debug(f"[Catalog] search q='{query}' country={country}")
		return self.client.search(query, country)

	def show_details(self, show_id: str, country: str, include_paid: Optional[bool] = None) -> ShowDetails:
		"""Fetch a show and normalize its offers for the given country."""
		country = country.lower()
		show = self.client.get_by_id(show_id, country)
		options = self.normalizer.normalize(show.offers_for(country), include_paid=include_paid)
		logger.info(f"[Catalog] show '{show.name}' in {country}: {len(options)} streaming options")
		return ShowDetails(show=show, country=country, country_name=display_name(country), options=options)
