"""
Response schemas.
Pydantic models describing the JSON returned by the API; the Streamlit UI
builds the same shapes in local mode so both paths render identically.
"""

from typing import List, Optional  # precise typing for clarity

from pydantic import BaseModel  # response schema definitions

from .catalog import ShowDetails
from .formatting import format_languages, format_year, offer_card_key, quality_label, top_cast, watch_link
from .models import NormalizedOffer, Service, Title


class GenreOut(BaseModel):
	id: str
	name: str


class TitleOut(BaseModel):
	id: str  # provider id
	title: str  # display title
	show_type: str  # "movie" or "series"
	years: str  # "2008" / "2008-2013" / "N/A"
	first_year: Optional[int] = None
	last_year: Optional[int] = None
	poster_url: Optional[str] = None
	rating: Optional[int] = None  # 0-100
	genres: List[GenreOut] = []
	overview: Optional[str] = None
	cast: List[str] = []
	top_cast: List[str] = []  # first five billed cast members
	directors: List[str] = []


class ServiceOut(BaseModel):
	id: str
	name: str
	image_url: Optional[str] = None  # dark-theme logo, falls back to light


class OfferOut(BaseModel):
	key: str  # unique card key
	service: ServiceOut
	offer_type: Optional[str] = None
	addon: Optional[ServiceOut] = None  # "via ..." service for add-on offers
	quality: Optional[str] = None  # upper-cased badge text
	price: Optional[str] = None  # formatted price
	watch_url: str  # video link if present, else service link
	audios: str  # "EN, FR" or "None"
	subtitles: str  # "EN, JA" or "None"
	has_english_subtitles: bool
	has_japanese_subtitles: bool


class SearchResponse(BaseModel):
	query: str  # original query string
	country: str  # country searched
	elapsed_ms: float  # server-side search time in ms
	results: List[TitleOut]  # matching titles


class CountryOut(BaseModel):
	code: str
	name: str
	flag: str


class ShowResponse(BaseModel):
	show: TitleOut
	country: str
	country_name: str
	available: bool  # False: nothing streamable in this country
	streaming_options: List[OfferOut]


def title_out(title: Title) -> TitleOut:
	return TitleOut(
		id=title.id,
		title=title.name,
		show_type=title.kind,
		years=format_year(title.first_year, title.last_year),
		first_year=title.first_year,
		last_year=title.last_year,
		poster_url=title.poster_url,
		rating=title.rating,
		genres=[GenreOut(id=g.id, name=g.name) for g in title.genres],
		overview=title.overview,
		cast=title.cast,
		top_cast=top_cast(title),
		directors=title.directors,
	)


def service_out(service: Service) -> ServiceOut:
	return ServiceOut(id=service.id, name=service.name, image_url=service.dark_image_url or service.light_image_url)


def offer_out(entry: NormalizedOffer) -> OfferOut:
	offer = entry.offer
	return OfferOut(
		key=offer_card_key(offer),
		service=service_out(offer.service),
		offer_type=offer.offer_type,
		addon=service_out(offer.addon) if offer.addon else None,
		quality=quality_label(offer.quality),
		price=offer.price.formatted if offer.price else None,
		watch_url=watch_link(offer),
		audios=format_languages(offer.audios),
		subtitles=format_languages(offer.subtitles),
		has_english_subtitles=entry.has_english_subtitles,
		has_japanese_subtitles=entry.has_japanese_subtitles,
	)


def show_response(details: ShowDetails) -> ShowResponse:
	return ShowResponse(
		show=title_out(details.show),
		country=details.country,
		country_name=details.country_name,
		available=details.available,
		streaming_options=[offer_out(o) for o in details.options],
	)
