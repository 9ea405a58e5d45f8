"""
Data models for the catalog search app.
Defines the records decoded from the streaming provider and the normalized
offer tuple used for display.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Dict, List, Optional  # dicts, lists, and optional values


# Offer types as the provider spells them
OFFER_SUBSCRIPTION = 'subscription'
OFFER_FREE = 'free'
OFFER_RENT = 'rent'
OFFER_BUY = 'buy'
OFFER_ADDON = 'addon'
OFFER_TYPES = (OFFER_SUBSCRIPTION, OFFER_FREE, OFFER_RENT, OFFER_BUY, OFFER_ADDON)

QUALITIES = ('sd', 'hd', 'uhd', 'qhd')

KIND_MOVIE = 'movie'
KIND_SERIES = 'series'


@dataclass(frozen=True)
class Service:
	"""A streaming service (Netflix, Hulu, ...) referenced by offers."""
	id: str  # provider service id, e.g. "netflix"
	name: str  # display name
	home_url: Optional[str] = None  # service landing page
	light_image_url: Optional[str] = None  # logo for light backgrounds
	dark_image_url: Optional[str] = None  # logo for dark backgrounds


@dataclass(frozen=True)
class Price:
	amount: Optional[float]  # numeric price if provided
	currency: Optional[str]  # ISO currency code
	formatted: str  # provider-formatted display string, e.g. "3.99 USD"


@dataclass(frozen=True)
class AudioTrack:
	language: str  # 2- or 3-letter language code as sent by the provider
	region: Optional[str] = None  # optional region qualifier


@dataclass(frozen=True)
class Subtitle:
	language: str  # 2- or 3-letter language code as sent by the provider
	region: Optional[str] = None  # optional region qualifier
	closed_captions: bool = False  # True for SDH/CC tracks


@dataclass(frozen=True)
class StreamingOffer:
	"""
	One way to watch a title in one country.
	Belongs to exactly one (title, country) pair.
	"""
	service: Service  # service carrying the offer
	offer_type: Optional[str]  # one of OFFER_TYPES, None if unknown
	link: str  # deep link to the title on the service
	quality: Optional[str] = None  # one of QUALITIES
	video_link: Optional[str] = None  # direct playback link when available
	price: Optional[Price] = None  # only for rent/buy offers
	addon: Optional[Service] = None  # intermediary bundle for add-on offers
	audios: List[AudioTrack] = field(default_factory=list)  # audio tracks
	subtitles: List[Subtitle] = field(default_factory=list)  # subtitle tracks
	expires_on: Optional[int] = None  # unix timestamp when the offer leaves


@dataclass(frozen=True)
class Genre:
	id: str
	name: str


@dataclass(frozen=True)
class Title:
	"""
	A movie or series as returned by the provider.
	Immutable once fetched; only lives for one request/render cycle.
	"""
	id: str  # provider-assigned id
	name: str  # human-readable title
	kind: str  # KIND_MOVIE or KIND_SERIES
	first_year: Optional[int] = None  # release year / first air year
	last_year: Optional[int] = None  # last air year for finished series
	poster_url: Optional[str] = None  # vertical poster
	backdrop_url: Optional[str] = None  # horizontal backdrop
	rating: Optional[int] = None  # provider score on a 0-100 scale
	overview: Optional[str] = None  # synopsis
	genres: List[Genre] = field(default_factory=list)
	cast: List[str] = field(default_factory=list)
	directors: List[str] = field(default_factory=list)
	creators: List[str] = field(default_factory=list)
	imdb_id: Optional[str] = None
	tmdb_id: Optional[str] = None
	streaming_options: Dict[str, List[StreamingOffer]] = field(default_factory=dict)  # country -> offers

	def offers_for(self, country: str) -> List[StreamingOffer]:
		"""Return the offers for one country code (empty list if none)."""
		return list(self.streaming_options.get((country or '').lower(), []))


@dataclass(frozen=True)
class NormalizedOffer:
	"""A deduplicated offer plus its derived subtitle flags."""
	offer: StreamingOffer
	has_english_subtitles: bool
	has_japanese_subtitles: bool
