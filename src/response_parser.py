"""
Provider response decoding module.
Turns the loosely-typed JSON returned by the streaming provider into typed
models, applying safe defaults for every optional field.
"""

# Typing helpers for the raw payload shapes
from typing import Any, Dict, List, Optional  # type hints

# Structured records used across the project
from .models import (
	AudioTrack,
	Genre,
	KIND_MOVIE,
	KIND_SERIES,
	OFFER_TYPES,
	Price,
	QUALITIES,
	Service,
	StreamingOffer,
	Subtitle,
	Title,
)
from .errors import ProviderError

# Console logging
from loguru import logger  # console logger


class ResponseParser:
	"""
	Decodes provider show payloads.
	Only `id` is mandatory; everything else may be missing and degrades to None or empty.
	"""

	def parse_shows(self, payload: Any) -> List[Title]:
		"""
		Decode a search response (a JSON array of shows).
		Malformed entries are skipped with a warning instead of failing the whole search.
		"""
		if not isinstance(payload, list):  # provider contract: array of shows
			raise ProviderError(f"Unexpected search response type: {type(payload).__name__}")

		titles = []  # accumulator
		for position, item in enumerate(payload):  # keep position for diagnostics
			try:
				titles.append(self.parse_show(item))  # dict -> Title
			except ProviderError as e:
				logger.warning(f"[Decoder] Skipping malformed show at position {position}: {e}")  # bad record
				continue  # move on
		return titles

	def parse_show(self, data: Any) -> Title:
		"""Decode a single show dict into a Title."""
		if not isinstance(data, dict) or not data.get('id'):  # id is the only hard requirement
			raise ProviderError("Show payload is missing an id")

		kind = KIND_SERIES if data.get('showType') == KIND_SERIES else KIND_MOVIE  # default to movie
		image_set = self._dict(data.get('imageSet'))  # poster/backdrop variants

		# Movies report releaseYear, series report firstAirYear/lastAirYear
		first_year = self._int(data.get('firstAirYear')) or self._int(data.get('releaseYear'))

		return Title(
			id=str(data['id']),
			name=str(data.get('title') or data.get('originalTitle') or ''),
			kind=kind,
			first_year=first_year,
			last_year=self._int(data.get('lastAirYear')),
			poster_url=self._str(self._dict(image_set.get('verticalPoster')).get('w480')) or self._str(data.get('posterUrl')),
			backdrop_url=self._str(self._dict(image_set.get('horizontalBackdrop')).get('w1080')) or self._str(data.get('backdropUrl')),
			rating=self._int(data.get('rating')),
			overview=self._str(data.get('overview')),
			genres=self._parse_genres(data.get('genres')),
			cast=self._strings(data.get('cast')),
			directors=self._strings(data.get('directors')),
			creators=self._strings(data.get('creators')),
			imdb_id=self._str(data.get('imdbId')),
			tmdb_id=self._str(data.get('tmdbId')),
			streaming_options=self._parse_streaming_options(data.get('streamingOptions')),
		)

	def parse_offer(self, data: Any) -> StreamingOffer:
		"""Decode one streaming option; raises ProviderError when it has no usable service."""
		data = self._dict(data)
		service = self._parse_service(data.get('service'))
		if service is None:
			raise ProviderError("Streaming option without a service id")

		offer_type = data.get('type')
		if offer_type not in OFFER_TYPES:  # unknown/missing types land in no bucket
			offer_type = None

		quality = data.get('quality')
		if quality not in QUALITIES:
			quality = None

		return StreamingOffer(
			service=service,
			offer_type=offer_type,
			link=self._str(data.get('link')) or '',
			quality=quality,
			video_link=self._str(data.get('videoLink')),
			price=self._parse_price(data.get('price')),
			addon=self._parse_service(data.get('addon')),
			audios=[AudioTrack(language=lang, region=region) for lang, region in self._languages(data.get('audios'))],
			subtitles=self._parse_subtitles(data.get('subtitles')),
			expires_on=self._int(data.get('expiresOn')),
		)

	def _parse_streaming_options(self, value: Any) -> Dict[str, List[StreamingOffer]]:
		options: Dict[str, List[StreamingOffer]] = {}  # country -> offers
		for country, raw_offers in self._dict(value).items():
			offers = []
			for raw in raw_offers if isinstance(raw_offers, list) else []:
				try:
					offers.append(self.parse_offer(raw))
				except ProviderError as e:
					logger.warning(f"[Decoder] Skipping streaming option in '{country}': {e}")
			options[str(country).lower()] = offers
		return options

	def _parse_service(self, value: Any) -> Optional[Service]:
		data = self._dict(value)
		if not data.get('id'):
			return None
		images = self._dict(data.get('imageSet'))
		return Service(
			id=str(data['id']),
			name=str(data.get('name') or data['id']),
			home_url=self._str(data.get('homePage')) or self._str(data.get('homeUrl')),
			light_image_url=self._str(images.get('lightThemeImage')),
			dark_image_url=self._str(images.get('darkThemeImage')),
		)

	def _parse_price(self, value: Any) -> Optional[Price]:
		data = self._dict(value)
		if not data:
			return None
		amount = data.get('amount')
		try:
			amount = float(amount) if amount is not None else None
		except (TypeError, ValueError):
			amount = None
		currency = self._str(data.get('currency'))
		formatted = self._str(data.get('formatted')) or (f"{amount} {currency or ''}".strip() if amount is not None else '')
		return Price(amount=amount, currency=currency, formatted=formatted)

	def _parse_subtitles(self, value: Any) -> List[Subtitle]:
		subtitles = []
		for item in value if isinstance(value, list) else []:
			item = self._dict(item)
			language, region = self._language_of(item)
			if not language:
				continue
			subtitles.append(Subtitle(language=language, region=region, closed_captions=bool(item.get('closedCaptions'))))
		return subtitles

	def _languages(self, value: Any) -> List[tuple]:
		pairs = []
		for item in value if isinstance(value, list) else []:
			language, region = self._language_of(self._dict(item))
			if language:
				pairs.append((language, region))
		return pairs

	def _language_of(self, item: Dict) -> tuple:
		# v4 nests language under "locale"; older payloads put it at the top level
		locale = self._dict(item.get('locale'))
		language = locale.get('language') or item.get('language')
		region = self._str(locale.get('region')) or self._str(item.get('region'))
		return (str(language) if language else '', region)

	def _parse_genres(self, value: Any) -> List[Genre]:
		genres = []
		for item in value if isinstance(value, list) else []:
			item = self._dict(item)
			if item.get('name'):
				genres.append(Genre(id=str(item.get('id') or item['name']), name=str(item['name'])))
		return genres

	def _strings(self, value: Any) -> List[str]:
		"""Normalize a value that may be None or a list into a list of clean strings."""
		if not isinstance(value, list):
			return []
		return [str(v).strip() for v in value if v]

	def _int(self, value: Any) -> Optional[int]:
		if value is None or isinstance(value, bool):
			return None
		try:
			return int(value)
		except (TypeError, ValueError):
			return None

	def _str(self, value: Any) -> Optional[str]:
		# free-text fields: anything that is not a non-empty string is treated as absent
		if not isinstance(value, str) or not value:
			return None
		return value

	def _dict(self, value: Any) -> Dict:
		return value if isinstance(value, dict) else {}
