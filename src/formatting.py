"""
Display helpers shared by the API payloads and the Streamlit UI.
"""

from typing import Iterable, List, Optional
from urllib.parse import quote

from .models import KIND_MOVIE, StreamingOffer, Title


def format_year(first_year: Optional[int], last_year: Optional[int] = None) -> str:
	if not first_year:
		return 'N/A'
	return f"{first_year}-{last_year}" if last_year else f"{first_year}"


def format_languages(entries: Iterable) -> str:
	"""Upper-cased language codes of audio or subtitle tracks, or 'None'."""
	codes = [e.language.upper() for e in (entries or []) if getattr(e, 'language', None)]
	return ', '.join(codes) if codes else 'None'


def quality_label(quality: Optional[str]) -> Optional[str]:
	return quality.upper() if quality else None


def show_type_label(kind: str) -> str:
	return 'Movie' if kind == KIND_MOVIE else 'Series'


def format_rating(rating: Optional[int]) -> Optional[str]:
	# provider scores run 0-100; 0 means "unrated"
	return f"{rating}/100" if rating else None


def results_heading(count: int, query: str) -> str:
	noun = 'result' if count == 1 else 'results'
	return f'Found {count} {noun} for "{query}"'


def offer_card_key(offer: StreamingOffer) -> str:
	"""Stable unique key for one offer card."""
	addon = offer.addon.id if offer.addon else 'no-addon'
	return f"{offer.service.id}-{addon}-{offer.quality or 'default'}-{offer.link}"


def watch_link(offer: StreamingOffer) -> str:
	return offer.video_link or offer.link


def top_cast(title: Title, limit: int = 5) -> List[str]:
	return list(title.cast[:limit])


def show_path(show_id: str) -> str:
	"""API path for one show; the id is a single escaped path segment."""
	return f"/show/{quote(str(show_id), safe='')}"
