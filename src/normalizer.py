"""
Streaming option normalization module.
Groups a title's offers for one country by offer type, keeps the streamable
ones, removes duplicate services and derives subtitle language flags.
"""

from typing import Dict, Iterable, List, Tuple

from loguru import logger

from .models import (
	NormalizedOffer,
	OFFER_ADDON,
	OFFER_BUY,
	OFFER_FREE,
	OFFER_RENT,
	OFFER_SUBSCRIPTION,
	StreamingOffer,
)


# Language codes accepted for each subtitle flag (2- and 3-letter forms)
ENGLISH_CODES = frozenset({'en', 'eng'})
JAPANESE_CODES = frozenset({'ja', 'jpn'})


def group_by_type(offers: Iterable[StreamingOffer]) -> Dict[str, List[StreamingOffer]]:
	"""
	Partition offers into subscription, free, rent and buy buckets.
	Add-on offers go to the subscription bucket; input order is kept within a bucket.
	"""
	buckets: Dict[str, List[StreamingOffer]] = {
		OFFER_SUBSCRIPTION: [],
		OFFER_FREE: [],
		OFFER_RENT: [],
		OFFER_BUY: [],
	}
	for offer in offers or []:
		kind = OFFER_SUBSCRIPTION if offer.offer_type == OFFER_ADDON else offer.offer_type
		if kind in buckets:
			buckets[kind].append(offer)
	return buckets


def has_subtitle_language(offer: StreamingOffer, codes: frozenset) -> bool:
	return any((s.language or '').strip().lower() in codes for s in (offer.subtitles or []))


def subtitle_flags(offer: StreamingOffer) -> Tuple[bool, bool]:
	"""(has English subtitles, has Japanese subtitles) for one offer."""
	return has_subtitle_language(offer, ENGLISH_CODES), has_subtitle_language(offer, JAPANESE_CODES)


def dedupe_by_service(offers: Iterable[StreamingOffer]) -> List[StreamingOffer]:
	"""
	Keep one offer per service id.
	The first occurrence wins, except that a direct offer replaces an add-on
	candidate; the replacement takes the candidate's position.
	"""
	kept: Dict[str, StreamingOffer] = {}  # insertion order = first-seen order
	for offer in offers:
		key = offer.service.id
		current = kept.get(key)
		if current is None:
			kept[key] = offer
		elif offer.addon is None and current.addon is not None:
			kept[key] = offer
	return list(kept.values())


class StreamingOptionNormalizer:
	"""
	Turns the raw offers of one (title, country) into display-ready entries.
	By default only subscription/add-on and free offers are shown; rent and buy
	are appended after them when include_paid is set.
	"""

	def __init__(self, include_paid: bool = False):
		self.include_paid = include_paid

	def normalize(self, offers: Iterable[StreamingOffer], include_paid: bool = None) -> List[NormalizedOffer]:
		if include_paid is None:
			include_paid = self.include_paid

		grouped = group_by_type(offers)
		selected = grouped[OFFER_SUBSCRIPTION] + grouped[OFFER_FREE]
		if include_paid:
			selected += grouped[OFFER_RENT] + grouped[OFFER_BUY]

		deduped = dedupe_by_service(selected)
		logger.debug(
			f"[Normalizer] subscription={len(grouped[OFFER_SUBSCRIPTION])} free={len(grouped[OFFER_FREE])} "
			f"rent={len(grouped[OFFER_RENT])} buy={len(grouped[OFFER_BUY])} -> kept {len(deduped)} (include_paid={include_paid})"
		)

		results = []
		for offer in deduped:
			english, japanese = subtitle_flags(offer)
			results.append(NormalizedOffer(offer=offer, has_english_subtitles=english, has_japanese_subtitles=japanese))
		return results
