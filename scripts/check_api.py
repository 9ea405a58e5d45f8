"""
Check connectivity to the streaming provider.

This script:
1) Loads settings (RAPIDAPI_KEY from the environment or .env.local)
2) Searches for "Inception" in the US
3) Fetches details for the first result
4) Reports how many streaming options survive normalization

Usage:
    python -m scripts.check_api [title] [country]
"""

import sys  # exit codes and argv
import time  # measure step timings

from loguru import logger  # console logging

from src.config import load_settings  # env-based settings
from src.errors import CatalogError  # any failure we know how to report
from src.logging_setup import configure_logging  # loguru sink setup
from src.normalizer import StreamingOptionNormalizer  # offer dedupe/grouping
from src.provider_client import AvailabilityClient  # provider adapter


def main(title: str = 'Inception', country: str = 'us') -> int:
	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Streaming provider connectivity check")
	logger.info("=" * 60)

	try:
		# 1) Settings
		logger.info("[1/4] Loading settings...")
		settings = load_settings()
		configure_logging(settings.log_level)
		logger.info(f"[OK] RAPIDAPI_KEY is set; host={settings.rapidapi_host}")
		client = AvailabilityClient.from_settings(settings)

		# 2) Search
		logger.info(f"[2/4] Searching for '{title}' in {country}...")
		t0 = time.time()
		results = client.search(title, country)
		logger.info(f"[OK] Found {len(results)} results in {time.time() - t0:.2f}s")
		if not results:
			logger.warning("No results; nothing more to check.")
			return 0
		first = results[0]
		logger.info(f"[OK] First result: {first.name} ({first.first_year})")

		# 3) Details
		logger.info("[3/4] Fetching show details...")
		show = client.get_by_id(first.id, country)
		logger.info(f"[OK] Overview: {(show.overview or '')[:100]}...")
		offers = show.offers_for(country)
		logger.info(f"[OK] Found {len(offers)} streaming options in {country.upper()}")

		# 4) Normalize
		logger.info("[4/4] Normalizing streaming options...")
		normalized = StreamingOptionNormalizer().normalize(offers)
		for entry in normalized:
			logger.info(
				f"  - {entry.offer.service.name} ({entry.offer.offer_type}) "
				f"EN subs={entry.has_english_subtitles} JA subs={entry.has_japanese_subtitles}"
			)
	except CatalogError as e:
		logger.error(f"API check failed: {e}")
		logger.error("Check that RAPIDAPI_KEY is set, that you are subscribed to the API on RapidAPI, and that you have not exceeded your rate limit.")
		return 1

	# Footer
	logger.info("All checks passed.")
	logger.info("=" * 60)
	return 0


if __name__ == '__main__':
	sys.exit(main(*sys.argv[1:3]))  # optional title/country overrides
