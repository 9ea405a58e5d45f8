"""
Streamlit UI for Where to Stream.
Calls the local FastAPI server at http://localhost:8000 to fetch search results and show details,
or runs the same pipeline in-process with the streaming provider client ("local mode").

Run API (optional):   uvicorn api:app --reload
Run UI:                streamlit run streamlit_app.py
"""

# HTTP client to call the API when running in API mode
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Typing to make function signatures clearer
from typing import Optional  # indicates values can be None

# Local imports for fallback/local mode (when API isn't used)
from src.catalog import CatalogService  # search + details pipeline
from src.config import load_settings  # env-based settings
from src.countries import COUNTRIES, DEFAULT_COUNTRY, display_label, filter_countries  # country registry
from src.errors import GENERIC_ERROR_MESSAGE, CatalogError, NotFoundError, ProviderError, ValidationError  # error taxonomy
from src.formatting import format_rating, results_heading, show_path, show_type_label  # display helpers
from src.live_search import validate_query  # shared "too short" rule
from src.logging_setup import configure_logging  # loguru sink setup
from src.normalizer import StreamingOptionNormalizer  # offer dedupe/grouping
from src.provider_client import AvailabilityClient  # provider adapter
from src.schemas import show_response, title_out  # same payload shapes as the API

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:8000"  # default API base URL

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Where to Stream", layout="wide")  # wide layout

# Main page title
st.title("🎬 Where to Stream")  # friendly header
st.caption("Search for any movie or TV show and discover where you can watch it across different countries and streaming services.")


class NotFound(Exception):
	"""The API or provider reported that the selected show does not exist."""


# Cache the local catalog so we only build the provider client once per session
@st.cache_resource(show_spinner=False)
def init_local_catalog() -> Optional[CatalogService]:
	"""Create a local CatalogService from environment settings."""
	try:
		settings = load_settings()  # RAPIDAPI_KEY is required
		configure_logging(settings.log_level)  # console sink at configured level
	except CatalogError as e:
		# Show an error in the UI so users know local mode failed
		st.error(f"Failed to initialize local mode: {e}")
		return None  # signal failure
	return CatalogService(
		client=AvailabilityClient.from_settings(settings),
		normalizer=StreamingOptionNormalizer(include_paid=settings.include_paid_options),
		min_query_length=settings.min_query_length,
	)


def configured_default_country() -> str:
	"""DEFAULT_COUNTRY from the environment; the registry default when settings cannot load."""
	try:
		return load_settings().default_country.lower()
	except CatalogError:  # API mode runs without a local credential
		return DEFAULT_COUNTRY


# Preselect the configured country on first load only
if "country" not in st.session_state:
	st.session_state["country"] = configured_default_country()

# Sidebar contains configuration controls
with st.sidebar:
	st.header("Settings")  # section label
	country_filter = st.text_input("Find a country", "", placeholder="Search countries...")  # narrows the dropdown
	country_choices = [c.code for c in filter_countries(country_filter)] or [c.code for c in COUNTRIES]
	if st.session_state["country"] not in country_choices:
		country_choices = [st.session_state["country"]] + country_choices  # keep current selection visible
	country = st.selectbox("Country", country_choices, key="country", format_func=display_label)  # flag + name
	include_paid = st.toggle("Include rent/buy options", value=False)  # streaming-only by default
	api_url = st.text_input("API URL", DEFAULT_API_URL)  # where the API lives
	# Toggle to force local mode; if API health probe fails we also fall back to local
	use_local = st.toggle("Use local mode (call the provider directly)", value=False, help="If enabled or API is unreachable, the app calls the streaming provider from this process.")

# If not forcing local, check quickly whether the API is reachable
api_available = False  # default assumption
if not use_local:
	try:
		h = requests.get(f"{api_url}/health", timeout=3)  # ping API health endpoint
		api_available = h.ok  # True if server responded 200 OK
	except requests.RequestException:
		api_available = False  # probe failed
		st.sidebar.info("API not reachable; will use local mode.")  # inform user

# Initialize local catalog only when needed (user toggle or API not available)
local_catalog: Optional[CatalogService] = None  # placeholder
if use_local or not api_available:
	local_catalog = init_local_catalog()  # build provider client
	if local_catalog is not None:
		st.sidebar.success("Local mode ready.")  # success note
	else:
		st.sidebar.error("Local mode failed to initialize.")  # error note


def fetch_results(query: str, country: str) -> dict:
	"""Return a search payload shaped like the API's SearchResponse."""
	if local_catalog is not None:
		titles = local_catalog.search(query, country)  # raises ValidationError / ProviderError
		return {"results": [title_out(t).model_dump() for t in titles]}
	resp = requests.get(f"{api_url}/search", params={"q": query, "country": country}, timeout=30)
	resp.raise_for_status()  # raise error if server responded with an error code
	return resp.json()  # parse JSON returned by API


def fetch_show(show_id: str, country: str, include_paid: bool) -> dict:
	"""Return a show payload shaped like the API's ShowResponse."""
	if local_catalog is not None:
		try:
			details = local_catalog.show_details(show_id, country, include_paid=include_paid)
		except NotFoundError as e:
			raise NotFound(show_id) from e
		return show_response(details).model_dump()
	resp = requests.get(
		f"{api_url}{show_path(show_id)}",
		params={"country": country, "include_paid": str(include_paid).lower()},
		timeout=30,
	)
	if resp.status_code == 404:
		raise NotFound(show_id)
	resp.raise_for_status()
	return resp.json()


def render_offer(option: dict):
	"""One 'Where to Watch' card."""
	with st.container(border=True):
		c1, c2 = st.columns([1, 4])
		with c1:
			if option["service"].get("image_url"):
				st.image(option["service"]["image_url"], width=48)  # service logo
		with c2:
			header = f"**{option['service']['name']}**"
			if option.get("quality"):
				header += f"  `{option['quality']}`"  # quality badge
			st.markdown(header)
			if option.get("addon"):
				st.caption(f"via {option['addon']['name']}")
		if option.get("price"):
			st.markdown(f"**{option['price']}**")
		en = "✓ Yes" if option["has_english_subtitles"] else "✗ No"
		ja = "✓ Yes" if option["has_japanese_subtitles"] else "✗ No"
		st.write(f"English Subs: {en} | Japanese Subs: {ja}")
		st.link_button("Watch Now", option["watch_url"])
		with st.expander("Show details"):
			st.write(f"**Audio:** {option['audios']}")
			st.write(f"**Subtitles:** {option['subtitles']}")


def render_show(payload: dict):
	"""Show details header followed by streaming option cards."""
	show = payload["show"]
	c1, c2 = st.columns([1, 3])
	with c1:
		if show.get("poster_url"):
			st.image(show["poster_url"], width="stretch")  # poster
	with c2:
		st.header(show["title"])
		meta = [show["years"], show_type_label(show["show_type"])]
		if format_rating(show.get("rating")):
			meta.append(f"⭐ {format_rating(show['rating'])}")
		st.caption(" | ".join(meta))
		if show.get("genres"):
			st.write(", ".join(g["name"] for g in show["genres"]))
		if show.get("overview"):
			st.subheader("Overview")
			st.write(show["overview"])
		if show.get("top_cast"):
			st.subheader("Cast")
			st.write(", ".join(show["top_cast"]))
		if show.get("directors"):
			st.subheader("Director")
			st.write(", ".join(show["directors"]))

	st.divider()
	st.subheader(f"Where to Watch in {payload['country_name']}")
	if not payload["available"]:
		st.info("Not currently available to stream in this country. Try selecting a different country.")
		return
	cols = st.columns(2)
	for i, option in enumerate(payload["streaming_options"]):
		with cols[i % 2]:
			render_offer(option)


# Main text input where users type a title
query = st.text_input("Search for movies and TV shows", placeholder="e.g., Inception")

# A show selected from the results takes over the page until the user goes back
selected = st.session_state.get("selected_show")
if selected:
	if st.button("← Back to results"):
		st.session_state.pop("selected_show", None)
		st.rerun()
	with st.spinner("Loading show..."):
		try:
			render_show(fetch_show(selected, country, include_paid))
		except NotFound:
			st.warning("Show not found. It may have been removed from the catalog.")
		except (ProviderError, requests.RequestException) as e:  # network/API errors
			st.error(GENERIC_ERROR_MESSAGE)
			st.caption(str(e))
elif query.strip():
	try:
		validate_query(query)  # short input is ignored, not reported
	except ValidationError:
		st.caption("Keep typing...")
	else:
		with st.spinner("Searching..."):
			try:
				payload = fetch_results(query.strip(), country)
			except (ProviderError, requests.RequestException) as e:  # network/API errors
				st.error(GENERIC_ERROR_MESSAGE)
				st.caption(str(e))
				payload = None

		if payload is not None:
			results = payload.get("results", [])
			if not results:
				st.write(f'No results found for "{query.strip()}". Try a different search term or check your spelling.')
			else:
				st.success(results_heading(len(results), query.strip()))
				st.divider()  # visual separator
				# Render each result as an image + details row
				for item in results:
					c1, c2 = st.columns([1, 4])  # small image column + large text column
					with c1:
						if item.get("poster_url"):
							st.image(item["poster_url"], width="stretch")  # poster
					with c2:
						st.subheader(f"{item['title']} ({item['years']})")  # title + year
						badges = [show_type_label(item["show_type"])]
						if format_rating(item.get("rating")):
							badges.append(format_rating(item["rating"]))
						st.caption(" | ".join(badges))
						if item.get("genres"):
							st.write(", ".join(g["name"] for g in item["genres"]))  # genres
						if st.button("Where to watch", key=f"show-{item['id']}"):
							st.session_state["selected_show"] = item["id"]
							st.rerun()
					st.divider()  # separator

# Show a footer indicator of current mode
st.sidebar.markdown("---")  # separator
if local_catalog is not None:
	st.sidebar.caption("Mode: Local (calling the streaming provider directly)")  # mode label
else:
	st.sidebar.caption("Mode: API client (ensure uvicorn api:app --reload is running)")  # mode label
