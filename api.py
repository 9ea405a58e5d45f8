"""
FastAPI server exposing the streaming catalog API.
Endpoints:
- GET /health: basic health check
- GET /countries?q=...: country registry, filtered like the selector's search box
- GET /search?q=...&country=us: titles matching a free-text query
- GET /show/{id}?country=us&include_paid=false: show details with deduplicated streaming options
- WS  /ws/search: search-as-you-type; messages are debounced and only the latest query is answered

Startup reads settings and builds the provider client once; a missing
RAPIDAPI_KEY aborts startup.
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import List, Optional  # precise typing for clarity

# Import FastAPI primitives for HTTP and websocket routes
from fastapi import FastAPI, HTTPException, Query, Request, WebSocket, WebSocketDisconnect  # FastAPI primitives

# Import our internal modules for configuration, provider access and output shapes
from src.catalog import CatalogService  # search + show details
from src.config import Settings, load_settings  # env-based settings
from src.countries import DEFAULT_COUNTRY, filter_countries  # country registry
from src.errors import GENERIC_ERROR_MESSAGE, NOT_FOUND_MESSAGE, NotFoundError, ProviderError, ValidationError  # error taxonomy
from src.live_search import LiveSearch  # debounced search for websocket clients
from src.logging_setup import configure_logging  # loguru sink setup
from src.normalizer import StreamingOptionNormalizer  # offer dedupe/grouping
from src.provider_client import AvailabilityClient  # provider adapter
from src.schemas import CountryOut, SearchResponse, ShowResponse, show_response, title_out  # response models

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger


def create_app(catalog: Optional[CatalogService] = None, settings: Optional[Settings] = None) -> FastAPI:
	"""
	Build the FastAPI application.
	Pass `catalog`/`settings` to inject ready-made collaborators (tests do); otherwise
	they are built from the environment at startup.
	"""
	app = FastAPI(title="Where to Stream API", version="1.0.0")  # web app
	app.state.catalog = catalog  # set at startup if not injected
	app.state.settings = settings
	app.state.startup_seconds = 0.0

	# FastAPI startup hook to initialize the provider client once
	@app.on_event("startup")
	async def startup_event():
		"""Load settings and construct the provider client; fail fast without a credential."""
		start = time.time()  # start timer for startup latency
		if app.state.settings is None:
			app.state.settings = load_settings()  # raises ConfigurationError if RAPIDAPI_KEY is missing
		configure_logging(app.state.settings.log_level)  # console sink at configured level
		logger.info("[API] Startup: building streaming provider client...")  # log intent

		if app.state.catalog is None:
			s = app.state.settings
			app.state.catalog = CatalogService(
				client=AvailabilityClient.from_settings(s),  # one client per process
				normalizer=StreamingOptionNormalizer(include_paid=s.include_paid_options),
				min_query_length=s.min_query_length,
			)

		app.state.startup_seconds = time.time() - start  # elapsed seconds
		logger.info(f"[API] Startup complete in {app.state.startup_seconds:.2f}s")  # summary log

	@app.on_event("shutdown")
	async def shutdown_event():
		catalog = app.state.catalog
		if catalog is not None and isinstance(catalog.client, AvailabilityClient):
			catalog.client.close()  # release pooled connections

	def get_catalog(request: Request) -> CatalogService:
		catalog = request.app.state.catalog
		if catalog is None:  # startup has not run
			raise HTTPException(status_code=503, detail="Service is starting up")
		return catalog

	def default_country() -> str:
		settings = app.state.settings
		return settings.default_country.lower() if settings is not None else DEFAULT_COUNTRY  # settings load at startup

	# Simple health endpoint for readiness checks
	@app.get("/health")
	async def health():
		"""Return minimal health info for liveness/readiness probes."""
		return {
			"status": "ok",  # constant indicator
			"adapter_ready": app.state.catalog is not None,  # True once the client is built
			"startup_seconds": round(app.state.startup_seconds, 2),  # startup latency
		}

	@app.get("/countries", response_model=List[CountryOut])
	async def countries(q: str = Query("", description="Filter text for country names")):
		"""List supported countries, optionally filtered by name."""
		return [CountryOut(code=c.code, name=c.name, flag=c.flag) for c in filter_countries(q)]

	# Main search endpoint that accepts a free-text title query
	@app.get("/search", response_model=SearchResponse)
	def search(
		request: Request,
		q: str = Query("", description="Movie or TV show title"),
		country: Optional[str] = Query(None, description="Country code, e.g. 'us'; defaults to DEFAULT_COUNTRY"),
	):
		"""Search the provider by title; too-short queries return no results without a provider call."""
		catalog = get_catalog(request)
		country = country or default_country()
		start = time.time()  # start timer
		logger.debug(f"[API] /search q='{q}' country={country}")  # debug log of input

		try:
			titles = catalog.search(q, country)  # delegate to the catalog
		except ValidationError:
			logger.debug(f"[API] /search ignored short query '{q}'")
			return SearchResponse(query=q, country=country, elapsed_ms=0.0, results=[])  # nothing to search
		except ProviderError as e:
			logger.error(f"[API] /search failed for q='{q}': {e}")
			raise HTTPException(status_code=502, detail=GENERIC_ERROR_MESSAGE)

		elapsed_ms = (time.time() - start) * 1000  # compute ms
		logger.info(f"[API] /search served {len(titles)} results in {elapsed_ms:.2f} ms")  # summary
		return SearchResponse(
			query=q,
			country=country,
			elapsed_ms=round(elapsed_ms, 2),
			results=[title_out(t) for t in titles],
		)

	@app.get("/show/{show_id}", response_model=ShowResponse)
	def show(
		request: Request,
		show_id: str,
		country: Optional[str] = Query(None, description="Country code, e.g. 'us'; defaults to DEFAULT_COUNTRY"),
		include_paid: Optional[bool] = Query(None, description="Also list rent/buy offers"),
	):
		"""Show details plus deduplicated streaming options for one country."""
		catalog = get_catalog(request)
		country = country or default_country()
		try:
			details = catalog.show_details(show_id, country, include_paid=include_paid)
		except NotFoundError:
			logger.info(f"[API] /show/{show_id} not found")
			raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
		except ProviderError as e:
			logger.error(f"[API] /show/{show_id} failed: {e}")
			raise HTTPException(status_code=502, detail=GENERIC_ERROR_MESSAGE)
		return show_response(details)

	@app.websocket("/ws/search")
	async def ws_search(websocket: WebSocket):
		"""
		Search-as-you-type. The client sends {"q": ..., "country": ...} on every keystroke;
		the server answers only once input has been quiet for the debounce window.
		"""
		catalog = websocket.app.state.catalog
		await websocket.accept()
		if catalog is None:
			await websocket.close(code=1013)  # try again later
			return

		settings = websocket.app.state.settings
		delay = (settings.search_debounce_ms / 1000.0) if settings else 0.3

		async def send_results(query, country, titles):
			await websocket.send_json({
				"query": query,
				"country": country,
				"results": [title_out(t).model_dump() for t in titles],
			})

		async def send_error(query, country, error):
			logger.error(f"[API] /ws/search failed for q='{query}': {error}")
			await websocket.send_json({"query": query, "country": country, "error": GENERIC_ERROR_MESSAGE})

		live = LiveSearch(
			search_fn=catalog.search,
			on_results=send_results,
			on_error=send_error,
			delay=delay,
			min_length=catalog.min_query_length,
		)
		try:
			while True:
				try:
					message = await websocket.receive_json()
				except ValueError:  # non-JSON frame
					logger.debug("[API] /ws/search ignored a non-JSON message")
					continue
				if not isinstance(message, dict):  # ignore anything but {"q": ..., "country": ...}
					continue
				live.update(str(message.get("q", "")), str(message.get("country") or default_country()))
		except WebSocketDisconnect:
			logger.debug("[API] /ws/search client disconnected")
		finally:
			live.close()

	return app


# Module-level app for `uvicorn api:app`
app = create_app()
