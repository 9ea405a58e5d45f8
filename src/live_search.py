"""
Search-as-you-type support.
A single-slot debouncer (latest submission wins) built on cancellable
asyncio tasks, and a LiveSearch controller that validates the query,
debounces it and runs the blocking provider search in a worker thread.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

from loguru import logger

from .errors import ProviderError, ValidationError
from .models import Title


DEFAULT_DELAY_S = 0.3  # quiescence window before a query fires
MIN_QUERY_LENGTH = 2


def validate_query(text: Optional[str], min_length: int = MIN_QUERY_LENGTH) -> str:
	"""Return the trimmed query, or raise ValidationError when it is too short to search."""
	query = (text or '').strip()
	if len(query) < min_length:
		raise ValidationError(f"Query must be at least {min_length} characters")
	return query


class Debouncer:
	"""
	Runs only the most recent submission once input has been quiet for `delay` seconds.
	Submitting again cancels whatever is still pending.
	"""

	def __init__(self, delay: float = DEFAULT_DELAY_S):
		self.delay = delay
		self._task: Optional[asyncio.Task] = None

	@property
	def pending(self) -> bool:
		return self._task is not None and not self._task.done()

	def submit(self, factory: Callable[[], Awaitable]) -> asyncio.Task:
		"""Schedule `factory()` after the quiescence window, superseding any pending call."""
		self.cancel()
		self._task = asyncio.ensure_future(self._run(factory))
		return self._task

	def cancel(self) -> None:
		if self.pending:
			self._task.cancel()
		self._task = None

	async def wait(self) -> None:
		"""Wait for the current task, treating cancellation as a normal outcome."""
		task = self._task
		if task is None:
			return
		try:
			await task
		except asyncio.CancelledError:
			pass

	async def _run(self, factory: Callable[[], Awaitable]):
		await asyncio.sleep(self.delay)
		return await factory()


class LiveSearch:
	"""
	Debounced title search for one client.
	Results of superseded queries are dropped; only the latest query reaches on_results.
	"""

	def __init__(
		self,
		search_fn: Callable[[str, str], List[Title]],
		on_results: Callable[[str, str, List[Title]], Awaitable[None]],
		on_error: Callable[[str, str, ProviderError], Awaitable[None]],
		delay: float = DEFAULT_DELAY_S,
		min_length: int = MIN_QUERY_LENGTH,
	):
		self.search_fn = search_fn
		self.on_results = on_results
		self.on_error = on_error
		self.min_length = min_length
		self.debouncer = Debouncer(delay)
		self._generation = 0  # bumps on every update; stale responses compare unequal

	def update(self, text: str, country: str) -> bool:
		"""
		Feed the latest input. Returns True if a search was scheduled.
		Too-short input cancels any pending search and schedules nothing.
		"""
		self._generation += 1
		try:
			query = validate_query(text, self.min_length)
		except ValidationError:
			self.debouncer.cancel()
			return False

		generation = self._generation
		self.debouncer.submit(lambda: self._search(query, country, generation))
		return True

	async def wait(self) -> None:
		await self.debouncer.wait()

	def close(self) -> None:
		self.debouncer.cancel()

	async def _search(self, query: str, country: str, generation: int) -> None:
		logger.debug(f"[LiveSearch] firing q='{query}' country={country}")
		try:
			results = await asyncio.to_thread(self.search_fn, query, country)
		except ProviderError as e:
			if generation == self._generation:
				await self.on_error(query, country, e)
			return
		except Exception:
			logger.exception(f"[LiveSearch] search crashed for q='{query}'")  # keep the session alive
			return

		if generation != self._generation:  # newer input arrived while the request was in flight
			logger.debug(f"[LiveSearch] discarding superseded results for q='{query}'")
			return
		try:
			await self.on_results(query, country, results)
		except Exception:
			logger.exception(f"[LiveSearch] could not deliver results for q='{query}'")
