"""Parallel Executor - runs a request's independent gateway calls concurrently."""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Optional

from app.core.config import Settings


class ParallelExecutor:
    """Manages controlled parallelism for the gateway calls of one request."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize parallel executor.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger
        self.max_parallel_api_calls = getattr(settings, "max_parallel_api_calls", 2)

    def execute_api_calls(
        self,
        tasks: dict[str, Callable[[], Any]],
        max_workers: Optional[int] = None,
    ) -> dict[str, tuple[Any, Optional[Exception]]]:
        """
        Execute named API calls and wait for all of them to settle.

        A failing task never cancels the others; its exception is returned
        alongside the results so the caller decides which failures are fatal.

        Args:
            tasks: Mapping of task name to zero-argument callable
            max_workers: Maximum number of parallel workers (defaults to max_parallel_api_calls)

        Returns:
            Mapping of task name to (result, exception)
        """
        if not tasks:
            return {}

        max_workers = max(1, min(max_workers or self.max_parallel_api_calls, len(tasks)))
        results: dict[str, tuple[Any, Optional[Exception]]] = {}
        start_time = time.time()

        # Sequential when only one worker is allowed
        if max_workers == 1:
            for name, task in tasks.items():
                try:
                    results[name] = (task(), None)
                except Exception as e:
                    self.logger.warning(f"❌ {name} failed: {e}")
                    results[name] = (None, e)
            return results

        self.logger.debug(f"Parallel API calls: {len(tasks)} tasks with max {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_name = {executor.submit(task): name for name, task in tasks.items()}

            for future in as_completed(future_to_name):
                name = future_to_name[future]
                elapsed = time.time() - start_time
                try:
                    results[name] = (future.result(), None)
                    self.logger.debug(f"✅ {name} completed in {elapsed:.2f}s")
                except Exception as e:
                    self.logger.warning(f"❌ {name} failed after {elapsed:.2f}s: {e}")
                    results[name] = (None, e)

        successful = sum(1 for _, error in results.values() if error is None)
        self.logger.debug(
            f"API batch complete: {successful}/{len(tasks)} successful in {time.time() - start_time:.2f}s"
        )
        return results
