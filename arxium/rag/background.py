import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from .. import config

logger = logging.getLogger(__name__)


class BackgroundTaskQueue:
    """
    Fire-and-forget task queue.

    Every submitted job runs inside its own error boundary: failures are
    logged and never re-raised or retried, so callers can submit work and
    return without waiting on it.
    """

    def __init__(self, max_workers: int = config.BACKGROUND_WORKERS):
        self._executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="arxium-bg")
        self._closed = False

    def _run(self, fn: Callable[..., Any], description: str, args: tuple, kwargs: dict) -> Optional[Any]:
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            logger.error(f"Background task '{description}' failed: {e}", exc_info=True)
            return None

    def submit(self, fn: Callable[..., Any], *args, description: str = "task", **kwargs) -> Optional[Future]:
        """
        Schedule fn(*args, **kwargs) without waiting for it.

        Returns:
            The Future of the guarded job, or None once the queue is shut down
        """
        if self._closed:
            logger.warning(f"Background queue is shut down, dropping task '{description}'")
            return None
        return self._executor.submit(self._run, fn, description, args, kwargs)

    def shutdown(self, wait: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)
