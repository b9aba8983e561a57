"""
Process supervisor for the controller loop and the liveness endpoint.

Both run as tasks under one shutdown event. Whichever comes first of
(shutdown signal, controller exit, liveness failure) ends the run: the
controller is cancelled at once, the liveness server gets its grace period.
"""

import asyncio
import signal
from typing import Callable, Optional

from kubernetes_asyncio import client, watch

from podreaper.api.server import LivenessServer
from podreaper.config import Settings
from podreaper.controller import CrashLoopController
from podreaper.logging import get_logger

logger = get_logger("service")

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)
CONTROLLER_CANCEL_TIMEOUT = 1.0


async def cancel_and_wait(task: asyncio.Task, timeout: float) -> None:
    """Cancel a task and wait up to ``timeout`` seconds for it to unwind."""
    if task.done():
        return
    task.cancel()
    done, _ = await asyncio.wait({task}, timeout=timeout)
    if not done:
        logger.warning(f"Task {task.get_name()} did not finish within {timeout:g}s after cancellation")


class ReaperService:
    def __init__(
        self,
        settings: Settings,
        api_client: client.ApiClient,
        watch_factory: Callable[[], watch.Watch] = watch.Watch,
        host: str = "0.0.0.0",
    ):
        self.settings = settings
        self.controller = CrashLoopController(
            client.CoreV1Api(api_client),
            settings.namespace,
            delete_timeout=settings.delete_timeout_seconds,
            watch_factory=watch_factory,
        )
        self.liveness = LivenessServer(
            settings.port,
            host=host,
            grace_seconds=settings.shutdown_grace_seconds,
        )
        self._shutdown_event = asyncio.Event()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()

    def request_shutdown(self) -> None:
        if not self._shutdown_event.is_set():
            logger.info("shutdown signal received")
            self._shutdown_event.set()

    def install_signal_handlers(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Route SIGINT/SIGTERM to ``request_shutdown``."""
        loop = loop or asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
            except NotImplementedError:
                # Event loops without add_signal_handler (Windows)
                signal.signal(sig, lambda *_: loop.call_soon_threadsafe(self.request_shutdown))

    async def run(self) -> None:
        """
        Run until shutdown is requested or the watch stream ends.

        Raises:
            SubscriptionError: the pod watch could not be opened.
            LivenessServerError: the /healthz endpoint failed to bind.
        """
        liveness_task = await self.liveness.start()
        controller_task = asyncio.create_task(self.controller.run(), name="crashloop_controller")
        shutdown_task = asyncio.create_task(self._shutdown_event.wait(), name="shutdown_signal")

        try:
            await asyncio.wait(
                {liveness_task, controller_task, shutdown_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            logger.info("shutting down...")
            shutdown_task.cancel()
            await cancel_and_wait(controller_task, CONTROLLER_CANCEL_TIMEOUT)
            await self.liveness.stop()
            logger.info("shutdown complete")

        for task in (controller_task, liveness_task):
            if task.done() and not task.cancelled() and task.exception() is not None:
                raise task.exception()
