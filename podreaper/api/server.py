"""
Liveness HTTP server.

A FastAPI app with a single route, served by uvicorn inside the caller's
event loop so that it shares the process-wide shutdown signal.
"""

import asyncio
import contextlib
from typing import Optional

import uvicorn
from fastapi import FastAPI

from podreaper.api import routers
from podreaper.exceptions import LivenessServerError
from podreaper.logging import get_logger

logger = get_logger("api.server")

DEFAULT_GRACE_SECONDS = 5.0


def create_app() -> FastAPI:
    """Build the liveness app; docs and openapi routes are disabled."""
    app = FastAPI(
        title="podreaper",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(routers.router)
    return app


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the host process."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


class LivenessServer:
    """
    Runs the /healthz endpoint as a background task.

    ``stop()`` asks uvicorn to finish in-flight requests and waits at most
    ``grace_seconds`` before cancelling the serve task outright.
    """

    def __init__(
        self,
        port: int,
        host: str = "0.0.0.0",
        grace_seconds: float = DEFAULT_GRACE_SECONDS,
        app: Optional[FastAPI] = None,
    ):
        self.port = port
        self.grace_seconds = grace_seconds
        self._config = uvicorn.Config(
            app or create_app(),
            host=host,
            port=port,
            lifespan="off",
            log_config=None,
            access_log=False,
            timeout_graceful_shutdown=max(1, int(grace_seconds)),
        )
        self._server = _EmbeddedServer(self._config)
        self.task: Optional[asyncio.Task] = None

    @property
    def started(self) -> bool:
        return self._server.started

    async def start(self) -> asyncio.Task:
        if self.task is not None:
            logger.warning("Liveness server is already running")
            return self.task
        logger.info(f"health server listening on :{self.port}")
        self.task = asyncio.create_task(self._serve(), name="liveness_server")
        return self.task

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the interpreter when it cannot bind
            raise LivenessServerError(self.port, f"could not bind port {self.port}") from e
        except OSError as e:
            raise LivenessServerError(self.port, str(e)) from e

        if not self._server.should_exit:
            raise LivenessServerError(self.port, "server stopped unexpectedly")

    async def stop(self) -> None:
        if self.task is None or self.task.done():
            return
        self._server.should_exit = True
        done, _ = await asyncio.wait({self.task}, timeout=self.grace_seconds)
        if not done:
            logger.warning(
                f"Liveness server did not stop within {self.grace_seconds:g}s, forcing shutdown"
            )
            self._server.force_exit = True
            self.task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.task
