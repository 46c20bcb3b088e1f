"""Campus Telemetry entry point and lifecycle orchestrator.

Startup sequence:
  config → logging → registry → synthesizer → broker → scheduler →
  FastAPI app (lifespan starts broker + scheduler) → uvicorn
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import sys
from pathlib import Path

from campus_telemetry import __version__
from campus_telemetry.config.manager import ConfigManager
from campus_telemetry.config.schema import AppConfig
from campus_telemetry.logging.structured import setup_logging
from campus_telemetry.services import Services, build_services

logger = logging.getLogger(__name__)


class Application:
    """Main application lifecycle manager.

    Wires all modules together and manages startup/shutdown ordering.
    """

    def __init__(self, config: AppConfig, config_manager: ConfigManager | None = None) -> None:
        self.config = config
        self.config_manager = config_manager
        self._running = False
        self._services: Services | None = None
        self._server = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def services(self) -> Services | None:
        return self._services

    def resolve_port(self) -> int:
        """Listening port: the PORT environment variable wins over config."""
        env_port = os.environ.get("PORT", "").strip()
        if env_port:
            try:
                return int(env_port)
            except ValueError:
                logger.warning("Ignoring invalid PORT=%r", env_port)
        return self.config.server.port

    async def start(self) -> None:
        """Build services and serve until stopped."""
        logger.info("Starting %s v%s", self.config.server.name, __version__)
        self._running = True

        services = build_services(self.config)
        self._services = services

        from campus_telemetry.api.app import create_app

        app = create_app(services)

        import uvicorn

        host = self.config.server.host
        port = self.resolve_port()
        uvi_config = uvicorn.Config(app, host=host, port=port, log_level="warning")
        server = uvicorn.Server(uvi_config)
        # Keep process signal handling in main() so Ctrl+C behaviour is predictable.
        server.install_signal_handlers = lambda: None
        self._server = server

        self._log_endpoints(host, port)

        # Server.serve() blocks until shutdown
        await server.serve()

    def endpoint_banner(self, host: str, port: int) -> list[str]:
        """Startup lines naming every public endpoint."""
        shown = "localhost" if host in ("0.0.0.0", "::") else host
        base = f"http://{shown}:{port}"
        interval = self.config.broadcast.interval_seconds
        campuses = ", ".join(c.id for c in self.config.catalog.campuses)
        return [
            f"{self.config.server.name} running on port {port}",
            f"Health: {base}/api/health",
            f"Status: {base}/api/status",
            f"Campuses ({campuses}): {base}/api/campuses",
            f"Energy data: {base}/api/energy-data?campusId=<id>&limit=<n>",
            f"Real-time updates via ws://{shown}:{port}/ws every {interval:g}s",
            f"Per-campus event stream: {base}/api/campuses/<id>/events",
        ]

    def _log_endpoints(self, host: str, port: int) -> None:
        for line in self.endpoint_banner(host, port):
            logger.info(line)

    async def stop(self) -> None:
        """Stop the server; the app lifespan stops the broker and scheduler."""
        if not self._running:
            return

        logger.info("Shutting down %s", self.config.server.name)
        self._running = False

        if self._services is not None:
            self._services.scheduler.stop()

        # Tell uvicorn to exit its serve() loop.
        if self._server is not None:
            self._server.should_exit = True

        self._server = None
        logger.info("Shutdown complete")


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, on_signal) -> None:
    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, on_signal)
        return
    signal.signal(signal.SIGINT, lambda *_: on_signal())
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, lambda *_: on_signal())


def main() -> None:
    """Entry point for the ``campus-telemetry`` console script."""
    config_manager = ConfigManager(Path("config.defaults.yaml"), Path("config.yaml"))
    config = config_manager.load()

    setup_logging(
        level=config.logging.level,
        fmt=config.logging.format,
        log_file=config.logging.file,
    )
    logger.info(
        "Serving %d campuses, broadcast every %gs (outbox size %d)",
        len(config.catalog.campuses),
        config.broadcast.interval_seconds,
        config.broadcast.outbox_size,
    )

    app = Application(config, config_manager)
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    signal_count = 0

    def _request_stop() -> None:
        # First signal shuts down cleanly, a second one exits immediately
        nonlocal signal_count
        signal_count += 1
        if signal_count >= 2:
            os._exit(130)
        if loop.is_closed():
            return
        loop.call_soon_threadsafe(lambda: asyncio.create_task(app.stop()))

    _install_signal_handlers(loop, _request_stop)

    async def _serve() -> None:
        try:
            await app.start()
        finally:
            if app.is_running:
                await app.stop()

    try:
        loop.run_until_complete(_serve())
    except KeyboardInterrupt:
        with contextlib.suppress(Exception):
            loop.run_until_complete(app.stop())
    finally:
        pending = [task for task in asyncio.all_tasks(loop) if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        loop.close()


if __name__ == "__main__":
    main()
