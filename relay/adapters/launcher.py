"""Launcher: wires config, Slack, Flowise and the health server together."""

import asyncio
import contextlib
import signal
import sys

import uvicorn
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp
from slack_sdk.web.async_client import AsyncWebClient

from relay.adapters.flowise.client import FlowiseClient
from relay.adapters.slack.adapter import SlackChatAdapter, register_handlers
from relay.adapters.slack.files import SlackFileFetcher
from relay.adapters.web.server import app as health_app
from relay.config import AppConfig, ConfigError
from relay.domain.identity import BotIdentity
from relay.domain.relay import RelayBrain
from relay.domain.retry import RetryPolicy


def _log(msg: str):
    print(msg, file=sys.stderr)


class HealthServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the launcher."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


def build_relay(config: AppConfig, client: AsyncWebClient) -> RelayBrain:
    """Create the RelayBrain with all production adapters."""
    retry = RetryPolicy.from_config(config.retry)
    chat = SlackChatAdapter(client)
    identity = BotIdentity(chat.resolve_bot_user_id, retry_policy=retry)
    chat.on_auth_error = identity.invalidate
    return RelayBrain(
        prediction=FlowiseClient(config.flowise, retry_policy=retry),
        chat=chat,
        identity=identity,
        files=SlackFileFetcher(config.slack.bot_token),
        max_file_bytes=config.max_file_bytes,
        debug=config.debug,
    )


def build_health_server(config: AppConfig) -> HealthServer:
    return HealthServer(
        uvicorn.Config(health_app, host="0.0.0.0", port=config.port, log_level="warning")
    )


async def run(config: AppConfig) -> None:
    """Run the Socket Mode handler and health server until SIGTERM/SIGINT."""
    app = AsyncApp(token=config.slack.bot_token, signing_secret=config.slack.signing_secret)
    brain = build_relay(config, app.client)
    register_handlers(app, brain)

    handler = AsyncSocketModeHandler(app, config.slack.app_token)
    server = build_health_server(config)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _on_signal(sig: signal.Signals):
        _log(f"{sig.name} received, shutting down...")
        stop.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            signal.signal(sig, lambda s, _f: loop.call_soon_threadsafe(_on_signal, signal.Signals(s)))

    await handler.connect_async()
    server_task = asyncio.create_task(server.serve())
    await brain.identity.get()
    _log(f"Slack Bolt app and health check server are running on port {config.port}")

    await stop.wait()

    await handler.close_async()
    server.should_exit = True
    await server_task
    _log("HTTP server closed")


def main() -> None:
    try:
        config = AppConfig.from_env().validate()
    except ConfigError as e:
        _log(f"Configuration error: {e}")
        sys.exit(1)

    try:
        asyncio.run(run(config))
    except Exception as e:
        _log(f"Unable to start app: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
