"""Development live-reload channel.

Each browser tab holds a WebSocket open on ``/ws``. The server never sends
application data on it; it only pings every few seconds so the socket stays
up. When the server restarts the socket drops, the client script below
retries once a second, and on the first successful reconnect it reloads
the page.

Upgrades are performed by gevent-websocket's ``WebSocketHandler``, which
puts the socket into the WSGI environ as ``wsgi.websocket``.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

import gevent
from gevent.event import Event
from geventwebsocket.exceptions import WebSocketError

from pagedata.config import AppContext
from pagedata.errors import UpgradeFailure
from pagedata.server import _text_err, request

HEARTBEAT_INTERVAL = 5.0

_log = logging.getLogger("pagedata")

# Appended verbatim after every page body in dev mode.
RELOAD_SCRIPT = b"""
<script>
	(function () {
		const { host } = document.location;
		const url = "ws://" + host + "/ws";
		console.log("ws/reloader", url);
		let disconnected = false;
		function monitor() {
			let ws = new WebSocket(url);
			ws.onopen = () => {
				console.log("ws: open");
				if (disconnected) location.reload();
			};
			ws.onclose = () => {
				console.error("ws: close");
				disconnected = true;
				ws = null;
				setTimeout(monitor, 1000);
			};
		}
		monitor();
	}());
</script>
"""


class SessionState(enum.Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class ReloadSession:
    """One reload connection: a heartbeat timer raced against client close.

    :meth:`run` blocks the calling greenlet until the client goes away, a
    heartbeat fails to send, or the greenlet is killed (server shutdown).
    Because the wait is on an event, the loop exits as soon as the close is
    observed rather than at the next tick.
    """

    def __init__(self, ws: Any, interval: float = HEARTBEAT_INTERVAL) -> None:
        self.ws = ws
        self.interval = interval
        self.state = SessionState.CONNECTING
        self.ticks = 0
        self._closed = Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def cancel(self) -> None:
        self._closed.set()

    def _drain(self) -> None:
        """Read and discard client frames until the socket closes."""
        try:
            while self.ws.receive() is not None:
                pass
        except (WebSocketError, OSError):
            pass
        finally:
            self._closed.set()

    def _tick(self) -> None:
        try:
            self.ws.send_frame(b"", self.ws.OPCODE_PING)
        except (WebSocketError, OSError) as e:
            _log.debug("ws heartbeat failed: %s", e)
            self._closed.set()
            return
        self.ticks += 1

    def run(self) -> None:
        self.state = SessionState.OPEN
        reader = gevent.spawn(self._drain)
        try:
            while not self._closed.wait(timeout=self.interval):
                self._tick()
        finally:
            self.state = SessionState.CLOSED
            reader.kill(block=False)
            try:
                self.ws.close()
            except (WebSocketError, OSError) as e:
                _log.warning("close websocket: %s", e)


def install(app: Any, ctx: AppContext) -> None:
    """Register ``/ws``. Only called when *ctx* is in dev mode."""

    @app.get("/ws")
    def handle_ws() -> Any:
        ws = request.environ.get("wsgi.websocket")
        if ws is None:
            _log.info("ws upgrade failed %s", request.remote_addr)
            return _text_err(UpgradeFailure.status, "404 page not found")
        _log.info("ws open %s", request.remote_addr)
        ReloadSession(ws).run()
        _log.info("ws closed %s", request.remote_addr)
        # gevent-websocket ignores the body once the socket has been taken over.
        return ""
