"""QuoteServer — minimal HTTP front-end for the QuoteEngine.

Built on ``asyncio.start_server``; one request per connection:

- ``POST /quote``     — QuoteRequest JSON in, QuoteResponse JSON out
- ``POST /deal``      — deal notification, acknowledged and logged
- ``POST /exception`` — exception notification, acknowledged and logged
- ``GET  /health``    — liveness
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any

import structlog
from pydantic import ValidationError

from models.quote import QuoteRequest
from strategy.quote_engine import QuoteEngine

logger = structlog.get_logger("api.server")

__all__ = ["QuoteServer"]

_MAX_BODY_BYTES = 64 * 1024
_READ_TIMEOUT_S = 5.0

_REASONS = {
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    500: "Internal Server Error",
}

_ACK = {"result": True, "message": "ok"}


class BadRequest(Exception):
    """Malformed HTTP request or JSON body."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class QuoteServer:
    """HTTP server exposing the RFQ maker endpoints.

    Parameters
    ----------
    engine:
        The QuoteEngine answering ``/quote``.
    host, port:
        Bind address.  Port ``0`` picks a free port (see :attr:`port`).
    """

    def __init__(self, engine: QuoteEngine, host: str = "0.0.0.0", port: int = 9000) -> None:
        self._engine = engine
        self._host = host
        self._port = port
        self._start_time = time.monotonic()
        self._server: asyncio.Server | None = None

    @property
    def port(self) -> int:
        """Bound port (resolved once the server is started)."""
        if self._server is not None and self._server.sockets:
            return self._server.sockets[0].getsockname()[1]
        return self._port

    # ── Lifecycle ───────────────────────────────────────────────

    async def start(self) -> None:
        self._server = await asyncio.start_server(
            self._handle_connection,
            self._host,
            self._port,
        )
        logger.info("server.started", host=self._host, port=self.port)

    async def stop(self) -> None:
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
            logger.info("server.stopped")

    async def __aenter__(self) -> QuoteServer:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    # ── HTTP handling ───────────────────────────────────────────

    async def _handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Handle a single HTTP connection."""
        try:
            try:
                method, path, body = await self._read_request(reader)
            except BadRequest as exc:
                await self._send_json(writer, exc.status_code, {"error": str(exc)})
                return
            if method is None:
                return

            status, payload = await self._dispatch(method, path, body)
            await self._send_json(writer, status, payload)

        except Exception:
            logger.exception("server.handler_error")
            try:
                await self._send_json(writer, 500, {"error": "internal error"})
            except Exception:
                pass
        finally:
            try:
                writer.close()
                await writer.wait_closed()
            except Exception:
                pass

    async def _read_request(
        self, reader: asyncio.StreamReader
    ) -> tuple[str | None, str, bytes]:
        request_line = await asyncio.wait_for(reader.readline(), timeout=_READ_TIMEOUT_S)
        if not request_line:
            return None, "", b""

        parts = request_line.decode("utf-8", errors="replace").strip().split()
        if len(parts) < 2:
            raise BadRequest("malformed request line")
        method, path = parts[0].upper(), parts[1].split("?", 1)[0]

        content_length = 0
        while True:
            header_line = await asyncio.wait_for(reader.readline(), timeout=_READ_TIMEOUT_S)
            if header_line in (b"\r\n", b"\n", b""):
                break
            name, _, value = header_line.decode("latin-1").partition(":")
            if name.strip().lower() == "content-length":
                try:
                    content_length = int(value.strip())
                except ValueError:
                    raise BadRequest("invalid Content-Length") from None

        if content_length < 0:
            raise BadRequest("invalid Content-Length")
        if content_length > _MAX_BODY_BYTES:
            raise BadRequest("request body too large", status_code=413)

        body = b""
        if content_length:
            body = await asyncio.wait_for(
                reader.readexactly(content_length), timeout=_READ_TIMEOUT_S
            )
        return method, path, body

    async def _dispatch(self, method: str, path: str, body: bytes) -> tuple[int, Any]:
        routes = {
            "/quote": ("POST", self._handle_quote),
            "/deal": ("POST", self._handle_deal),
            "/exception": ("POST", self._handle_exception),
            "/health": ("GET", self._handle_health),
        }
        route = routes.get(path)
        if route is None:
            return 404, {"error": "not found"}
        expected_method, handler = route
        if method != expected_method:
            return 405, {"error": "method not allowed"}
        return await handler(body)

    # ── Endpoints ───────────────────────────────────────────────

    async def _handle_quote(self, body: bytes) -> tuple[int, Any]:
        try:
            request = QuoteRequest.model_validate(_parse_json(body))
        except BadRequest as exc:
            return 400, {"error": str(exc)}
        except ValidationError as exc:
            logger.info("server.invalid_quote_request", errors=exc.error_count())
            return 400, {
                "error": "invalid quote request",
                "details": exc.errors(include_url=False, include_context=False),
            }

        logger.info("server.quote_request", request=request.model_dump(mode="json"))
        try:
            response = await self._engine.quote(request)
        except Exception as exc:
            logger.exception("server.quote_failed", error=str(exc))
            return 500, {"error": type(exc).__name__, "message": str(exc)}

        payload = response.to_payload()
        logger.info("server.quote_response", response=payload)
        return 200, payload

    async def _handle_deal(self, body: bytes) -> tuple[int, Any]:
        try:
            logger.info("server.deal", body=_parse_json(body))
        except BadRequest as exc:
            return 400, {"error": str(exc)}
        return 200, _ACK

    async def _handle_exception(self, body: bytes) -> tuple[int, Any]:
        try:
            logger.warning("server.exception_report", body=_parse_json(body))
        except BadRequest as exc:
            return 400, {"error": str(exc)}
        return 200, _ACK

    async def _handle_health(self, body: bytes) -> tuple[int, Any]:
        return 200, {
            "status": "alive",
            "uptime_seconds": round(time.monotonic() - self._start_time, 1),
        }

    @staticmethod
    async def _send_json(writer: asyncio.StreamWriter, status_code: int, payload: Any) -> None:
        """Write a minimal HTTP/1.0 JSON response."""
        body = json.dumps(payload).encode()
        header = (
            f"HTTP/1.0 {status_code} {_REASONS.get(status_code, 'Unknown')}\r\n"
            f"Content-Type: application/json\r\n"
            f"Content-Length: {len(body)}\r\n"
            f"Connection: close\r\n"
            f"\r\n"
        )
        writer.write(header.encode() + body)
        await writer.drain()


def _parse_json(body: bytes) -> Any:
    if not body:
        raise BadRequest("empty request body")
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise BadRequest(f"invalid JSON: {exc}") from exc
