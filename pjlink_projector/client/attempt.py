# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A single attempt to send a PJLink command over TCP/IP.

Each attempt owns exactly one connection to the projector, which is always
closed (gracefully, or aborted) before the attempt resolves. An attempt goes
through the states:

    CONNECTING -> AWAITING_FIRST_DATA -> CLOSING -> RESOLVED

A one-shot timer started when the connection is initiated bounds the time
spent waiting for a response. Socket errors are logged, but do not
themselves resolve the attempt; only a response or the timer do.
"""

from __future__ import annotations

import asyncio
from asyncio import Future
from enum import Enum

from ..internal_types import *
from ..exceptions import (
    PjlinkTimeoutError,
    PjlinkProtocolMismatchError,
    PjlinkCommandRejectedError,
    PjlinkCloseError,
  )
from ..constants import DEFAULT_TIMEOUT, DEFAULT_PORT, CLOSE_TIMEOUT
from ..pkg_logging import logger
from ..protocol import (
    END_OF_LINE,
    PjlinkCommand,
    PjlinkResponse,
    ResponseType,
    classify_greeting,
  )

class AttemptState(Enum):
    CONNECTING = "connecting"
    AWAITING_FIRST_DATA = "awaiting_first_data"
    CLOSING = "closing"
    RESOLVED = "resolved"

class PjlinkAttempt(asyncio.Protocol):
    """One connect/handshake/exchange/close cycle for a PJLink command."""

    command: PjlinkCommand
    host: str
    port: int
    password: Optional[str]
    retry: int
    timeout_secs: float
    close_timeout_secs: float

    state: AttemptState = AttemptState.CONNECTING
    transport: Optional[asyncio.Transport] = None
    response_data: Optional[bytes] = None

    result: Future[PjlinkResponse]
    """Resolved with the response, or with a PjlinkAttemptError."""

    closed: Future[None]
    """Resolved when the connection has been lost or closed."""

    _buffer: bytes
    _timer: Optional[asyncio.TimerHandle] = None
    _connect_task: Optional[asyncio.Task[None]] = None
    _closing_task: Optional[asyncio.Task[None]] = None
    _aborted: bool = False

    def __init__(
            self,
            command: PjlinkCommand,
            host: str,
            port: int=DEFAULT_PORT,
            password: Optional[str]=None,
            retry: int=0,
            timeout_secs: float=DEFAULT_TIMEOUT,
            close_timeout_secs: float=CLOSE_TIMEOUT,
          ) -> None:
        super().__init__()
        self.command = command
        self.host = host
        self.port = port
        self.password = password
        self.retry = retry
        self.timeout_secs = timeout_secs
        self.close_timeout_secs = close_timeout_secs
        self._buffer = b''
        loop = asyncio.get_running_loop()
        self.result = loop.create_future()
        self.closed = loop.create_future()

    async def run(self) -> PjlinkResponse:
        """Runs the attempt to completion.

        Returns the ACK or PAYLOAD response. Raises a PjlinkAttemptError if the
        projector rejected the command, answered with something unexpected,
        did not answer in time, or did not close the connection in time.
        The connection is closed before this method returns or raises.
        """
        loop = asyncio.get_running_loop()
        logger.debug(f"{self}: Starting attempt")
        self._timer = loop.call_later(self.timeout_secs, self._on_timeout)
        self._connect_task = asyncio.ensure_future(self.open_connection())
        try:
            return await self.result
        finally:
            self._cancel_timer()
            if not self._connect_task.done():
                self._connect_task.cancel()
            await asyncio.wait([self._connect_task])
            if self._closing_task is not None:
                await asyncio.wait([self._closing_task])
            if self.transport is not None and not self.closed.done() and not self._aborted:
                # only reachable if run() itself was cancelled
                self._abort(self.transport)

    async def open_connection(self) -> None:
        """Initiates the TCP connection, with this object as the protocol.

        Connection errors are logged only; the attempt timer governs what happens next.
        """
        loop = asyncio.get_running_loop()
        logger.debug(f"{self}: Connecting to projector at {self.host}:{self.port}")
        try:
            await loop.create_connection(lambda: self, self.host, self.port)
        except OSError as e:
            logger.warning(f"{self}: Projector socket error while connecting: {e}")

    # asyncio.Protocol callbacks

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        if self.state != AttemptState.CONNECTING:
            # The attempt timed out while the connection was being established
            logger.debug(f"{self}: Connection made after attempt gave up; aborting")
            self._abort(transport)
            return
        logger.debug(f"{self}: Connected; waiting for greeting")
        self.state = AttemptState.AWAITING_FIRST_DATA

    def data_received(self, data: bytes) -> None:
        if self.state != AttemptState.AWAITING_FIRST_DATA:
            logger.debug(f"{self}: Ignoring data received in state {self.state.name}: {data!r}")
            return
        self._buffer += data
        while self.state == AttemptState.AWAITING_FIRST_DATA and END_OF_LINE in self._buffer:
            line, _, self._buffer = self._buffer.partition(END_OF_LINE)
            self.on_line_received(line + END_OF_LINE)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is None:
            logger.debug(f"{self}: Connection closed")
        else:
            logger.warning(f"{self}: Projector socket error: {exc}")
        if not self.closed.done():
            self.closed.set_result(None)

    # State machine

    def on_line_received(self, line: bytes) -> None:
        """Handles one complete line from the projector: either a greeting,
           which is answered with the request, or the command response."""
        logger.debug(f"{self}: Received line: {line!r}")
        greeting = classify_greeting(line)
        if greeting.needs_auth:
            logger.debug(f"{self}: Projector requires authentication")
            self.write_line(self.command.request_line(seed=greeting.seed, password=self.password))
        elif greeting.is_greeting:
            self.write_line(self.command.request_line())
        else:
            self.response_data = line
            self.state = AttemptState.CLOSING
            self._closing_task = asyncio.ensure_future(self._finish_response(line))

    def write_line(self, line: bytes) -> None:
        assert self.transport is not None
        logger.debug(f"{self}: Writing request: {line!r}")
        self.transport.write(line)

    def _on_timeout(self) -> None:
        self._timer = None
        if self.state in (AttemptState.CLOSING, AttemptState.RESOLVED):
            # a response already arrived
            return
        logger.debug(f"{self}: Timed out waiting for response after {self.timeout_secs} seconds")
        self.state = AttemptState.CLOSING
        self._closing_task = asyncio.ensure_future(self._finish_timeout())

    async def _finish_response(self, line: bytes) -> None:
        try:
            try:
                await self.close_gracefully()
            except PjlinkCloseError as e:
                self._resolve_error(e)
                return
            response = self.command.parse_response(line)
            logger.debug(f"{self}: {response}")
            if response.is_success:
                self._resolve(response)
            elif response.response_type == ResponseType.REJECTED:
                assert response.value is not None
                self._resolve_error(PjlinkCommandRejectedError(
                    f"Projector returned error: {response.value}", response.value))
            else:
                self._resolve_error(PjlinkProtocolMismatchError("Unexpected answer from projector"))
        except Exception as e:
            self._resolve_error(e)

    async def _finish_timeout(self) -> None:
        try:
            await self.force_close()
        except Exception as e:
            self._resolve_error(e)
        else:
            self._resolve_error(PjlinkTimeoutError("Failed command to projector"))

    async def close_gracefully(self) -> None:
        """Closes the connection, and waits up to close_timeout_secs for the close
           to be confirmed. If it is not, aborts the connection and raises PjlinkCloseError."""
        transport = self.transport
        assert transport is not None
        transport.close()
        try:
            await asyncio.wait_for(asyncio.shield(self.closed), self.close_timeout_secs)
        except asyncio.TimeoutError:
            logger.debug(f"{self}: Close not confirmed within {self.close_timeout_secs} seconds; aborting")
            self._abort(transport)
            raise PjlinkCloseError("Projector failed to close socket")

    async def force_close(self) -> None:
        """Abandons a pending connect, or aborts the connection without a graceful close.
           Raises PjlinkCloseError if the abort is not confirmed within close_timeout_secs."""
        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
            await asyncio.wait([self._connect_task])
        transport = self.transport
        if transport is None or self.closed.done():
            return
        self._abort(transport)
        try:
            await asyncio.wait_for(asyncio.shield(self.closed), self.close_timeout_secs)
        except asyncio.TimeoutError:
            raise PjlinkCloseError(
                f"Failed command to projector, failed to close socket, command: {self.command}")

    def _abort(self, transport: asyncio.Transport) -> None:
        """Force-destroys the connection. Never called more than once per attempt."""
        if self._aborted:
            return
        self._aborted = True
        transport.abort()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _resolve(self, response: PjlinkResponse) -> None:
        self.state = AttemptState.RESOLVED
        self._cancel_timer()
        if not self.result.done():
            self.result.set_result(response)

    def _resolve_error(self, exc: BaseException) -> None:
        self.state = AttemptState.RESOLVED
        self._cancel_timer()
        if not self.result.done():
            self.result.set_exception(exc)

    def __str__(self) -> str:
        return f"PjlinkAttempt({self.host}:{self.port}, '{self.command}', retry={self.retry})"

    def __repr__(self) -> str:
        return str(self)
