# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector emulator.

Provides a simple emulation of a PJLink projector on TCP/IP.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    END_OF_LINE,
    ACK_VALUE,
    PJLINK_AUTH_ERROR,
    PjlinkRequest,
    compute_digest,
    parse_request_line,
    name_to_command_meta,
  )
from ..constants import DEFAULT_PORT
from ..exceptions import PjlinkProjectorError

from .session import PjlinkEmulatorSession

class PjlinkProjectorEmulator(AsyncContextManager['PjlinkProjectorEmulator']):
    password: Optional[str]
    bind_addr: str
    port: int
    sessions: Dict[int, PjlinkEmulatorSession]
    next_session_id: int = 0
    connection_count: int = 0
    requests: asyncio.Queue[Optional[Tuple[PjlinkEmulatorSession, bytes]]]
    received_requests: List[PjlinkRequest]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    final_result: asyncio.Future[None]

    silent: bool = False
    """If True, the emulator accepts connections but never sends anything."""

    forced_errors: Dict[str, str]
    """Command name -> error token to answer with instead of handling the command."""

    raw_responses: Dict[str, bytes]
    """Command name -> raw response line to send instead of handling the command."""

    # Emulated projector state
    projector_name: str = "Emulated Projector"
    manufacturer: str = "PJLINKPY"
    product_name: str = "Emulator 1000"
    other_info: str = "pjlink_projector emulator"
    pjlink_class: str = "2"
    power_status: str = "0"
    input_number: int = 31
    available_inputs: List[int]
    av_mute: int = 30
    freeze: int = 0
    lamp_hours: int = 1234
    input_resolution: str = "1920x1080"
    volume: int = 10

    def __init__(
            self,
            password: Optional[str] = None,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            silent: bool = False,
          ):
        self.password = password
        self.bind_addr = '0.0.0.0' if bind_addr is None else bind_addr
        self.port = port
        self.silent = silent
        self.sessions = {}
        self.requests = asyncio.Queue()
        self.received_requests = []
        self.forced_errors = {}
        self.raw_responses = {}
        self.available_inputs = [11, 12, 31, 32, 52]
        self.final_result = asyncio.Future()

    def alloc_session_id(self, session: PjlinkEmulatorSession) -> int:
        result = self.next_session_id
        self.next_session_id += 1
        self.connection_count += 1
        self.sessions[result] = session
        return result

    def free_session_id(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_line_received(self, session: PjlinkEmulatorSession, line: bytes) -> None:
        """Called when a line is received from a session."""
        self.requests.put_nowait((session, line))

    def query_value(self, name: str) -> str:
        """Returns the emulated query result for a command"""
        if name == 'POWR':
            return self.power_status
        if name == 'INPT':
            return str(self.input_number)
        if name == 'AVMT':
            return str(self.av_mute)
        if name == 'ERST':
            return "000000"
        if name == 'LAMP':
            return f"{self.lamp_hours} {1 if self.power_status == '1' else 0}"
        if name == 'INST':
            return " ".join(str(x) for x in self.available_inputs)
        if name == 'NAME':
            return self.projector_name
        if name == 'INF1':
            return self.manufacturer
        if name == 'INF2':
            return self.product_name
        if name == 'INFO':
            return self.other_info
        if name == 'CLSS':
            return self.pjlink_class
        if name == 'IRES':
            return self.input_resolution
        if name == 'FREZ':
            return str(self.freeze)
        return "ERR1"

    def apply_set(self, name: str, value: int) -> str:
        """Applies a set command to the emulated state, and returns the response value"""
        if name == 'POWR':
            self.power_status = str(value)
        elif name == 'INPT':
            if not value in self.available_inputs:
                return "ERR2"
            self.input_number = value
        elif name == 'AVMT':
            self.av_mute = value
        elif name == 'SVOL':
            self.volume = self.volume + 1 if value == 1 else max(0, self.volume - 1)
        elif name == 'FREZ':
            self.freeze = value
        return ACK_VALUE

    async def handle_command(
            self,
            session: PjlinkEmulatorSession,
            request: PjlinkRequest
          ) -> Optional[str]:
        """Handle a single command, and return the response value.

        If None is returned, no response is sent.
        """
        forced_error = self.forced_errors.get(request.name)
        if forced_error is not None:
            return forced_error
        try:
            command_meta = name_to_command_meta(request.name)
        except PjlinkProjectorError:
            return "ERR1"
        if request.is_query:
            if not command_meta.queryable:
                return "ERR1"
            return self.query_value(request.name)
        if command_meta.set_values is None:
            return "ERR1"
        if not request.arg.isdigit():
            return "ERR2"
        value = int(request.arg)
        if not value in command_meta.set_values:
            return "ERR2"
        return self.apply_set(request.name, value)

    async def handle_request_line(
            self,
            session: PjlinkEmulatorSession,
            line: bytes
          ) -> Optional[bytes]:
        """Handle a single request line, and return the response line.

        If None is returned, no response is sent.
        """
        if self.silent:
            return None
        try:
            request = parse_request_line(line)
        except PjlinkProjectorError as e:
            logger.debug(f"{session}: Ignoring malformed request: {e}")
            return None
        self.received_requests.append(request)
        if self.password is not None:
            assert session.seed is not None
            if request.digest != compute_digest(session.seed, self.password):
                logger.debug(f"{session}: Authentication failed for {request}")
                return PJLINK_AUTH_ERROR + END_OF_LINE
        raw_response = self.raw_responses.get(request.name)
        if raw_response is not None:
            return raw_response
        value = await self.handle_command(session, request)
        if value is None:
            return None
        return f"{request.version_tag}{request.name}={value}".encode('utf-8') + END_OF_LINE

    async def handle_requests(self) -> None:
        """Handle requests from sessions."""
        while True:
            session_and_line = await self.requests.get()
            try:
                if session_and_line is None:
                    logger.debug("Emulator handler: Received EOF; exiting")
                    break
                session, line = session_and_line
                try:
                    logger.debug(f"{session}: Emulator handler: received line: {line!r}")
                    response = await self.handle_request_line(session, line)
                    if not response is None:
                        logger.debug(f"{session}: Emulator handler: Sending response: {response!r}")
                        session.write(response)
                except asyncio.CancelledError as e:
                    logger.debug(f"{session}: Handler task cancelled; exiting")
                    break
                except Exception as e:
                    logger.exception(f"{session}: Handler task: Exception while handling request; killing session: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def finish_start(self) -> None:
        """Called after the socket is up and running.  Subclasses can override to do additional
           initialization."""
        pass

    async def run(self) -> None:
        """Runs the Emulator until it is closed."""
        async with self:
            await self.wait_closed()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            self.handler_task = asyncio.create_task(self.handle_requests())
            self.server = await loop.create_server(
                lambda: PjlinkEmulatorSession(self),
                host=self.bind_addr,
                port=self.port)
            if self.port == 0:
                self.port = self.server.sockets[0].getsockname()[1]
            logger.debug(f"Emulator: Listening on {self.bind_addr}:{self.port}")
            await self.server.start_serving()
            await self.finish_start()
        except BaseException as e:
            self.set_final_result(e)
            try:
                await self.wait_closed()
            except BaseException as close_exc:
                logger.debug(f"Emulator: Exception while closing after failed start: {close_exc}")
            raise

    def close(self, exc: Optional[BaseException]=None) -> None:
        """Stops the Emulator."""
        self.set_final_result(exc)

    async def wait_closed(self) -> None:
        """Waits for the emulator to be fully closed. Does not initiate shutdown."""
        try:
            await self.final_result
        finally:
            try:
                if self.server is not None:
                    try:
                        self.server.close()
                        for session in list(self.sessions.values()):
                            session.close()
                    finally:
                        await self.server.wait_closed()
            finally:
                self.server = None
                if self.handler_task is not None:
                    try:
                        await self.handler_task
                    finally:
                        self.handler_task = None

    async def close_and_wait(self, exc: Optional[BaseException]=None) -> None:
        self.close(exc)
        await self.wait_closed()

    def set_final_result(self, exc: Optional[BaseException]=None) -> None:
        if not self.final_result.done():
            if exc is None:
                logger.debug(f"Emulator: Setting final result to success")
                self.final_result.set_result(None)
            else:
                logger.debug(f"Emulator: Setting final exception: {exc}")
                self.final_result.set_exception(exc)
            self.requests.put_nowait(None)
            if self.server is not None:
                self.server.close()

    async def __aenter__(self) -> PjlinkProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> None:
        self.set_final_result(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_closed()
        except Exception as e:
            logger.debug(f"Emulator: Exception while closing: {e}")

    def __str__(self) -> str:
        return f"PjlinkProjectorEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
