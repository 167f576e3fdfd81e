# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A single client connection to the PJLink Projector emulator.
"""

from __future__ import annotations

import asyncio
import secrets

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    END_OF_LINE,
    PJLINK_AUTH,
    PJLINK_NO_AUTH,
    SEED_LENGTH,
  )

if TYPE_CHECKING:
    from .emulator_impl import PjlinkProjectorEmulator

class PjlinkEmulatorSession(asyncio.Protocol):
    """One connection accepted by the emulator. Sends the greeting on connect,
       and forwards each received line to the emulator."""
    emulator: PjlinkProjectorEmulator
    session_id: Optional[int] = None
    transport: Optional[asyncio.Transport] = None
    seed: Optional[str] = None
    _buffer: bytes

    def __init__(self, emulator: PjlinkProjectorEmulator):
        super().__init__()
        self.emulator = emulator
        self._buffer = b''

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        self.session_id = self.emulator.alloc_session_id(self)
        logger.debug(f"{self}: Connection from {transport.get_extra_info('peername')}")
        if self.emulator.silent:
            return
        if self.emulator.password is None:
            self.write(PJLINK_NO_AUTH + END_OF_LINE)
        else:
            self.seed = secrets.token_hex(SEED_LENGTH // 2)
            self.write(PJLINK_AUTH + self.seed.encode('ascii') + END_OF_LINE)

    def data_received(self, data: bytes) -> None:
        self._buffer += data
        while END_OF_LINE in self._buffer:
            line, _, self._buffer = self._buffer.partition(END_OF_LINE)
            self.emulator.on_line_received(self, line + END_OF_LINE)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost: {exc}")
        if self.session_id is not None:
            self.emulator.free_session_id(self.session_id)
        self.transport = None

    def write(self, data: bytes) -> None:
        if self.transport is None or self.transport.is_closing():
            logger.debug(f"{self}: Dropping write to closed connection: {data!r}")
            return
        self.transport.write(data)

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()

    def __str__(self) -> str:
        return f"PjlinkEmulatorSession({self.session_id})"

    def __repr__(self) -> str:
        return str(self)
