"""pytest configuration and fixtures for pjlink_projector tests.

Provides:
- emulator: a PjlinkProjectorEmulator listening on an ephemeral localhost port
- make_session: creates a PjlinkSession for the emulator with short timeouts
- FakeTransport / make_fake_attempt_class: in-memory transports for exercising
  close and abort paths that a real socket will not reproduce on demand
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Optional

import pytest

from pjlink_projector import PjlinkClientConfig, PjlinkSession, PjlinkAttempt
from pjlink_projector.emulator import PjlinkProjectorEmulator

FAST_TIMEOUT = 0.1
"""Per-attempt timeout for tests where every attempt is expected to time out."""

NORMAL_TIMEOUT = 1.0
"""Per-attempt timeout for tests where the emulator is expected to answer."""

CLOSE_TIMEOUT = 0.05


@pytest.fixture
async def emulator() -> AsyncIterator[PjlinkProjectorEmulator]:
    async with PjlinkProjectorEmulator(bind_addr="127.0.0.1", port=0) as emu:
        yield emu


@pytest.fixture
def make_session() -> Callable[..., PjlinkSession]:
    def _make(
        emu: PjlinkProjectorEmulator,
        password: Optional[str] = None,
        timeout_secs: float = NORMAL_TIMEOUT,
        max_retries: Optional[int] = None,
    ) -> PjlinkSession:
        config = PjlinkClientConfig(
            default_host="127.0.0.1",
            default_port=emu.port,
            password=password,
            timeout_secs=timeout_secs,
            close_timeout_secs=CLOSE_TIMEOUT,
            max_retries=max_retries,
        )
        return PjlinkSession(config=config)

    return _make


@pytest.fixture(autouse=True)
def clear_projector_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PJLINK_PROJECTOR_HOST",
        "PJLINK_PROJECTOR_PORT",
        "PJLINK_PROJECTOR_PASSWORD",
        "PJLINK_PROJECTOR_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


class FakeTransport(asyncio.Transport):
    """In-memory transport driven by a responder function.

    Every line written is passed to responder, and whatever it returns is
    delivered back to the protocol on the next loop iteration.
    close() confirms only if confirm_close is True; abort() confirms only
    if confirm_abort is True.
    """

    def __init__(
        self,
        protocol: asyncio.Protocol,
        responder: Callable[[bytes], Optional[bytes]],
        confirm_close: bool = True,
        confirm_abort: bool = True,
    ) -> None:
        super().__init__()
        self.protocol = protocol
        self.responder = responder
        self.confirm_close = confirm_close
        self.confirm_abort = confirm_abort
        self.written: list[bytes] = []
        self.close_count = 0
        self.abort_count = 0
        self._closing = False
        self._lost = False

    def _lose(self) -> None:
        if not self._lost:
            self._lost = True
            asyncio.get_running_loop().call_soon(self.protocol.connection_lost, None)

    def feed(self, data: bytes) -> None:
        asyncio.get_running_loop().call_soon(self.protocol.data_received, data)

    def write(self, data: bytes) -> None:
        self.written.append(bytes(data))
        reply = self.responder(bytes(data))
        if reply is not None:
            self.feed(reply)

    def close(self) -> None:
        self.close_count += 1
        self._closing = True
        if self.confirm_close:
            self._lose()

    def abort(self) -> None:
        self.abort_count += 1
        self._closing = True
        if self.confirm_abort:
            self._lose()

    def is_closing(self) -> bool:
        return self._closing

    def get_extra_info(self, name: str, default: object = None) -> object:
        return default


def make_fake_attempt_class(
    greeting: Optional[bytes],
    responder: Callable[[bytes], Optional[bytes]],
    transports: list[FakeTransport],
    confirm_close: bool = True,
    confirm_abort: bool = True,
) -> type[PjlinkAttempt]:
    """Returns a PjlinkAttempt subclass whose connections are FakeTransports.

    Each created transport is appended to transports. If greeting is None, the
    fake projector never sends anything.
    """

    class FakeAttempt(PjlinkAttempt):
        async def open_connection(self) -> None:
            transport = FakeTransport(
                self,
                responder,
                confirm_close=confirm_close,
                confirm_abort=confirm_abort,
            )
            transports.append(transport)
            self.connection_made(transport)
            if greeting is not None:
                transport.feed(greeting)

    return FakeAttempt
