# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector session.

Holds the per-projector configuration and provides the single entry
point through which every command is sent. A session holds no connection
between commands; every command opens (and closes) its own connections.

Commands issued concurrently on the same session are not serialized. PJLink
projectors expect one exchange at a time, so callers that issue concurrent
commands to one projector should serialize them.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PjlinkProjectorError
from ..pkg_logging import logger
from ..protocol import PjlinkCommand, PjlinkResponse, QUERY

from .client_config import PjlinkClientConfig
from .resolve_host import resolve_projector_tcp_host
from .attempt import PjlinkAttempt
from .exchange import run_exchange

class PjlinkSession:
    """A PJLink projector session."""

    config: PjlinkClientConfig
    host: str
    port: int

    attempt_class: Type[PjlinkAttempt] = PjlinkAttempt
    """The class used to carry out each attempt of a command."""

    def __init__(
            self,
            host: Optional[str]=None,
            password: Optional[str]=None,
            port: Optional[int]=None,
            config: Optional[PjlinkClientConfig]=None,
          ) -> None:
        """Creates a session for a projector that is reachable over TCP/IP.

              Args:
                host: The hostname or IPV4 address of the projector.
                      may optionally be prefixed with "tcp://".
                      May be suffixed with ":<port>" to specify a
                      non-default port, which will override the port argument.
                      If None, the host will be taken from the config,
                      or from the PJLINK_PROJECTOR_HOST environment variable.
                password:
                      The projector password. If None, the password
                      will be taken from the config, or from the
                      PJLINK_PROJECTOR_PASSWORD environment variable.
                port: The default TCP/IP port number to use. If None, the port
                      will be taken from the config, or from PJLINK_PROJECTOR_PORT.
                      If that environment variable is not found, the default
                      PJLink port (4352) will be used.
                config: A PjlinkClientConfig object that specifies
                        the default host, port, password, timeouts, etc to use.
                        If None, a default config will be created.
        """
        self.config = PjlinkClientConfig(
            default_host=host,
            default_port=port,
            password=password,
            base_config=config,
          )
        self.host, self.port = resolve_projector_tcp_host(
            self.config.default_host, self.config.default_port)

    @property
    def password(self) -> Optional[str]:
        return self.config.password

    async def perform_command(self, command: PjlinkCommand) -> PjlinkResponse:
        """Sends a command to the projector, retrying on failure.

        Returns an ACK response for a set command, or a PAYLOAD response for a query.
        Raises PjlinkRetryExhaustedError if every attempt fails.
        """
        logger.debug(f"{self}: Sending command '{command}'")
        return await run_exchange(
            command,
            self.host,
            port=self.port,
            password=self.password,
            timeout_secs=self.config.timeout_secs,
            close_timeout_secs=self.config.close_timeout_secs,
            max_retries=self.config.max_retries,
            attempt_class=self.attempt_class,
          )

    async def query(self, name: str) -> str:
        """Sends a query command (e.g., "POWR ?") and returns the result string."""
        response = await self.perform_command(PjlinkCommand(name, QUERY))
        result = response.payload
        if result is None:
            raise PjlinkProjectorError(f"{self}: Query {name} did not return a payload: {response}")
        return result

    async def set(self, name: str, value: int) -> None:
        """Sends a set command (e.g., "POWR 1") and waits for it to be acknowledged."""
        await self.perform_command(PjlinkCommand(name, value))

    def __str__(self) -> str:
        return f"PjlinkSession({self.host}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
