# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector client configuration.

Provides general config object for a PJLink projector session.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import PjlinkProjectorError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    CLOSE_TIMEOUT,
    MAX_RETRIES,
  )

class PjlinkClientConfig:
    """PJLink Projector client configuration."""
    default_host: Optional[str]
    default_port: int
    password: Optional[str]
    timeout_secs: float
    close_timeout_secs: float
    max_retries: int

    def __init__(
            self,
            default_host: Optional[str]=None,
            password: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            timeout_secs: Optional[float] = None,
            close_timeout_secs: Optional[float] = None,
            max_retries: Optional[int] = None,
            base_config: Optional[PjlinkClientConfig]=None
          ) -> None:
        """Creates a configuration for a PJLink Projector client.

           Args:
             default_host: The default hostname or IPV4 address of the projector.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                     PJLINK_PROJECTOR_HOST environment variable.
             default_port: The default TCP/IP port number to use.
                    If None, the default port will be taken from PJLINK_PROJECTOR_PORT.
                    If that environment variable is not found, the default PJLink
                    port (4352) will be used.
             password:
                   The projector password. If None, the password
                   will be taken from the PJLINK_PROJECTOR_PASSWORD
                   environment variable. If the environment variable is not
                   found, no password will be used.
             timeout_secs:
                   The per-attempt response timeout, in seconds.
                   If None, the timeout will be taken from the
                   PJLINK_PROJECTOR_TIMEOUT environment variable.
                   If the environment variable is not found, the
                   default timeout (2 seconds) will be used.
             close_timeout_secs:
                   The grace window for a socket close to be confirmed,
                   in seconds. If None, CLOSE_TIMEOUT (0.2 seconds) is used.
             max_retries:
                   The number of times a failed command is retried. If None,
                   MAX_RETRIES (5) is used.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if password is not None:
            self.password = password

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if close_timeout_secs is not None:
            self.close_timeout_secs = close_timeout_secs

        if max_retries is not None:
            if max_retries < 0:
                raise PjlinkProjectorError(f"max_retries must not be negative: {max_retries}")
            self.max_retries = max_retries

    def init_from_defaults(self) -> None:
        """Initializes the configuration from defaults."""
        default_host: Optional[str] = os.environ.get('PJLINK_PROJECTOR_HOST')
        if default_host == '':
            default_host = None
        self.default_host = default_host
        default_port_str = os.environ.get('PJLINK_PROJECTOR_PORT')
        if default_port_str is None or default_port_str == '':
            self.default_port = DEFAULT_PORT
        else:
            self.default_port = int(default_port_str)
        self.password = os.environ.get('PJLINK_PROJECTOR_PASSWORD')
        timeout_str = os.environ.get('PJLINK_PROJECTOR_TIMEOUT')
        if timeout_str is None or timeout_str == '':
            self.timeout_secs = DEFAULT_TIMEOUT
        else:
            self.timeout_secs = float(timeout_str)
        self.close_timeout_secs = CLOSE_TIMEOUT
        self.max_retries = MAX_RETRIES

    def init_from_base_config(self, base_config: PjlinkClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.password = base_config.password
        self.timeout_secs = base_config.timeout_secs
        self.close_timeout_secs = base_config.close_timeout_secs
        self.max_retries = base_config.max_retries

    @classmethod
    def from_jsonable(cls, data: JsonableDict, base_config: Optional[PjlinkClientConfig]=None) -> Self:
        """Creates a configuration from a JSON-compatible dict, e.g., a loaded config file.
           Missing keys fall back to the base configuration or the environment."""
        if not isinstance(data, dict):
            raise PjlinkProjectorError(f"Projector config must be a JSON object: {data!r}")
        known_keys = set([
            'default_host', 'default_port', 'password', 'timeout_secs',
            'close_timeout_secs', 'max_retries'])
        unknown_keys = set(data.keys()) - known_keys
        if len(unknown_keys) > 0:
            raise PjlinkProjectorError(f"Unknown projector config keys: {sorted(unknown_keys)}")
        default_port = data.get('default_port')
        timeout_secs = data.get('timeout_secs')
        close_timeout_secs = data.get('close_timeout_secs')
        max_retries = data.get('max_retries')
        return cls(
            default_host=cast(Optional[str], data.get('default_host')),
            password=cast(Optional[str], data.get('password')),
            default_port=None if default_port is None else int(cast(int, default_port)),
            timeout_secs=None if timeout_secs is None else float(cast(float, timeout_secs)),
            close_timeout_secs=None if close_timeout_secs is None else float(cast(float, close_timeout_secs)),
            max_retries=None if max_retries is None else int(cast(int, max_retries)),
            base_config=base_config,
          )

    def to_jsonable(self) -> JsonableDict:
        """Returns a JSON-compatible dict. The password is never included."""
        return dict(
            default_host=self.default_host,
            default_port=self.default_port,
            timeout_secs=self.timeout_secs,
            close_timeout_secs=self.close_timeout_secs,
            max_retries=self.max_retries,
          )

    def __str__(self) -> str:
        return (
            f"PjlinkClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"timeout_secs={self.timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
