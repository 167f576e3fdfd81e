# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector host IP/Port resolver.

Provides a method that can resolve host strings and environment variables
into a projector hostname and port.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import PjlinkProjectorError
from ..constants import DEFAULT_PORT

def resolve_projector_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int]:
    """Resolves a projector host string into a hostname and port.

        Args:
            host: The hostname or IPV4 address of the projector.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    An IPV6 address must be enclosed in brackets if a port is given.
                    If None, the host will be taken from the
                    PJLINK_PROJECTOR_HOST environment variable.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from the PJLINK_PROJECTOR_PORT. If that
                    environment variable is not found, the default PJLink
                    port (4352) will be used.

        Returns:
            A tuple of (hostname: str, port: int)
    """
    if host is None or host == '':
        host = os.environ.get('PJLINK_PROJECTOR_HOST')
        if host is None or host == '':
            raise PjlinkProjectorError("No projector host specified, and PJLINK_PROJECTOR_HOST is not set")

    if default_port is None or default_port <= 0:
        default_port_str = os.environ.get('PJLINK_PROJECTOR_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            default_port = int(default_port_str)

    if host.startswith('tcp://'):
        host = host[6:]
    elif '://' in host:
        raise PjlinkProjectorError(f"Unsupported protocol in host specifier: '{host}'")

    port: int = default_port
    if host.startswith('['):
        # bracketed IPV6 address, optionally followed by ":<port>"
        close_index = host.find(']')
        if close_index < 0:
            raise PjlinkProjectorError(f"Invalid projector host specifier: '{host}'")
        remainder = host[close_index+1:]
        if remainder.startswith(':'):
            port = int(remainder[1:])
        elif remainder != '':
            raise PjlinkProjectorError(f"Invalid projector host specifier: '{host}'")
        host = host[1:close_index]
    elif host.count(':') == 1:
        host, port_str = host.rsplit(':', 1)
        port = int(port_str)

    if host == '':
        raise PjlinkProjectorError("Empty projector hostname")

    return (host, port)
