# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector simple client connection API.

Provides a simple API for creating an identified projector client from
a host, password and/or configuration.
"""

from __future__ import annotations

from ..internal_types import *

from .client_config import PjlinkClientConfig
from .client_impl import PjlinkProjectorClient

async def pjlink_projector_connect(
        host: Optional[str]=None,
        password: Optional[str]=None,
        config: Optional[PjlinkClientConfig]=None
      ) -> PjlinkProjectorClient:
    """Create a PJLink projector client from a configuration, and probe
       the projector's identity.

    No connection is held open; each command opens its own connection.

    Args:
        host: The hostname or IPV4 address of the projector.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port, which will override the port argument.
                If None, the host will be taken from the
                PJLINK_PROJECTOR_HOST environment variable.
        password:
                The password to use to authenticate with the projector.
                If None, the password will be taken from the
                config.
        config: A PjlinkClientConfig object that specifies
                the default host, port, and password, etc. to use.
                If None, a default config will be created.
    """
    config = PjlinkClientConfig(
        default_host=host,
        password=password,
        base_config=config
      )
    client = await PjlinkProjectorClient.create(config=config)
    return client
