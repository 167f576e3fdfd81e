# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector client.

Sends commands to a PJLink projector over TCP/IP, one connection per attempt.
"""

from .resolve_host import resolve_projector_tcp_host
from .client_config import PjlinkClientConfig
from .attempt import PjlinkAttempt, AttemptState
from .exchange import run_exchange
from .session import PjlinkSession
from .client_impl import PjlinkProjectorClient
from .simple import pjlink_projector_connect
