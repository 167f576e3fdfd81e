# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package pjlink_projector provides an API for controlling projectors and
displays via the PJLink TCP/IP control protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    PjlinkProjectorError,
    PjlinkAttemptError,
    PjlinkTimeoutError,
    PjlinkProtocolMismatchError,
    PjlinkCommandRejectedError,
    PjlinkCloseError,
    PjlinkRetryExhaustedError,
    PjlinkInputNotFoundError,
  )

from .constants import DEFAULT_PORT, DEFAULT_TIMEOUT, CLOSE_TIMEOUT, MAX_RETRIES

from .client import (
    PjlinkProjectorClient,
    PjlinkSession,
    PjlinkAttempt,
    AttemptState,
    PjlinkClientConfig,
    run_exchange,
    resolve_projector_tcp_host,
    pjlink_projector_connect,
  )

from .protocol import (
    PjlinkCommand,
    PjlinkResponse,
    ResponseType,
    Greeting,
    GreetingType,
    QUERY,
    CommandMeta,
    get_all_commands,
    name_to_command_meta,
    compute_digest,
    build_plain_line,
    build_authenticated_line,
    classify_greeting,
    parse_response,
  )
