# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink wire protocol constants.

Every PJLink line is ASCII and terminated with a carriage return (0x0d). A
request is of the form:

    [<digest>]<version_tag><CMD> <ARG>\\r

and a response is of the form:

    <version_tag><CMD>=<VALUE>\\r
"""

from __future__ import annotations

from ..internal_types import *

END_OF_LINE = b"\r"
"""Terminates every greeting, request and response line."""

CLASS1_VERSION_TAG = "%1"
"""Version tag for PJLink class 1 commands."""

CLASS2_VERSION_TAG = "%2"
"""Version tag for PJLink class 2 commands."""

VERSION2_COMMANDS: FrozenSet[str] = frozenset(["SVOL", "IRES", "FREZ"])
"""Commands that are always sent with the class 2 version tag."""

VERSION_TAG_LENGTH = 2
COMMAND_NAME_LENGTH = 4
RESPONSE_SEPARATOR = "="
RESPONSE_PREFIX_LENGTH = VERSION_TAG_LENGTH + COMMAND_NAME_LENGTH + len(RESPONSE_SEPARATOR)
"""Length of the "<version_tag><CMD>=" prefix of a response line (7 bytes)."""

QUERY_ARG = "?"
"""Argument string sent for a query."""

ACK_VALUE = "OK"
"""Response value for a successful set command."""

DIGEST_LENGTH = 32
"""Length of the hex digest that prefixes an authenticated request."""

ERROR_CODES: Dict[str, str] = {
    "ERR1": "Undefined command",
    "ERR2": "Out of parameter",
    "ERR3": "Unavailable time",
    "ERR4": "Projector/Display failure",
  }
"""Standard device error tokens, and what they mean."""

AUTH_ERROR_CODE = "ERRA"
"""Device error token for an authentication failure."""
