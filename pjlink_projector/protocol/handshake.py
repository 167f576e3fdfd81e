# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

from enum import Enum

from ..internal_types import *

# Connection handshake:
#   Projector: "PJLINK 0\r" if no password is set, or "PJLINK 1 <seed>\r" if a password is set,
#              where <seed> is an 8-character random string
#   Client: "<request>\r" if no password is set, or "<digest><request>\r" where
#           digest = md5(<seed> + <password>) as 32 lowercase hex digits
#   Projector: "<response>\r" or, if the digest is wrong, "PJLINK ERRA\r"
#   <Both sides close the connection>

PJLINK_NO_AUTH = b"PJLINK 0"
"""Sent by the projector immediately on connecting, if no password is required."""

PJLINK_AUTH = b"PJLINK 1 "
"""Sent by the projector immediately on connecting, if a password is required. Followed
   immediately by an 8-character seed and a terminating carriage return."""

PJLINK_AUTH_ERROR = b"PJLINK ERRA"
"""Sent by the projector in response to an authenticated request with a bad digest."""

SEED_LENGTH = 8
"""Length of the random seed in an authentication greeting."""

class GreetingType(Enum):
    NEEDS_AUTH = "needs_auth"
    NO_AUTH = "no_auth"
    NOT_A_GREETING = "not_a_greeting"

class Greeting:
    """The classification of a line received from the projector while waiting
       for a response. Anything that is not a greeting is a command response."""
    greeting_type: GreetingType
    seed: Optional[str]

    def __init__(self, greeting_type: GreetingType, seed: Optional[str]=None):
        self.greeting_type = greeting_type
        self.seed = seed

    @property
    def needs_auth(self) -> bool:
        return self.greeting_type == GreetingType.NEEDS_AUTH

    @property
    def is_greeting(self) -> bool:
        return self.greeting_type != GreetingType.NOT_A_GREETING

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Greeting):
            return NotImplemented
        return self.greeting_type == other.greeting_type and self.seed == other.seed

    def __str__(self) -> str:
        if self.seed is None:
            return f"Greeting({self.greeting_type.name})"
        return f"Greeting({self.greeting_type.name}, seed='{self.seed}')"

    def __repr__(self) -> str:
        return str(self)
