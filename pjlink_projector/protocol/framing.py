# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink line framing.

Pure functions that build request lines and classify/parse the lines received
from a projector. Nothing in this module does any I/O.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PjlinkProjectorError
from .auth import compute_digest
from .constants import (
    END_OF_LINE,
    QUERY_ARG,
    ACK_VALUE,
    DIGEST_LENGTH,
    ERROR_CODES,
    AUTH_ERROR_CODE,
    RESPONSE_SEPARATOR,
    RESPONSE_PREFIX_LENGTH,
    VERSION_TAG_LENGTH,
    COMMAND_NAME_LENGTH,
  )
from .handshake import (
    PJLINK_AUTH,
    PJLINK_NO_AUTH,
    PJLINK_AUTH_ERROR,
    SEED_LENGTH,
    Greeting,
    GreetingType,
  )
from .response import PjlinkResponse, ResponseType

def strip_terminator(data: bytes) -> bytes:
    """Removes a trailing carriage return (and a linefeed, if the sender added one)"""
    return data.rstrip(b"\r\n")

def decode_line(data: bytes) -> str:
    return data.decode('utf-8', errors='replace')

def build_plain_line(version_tag: str, cmd: str, arg: str) -> bytes:
    """Builds a request line for a projector that does not require authentication."""
    return f"{version_tag}{cmd} {arg}".encode('utf-8') + END_OF_LINE

def build_authenticated_line(seed: str, password: str, version_tag: str, cmd: str, arg: str) -> bytes:
    """Builds a request line answering an authentication greeting that supplied seed."""
    digest = compute_digest(seed, password)
    return digest.encode('ascii') + build_plain_line(version_tag, cmd, arg)

def classify_greeting(data: bytes) -> Greeting:
    """Determines whether a line received from the projector is a greeting.

    "PJLINK 1 <seed>\\r" requires authentication with the given seed;
    "PJLINK 0\\r" does not. Anything else, including an authentication
    greeting whose seed is not exactly 8 characters, is not a greeting, and
    is treated as a command response.
    """
    if data.startswith(PJLINK_AUTH):
        seed = decode_line(strip_terminator(data[len(PJLINK_AUTH):]))
        if len(seed) != SEED_LENGTH:
            return Greeting(GreetingType.NOT_A_GREETING)
        return Greeting(GreetingType.NEEDS_AUTH, seed)
    if data.startswith(PJLINK_NO_AUTH):
        return Greeting(GreetingType.NO_AUTH)
    return Greeting(GreetingType.NOT_A_GREETING)

def parse_response(data: bytes, version_tag: str, cmd: str, is_query: bool) -> PjlinkResponse:
    """Classifies a response line for the command cmd sent with version_tag.

    Raises PjlinkProjectorError if version_tag or cmd is not of the right length.
    """
    expected_prefix = f"{version_tag}{cmd}{RESPONSE_SEPARATOR}".encode('utf-8')
    if len(expected_prefix) != RESPONSE_PREFIX_LENGTH:
        raise PjlinkProjectorError(f"Invalid version tag or command name: '{version_tag}{cmd}'")
    if data.startswith(PJLINK_AUTH_ERROR):
        return PjlinkResponse(ResponseType.REJECTED, AUTH_ERROR_CODE, raw_data=data)
    if data[:RESPONSE_PREFIX_LENGTH] != expected_prefix:
        return PjlinkResponse(ResponseType.MALFORMED, raw_data=data)
    tail = decode_line(strip_terminator(data[RESPONSE_PREFIX_LENGTH:]))
    if is_query:
        if tail in ERROR_CODES:
            return PjlinkResponse(ResponseType.REJECTED, tail, raw_data=data)
        return PjlinkResponse(ResponseType.PAYLOAD, tail, raw_data=data)
    if tail.startswith(ACK_VALUE):
        return PjlinkResponse(ResponseType.ACK, raw_data=data)
    return PjlinkResponse(ResponseType.REJECTED, tail, raw_data=data)

class PjlinkRequest:
    """A request line as seen by a projector."""
    digest: Optional[str]
    version_tag: str
    name: str
    arg: str

    def __init__(self, version_tag: str, name: str, arg: str, digest: Optional[str]=None):
        self.version_tag = version_tag
        self.name = name
        self.arg = arg
        self.digest = digest

    @property
    def is_query(self) -> bool:
        return self.arg == QUERY_ARG

    def __str__(self) -> str:
        return f"PjlinkRequest({self.version_tag}{self.name} {self.arg})"

    def __repr__(self) -> str:
        return str(self)

def parse_request_line(data: bytes) -> PjlinkRequest:
    """Parses a request line received by a projector. Used by the emulator.

    Raises PjlinkProjectorError if the line is not a well-formed request.
    """
    line = decode_line(strip_terminator(data))
    digest: Optional[str] = None
    if not line.startswith('%'):
        digest = line[:DIGEST_LENGTH]
        line = line[DIGEST_LENGTH:]
        if len(digest) != DIGEST_LENGTH or not line.startswith('%'):
            raise PjlinkProjectorError(f"Invalid request line: {data!r}")
    body_start = VERSION_TAG_LENGTH + COMMAND_NAME_LENGTH
    version_tag = line[:VERSION_TAG_LENGTH]
    name = line[VERSION_TAG_LENGTH:body_start]
    if len(line) < body_start + 2 or line[body_start] != ' ':
        raise PjlinkProjectorError(f"Invalid request line: {data!r}")
    arg = line[body_start + 1:]
    return PjlinkRequest(version_tag, name.upper(), arg, digest=digest)
