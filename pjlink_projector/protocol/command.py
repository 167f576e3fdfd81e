# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PjlinkProjectorError
from .constants import (
    CLASS1_VERSION_TAG,
    CLASS2_VERSION_TAG,
    VERSION2_COMMANDS,
    COMMAND_NAME_LENGTH,
    QUERY_ARG,
  )
from .framing import (
    build_plain_line,
    build_authenticated_line,
    parse_response,
  )
from .response import PjlinkResponse

class QueryMarker:
    """The argument of a command that asks for the projector's current value
       rather than setting one. Use the QUERY singleton."""

    def __str__(self) -> str:
        return QUERY_ARG

    def __repr__(self) -> str:
        return "QUERY"

QUERY = QueryMarker()

PjlinkArg = Union[int, QueryMarker]
"""A command argument: either a non-negative integer to set, or QUERY."""

def version_tag_for_command(name: str) -> str:
    """Returns the version tag used for every request of the named command."""
    return CLASS2_VERSION_TAG if name.upper() in VERSION2_COMMANDS else CLASS1_VERSION_TAG

class PjlinkCommand:
    """A command to a PJLink projector: a 4-character command name and either
       an integer argument (a set command) or QUERY.

    The version tag is determined once, from the command name, and is used
    for every attempt to send the command.
    """
    name: str
    arg: PjlinkArg
    version_tag: str

    def __init__(self, name: str, arg: Union[PjlinkArg, str]):
        if len(name) != COMMAND_NAME_LENGTH or not name.isascii() or not name.isalnum():
            raise PjlinkProjectorError(f"Invalid PJLink command name: '{name}'")
        if isinstance(arg, str):
            if arg != QUERY_ARG:
                raise PjlinkProjectorError(f"Invalid PJLink command argument for {name}: '{arg}'")
            arg = QUERY
        elif not isinstance(arg, QueryMarker):
            if isinstance(arg, bool) or not isinstance(arg, int) or arg < 0:
                raise PjlinkProjectorError(f"Invalid PJLink command argument for {name}: {arg!r}")
        self.name = name.upper()
        self.arg = arg
        self.version_tag = version_tag_for_command(self.name)

    @classmethod
    def create_query(cls, name: str) -> Self:
        return cls(name, QUERY)

    @classmethod
    def create_set(cls, name: str, value: int) -> Self:
        return cls(name, value)

    @property
    def is_query(self) -> bool:
        return isinstance(self.arg, QueryMarker)

    @property
    def arg_str(self) -> str:
        """The argument as sent on the wire: "?" or a decimal integer"""
        return str(self.arg)

    def request_line(self, seed: Optional[str]=None, password: Optional[str]=None) -> bytes:
        """Builds the request line. If seed is not None, the line is authenticated with
           the seed and password."""
        if seed is None:
            return build_plain_line(self.version_tag, self.name, self.arg_str)
        return build_authenticated_line(
            seed, '' if password is None else password, self.version_tag, self.name, self.arg_str)

    def parse_response(self, data: bytes) -> PjlinkResponse:
        """Classifies a response line received for this command"""
        return parse_response(data, self.version_tag, self.name, self.is_query)

    def __str__(self) -> str:
        return f"{self.version_tag}{self.name} {self.arg_str}"

    def __repr__(self) -> str:
        return f"PjlinkCommand({self})"
