# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

from enum import Enum

from ..internal_types import *
from ..exceptions import PjlinkProjectorError

class ResponseType(Enum):
    ACK = "ack"
    PAYLOAD = "payload"
    REJECTED = "rejected"
    MALFORMED = "malformed"

class PjlinkResponse:
    """A classified response line from a PJLink projector.

    A well-formed response line is of the form:

        <version_tag><CMD>=<VALUE>\\r

    For a set command, a VALUE of "OK" is an ACK; anything else is REJECTED, and
    the value (normally a device error token such as "ERR2") is kept in `value`.

    For a query, VALUE is the PAYLOAD, unless it is one of the standard device
    error tokens, in which case the response is REJECTED.

    Any line that does not begin with the expected "<version_tag><CMD>=" is
    MALFORMED.

    The terminator is never included in `value`.
    """
    response_type: ResponseType
    value: Optional[str]
    raw_data: bytes

    def __init__(self, response_type: ResponseType, value: Optional[str]=None, raw_data: bytes=b''):
        if response_type in (ResponseType.PAYLOAD, ResponseType.REJECTED) and value is None:
            raise PjlinkProjectorError(f"Response type {response_type.name} requires a value")
        self.response_type = response_type
        self.value = value
        self.raw_data = raw_data

    @property
    def is_success(self) -> bool:
        """Returns True iff the response is an ACK or a query PAYLOAD"""
        return self.response_type in (ResponseType.ACK, ResponseType.PAYLOAD)

    @property
    def is_ack(self) -> bool:
        return self.response_type == ResponseType.ACK

    @property
    def payload(self) -> Optional[str]:
        """Returns the query result string, or None if this is not a PAYLOAD response"""
        return self.value if self.response_type == ResponseType.PAYLOAD else None

    @property
    def device_error(self) -> Optional[str]:
        """Returns the raw rejection value, or None if this is not a REJECTED response"""
        return self.value if self.response_type == ResponseType.REJECTED else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PjlinkResponse):
            return NotImplemented
        return self.response_type == other.response_type and self.value == other.value

    def __str__(self) -> str:
        if self.value is None:
            return f"PjlinkResponse({self.response_type.name})"
        return f"PjlinkResponse({self.response_type.name}: {self.value!r})"

    def __repr__(self) -> str:
        return str(self)
