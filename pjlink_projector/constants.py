# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by pjlink_projector"""

DEFAULT_PORT = 4352
"""The listen port number used by the projector for PJLink TCP/IP control."""

DEFAULT_TIMEOUT = 2.0
"""The default per-attempt response timeout, in seconds. Measured from the moment
   the connection is initiated until a response line is received."""

CLOSE_TIMEOUT = 0.2
"""The grace window for the projector to confirm a socket close, in seconds.
   If the close is not confirmed in time, the socket is aborted."""

MAX_RETRIES = 5
"""The maximum number of retries of a single command; i.e., a command is
   attempted at most MAX_RETRIES + 1 times."""
