# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink command exchange with bounded retry.

A logical command is carried out by a chain of PjlinkAttempts, each with its
own connection. Each failed attempt carries its error forward to the next one;
when the retries are exhausted, the error of the final attempt is surfaced to
the caller verbatim.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import (
    PjlinkAttemptError,
    PjlinkRetryExhaustedError,
  )
from ..constants import DEFAULT_TIMEOUT, DEFAULT_PORT, CLOSE_TIMEOUT, MAX_RETRIES
from ..pkg_logging import logger
from ..protocol import PjlinkCommand, PjlinkResponse

from .attempt import PjlinkAttempt

async def run_exchange(
        command: PjlinkCommand,
        host: str,
        port: int=DEFAULT_PORT,
        password: Optional[str]=None,
        *,
        timeout_secs: float=DEFAULT_TIMEOUT,
        close_timeout_secs: float=CLOSE_TIMEOUT,
        max_retries: int=MAX_RETRIES,
        attempt_class: Optional[Type[PjlinkAttempt]]=None,
      ) -> PjlinkResponse:
    """Sends a command to a projector, retrying on any failure.

    The command is attempted at most max_retries + 1 times. Attempts are
    strictly sequential; each attempt's connection is closed before the next
    attempt's connection is opened.

    Returns the ACK or PAYLOAD response of the first successful attempt.
    Raises PjlinkRetryExhaustedError, whose reason is the reason of the final
    attempt, if every attempt fails.
    """
    if attempt_class is None:
        attempt_class = PjlinkAttempt
    last_error: Optional[PjlinkAttemptError] = None
    for retry in range(max_retries + 1):
        attempt = attempt_class(
            command,
            host,
            port=port,
            password=password,
            retry=retry,
            timeout_secs=timeout_secs,
            close_timeout_secs=close_timeout_secs,
          )
        try:
            response = await attempt.run()
        except PjlinkAttemptError as e:
            logger.debug(f"{attempt}: Attempt failed: {e.reason}")
            last_error = e
            continue
        if retry > 0:
            logger.debug(f"{attempt}: Command succeeded after {retry} retries")
        return response

    assert last_error is not None
    logger.debug(f"Command '{command}' to {host}:{port} failed after {max_retries + 1} attempts: {last_error.reason}")
    raise PjlinkRetryExhaustedError(
        last_error.reason, last_error=last_error, attempts=max_retries + 1) from last_error
