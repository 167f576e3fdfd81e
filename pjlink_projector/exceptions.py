#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from typing import Optional

class PjlinkProjectorError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class PjlinkAttemptError(PjlinkProjectorError):
  """A recoverable failure of a single command attempt. The command
     will be retried unless retries are exhausted.

     The reason is the message that is surfaced to the caller if this
     is the last attempt.
  """
  reason: str

  def __init__(self, reason: str):
    super().__init__(reason)
    self.reason = reason

class PjlinkTimeoutError(PjlinkAttemptError):
  """No response was received from the projector within the attempt timeout."""
  pass

class PjlinkProtocolMismatchError(PjlinkAttemptError):
  """The response did not begin with the expected version tag and command."""
  pass

class PjlinkCommandRejectedError(PjlinkAttemptError):
  """The projector answered the command with an error token (e.g., "ERR2")."""
  device_error: str

  def __init__(self, reason: str, device_error: str):
    super().__init__(reason)
    self.device_error = device_error

class PjlinkCloseError(PjlinkAttemptError):
  """The socket did not confirm close within the grace window, and was aborted."""
  pass

class PjlinkRetryExhaustedError(PjlinkProjectorError):
  """A command failed on every attempt. The reason is the reason
     of the final attempt, verbatim."""
  reason: str
  last_error: Optional[PjlinkAttemptError]
  attempts: int

  def __init__(self, reason: str, last_error: Optional[PjlinkAttemptError]=None, attempts: int=0):
    super().__init__(reason)
    self.reason = reason
    self.last_error = last_error
    self.attempts = attempts

  @property
  def device_error(self) -> Optional[str]:
    """The device error token of the final attempt, if the projector rejected it."""
    if isinstance(self.last_error, PjlinkCommandRejectedError):
      return self.last_error.device_error
    return None

class PjlinkInputNotFoundError(PjlinkProjectorError):
  """The projector rejected an input selection because the input does not exist."""
  pass
