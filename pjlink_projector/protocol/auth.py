# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink challenge-response authentication.
"""

from __future__ import annotations

import hashlib

def compute_digest(seed: str, password: str) -> str:
    """Returns the digest sent ahead of a request after an authentication greeting.

    The digest is the lowercase hex MD5 of the seed supplied by the projector
    followed by the password. It must match what the projector computes; a
    mismatch is answered with "PJLINK ERRA".
    """
    return hashlib.md5((seed + password).encode('utf-8')).hexdigest()
