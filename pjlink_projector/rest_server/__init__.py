# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a PJLink projector.
"""
from .app import proj_api, fastapi_lifetime
