#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a PJLink projector.
"""

from __future__ import annotations

from fastapi import FastAPI

import os
import json

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from ..client import (
    PjlinkClientConfig,
    pjlink_projector_connect,
  )

from .api import router as api_router

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """

    try:
        logger.info("Projector REST server starting up--initializing...")
        config_file = os.environ.get("PJLINK_PROJECTOR_CONFIG", None)
        if config_file is None:
            if os.path.exists("pjlink_projector_config.json"):
                config_file = "pjlink_projector_config.json"
        if config_file is None:
            raw_config: JsonableDict = {}
        else:
            with open(config_file, "r") as f:
                raw_config = json.load(f)
        pjlink_config = PjlinkClientConfig.from_jsonable(raw_config)
        pjlink_client = await pjlink_projector_connect(config=pjlink_config)
        app.state.pjlink_client = pjlink_client
        logger.info(f"Serving API for projector at {pjlink_client}...")

        logger.info("Projector REST server initialization done; starting server...")
        yield
    finally:
        logger.info("Projector REST server shutting down--cleaning up...")

proj_api = FastAPI(lifespan=fastapi_lifetime)
proj_api.include_router(api_router)
