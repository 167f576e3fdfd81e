#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for the PJLink projector server.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from .logger import logger
from ..internal_types import *
from ..exceptions import (
    PjlinkProjectorError,
    PjlinkRetryExhaustedError,
    PjlinkInputNotFoundError,
  )
from ..protocol import PjlinkCommand, QUERY
from ..client import PjlinkProjectorClient

router = APIRouter(prefix="/api/v1")

class RawCommandRequest(BaseModel):
    name: str
    value: Optional[int] = None
    """None to send a query."""

def get_client(request: Request) -> PjlinkProjectorClient:
    return request.app.state.pjlink_client

async def _call(coro: Awaitable[Any]) -> Any:
    """Awaits a client call, translating projector errors into HTTP errors."""
    try:
        return await coro
    except PjlinkInputNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PjlinkRetryExhaustedError as e:
        logger.warning(f"Projector command failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except PjlinkProjectorError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/identity")
async def get_identity(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(
        name=client.name,
        manufacturer=client.manufacturer,
        model=client.model,
        aux_info=client.aux_info,
        pjlink_class=client.pjlink_class,
        initialized=client.initialized,
      )

@router.get("/power")
async def get_power(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(power=await _call(client.get_power()))

@router.post("/power/{state}")
async def set_power(state: str, client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    await _call(client.power(cast(Literal['on', 'off'], state)))
    return dict(power=state)

@router.get("/input")
async def get_input(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(input=await _call(client.get_input()))

@router.post("/input/{input_number}")
async def set_input(input_number: int, client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    await _call(client.set_input_by_direct_number(input_number))
    return dict(input=input_number)

@router.get("/inputs")
async def get_inputs(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(inputs=await _call(client.get_available_input_list()))

@router.get("/lamp")
async def get_lamp(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(lamp_hours=await _call(client.get_lamp()))

@router.get("/mute")
async def get_mute(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    video_muted, audio_muted = await _call(client.get_video_and_audio_mute())
    return dict(video_muted=video_muted, audio_muted=audio_muted)

@router.post("/mute/{target}/{state}")
async def set_mute(target: str, state: str, client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    on_off = cast(Literal['on', 'off'], state)
    if target == 'video':
        await _call(client.set_video_mute(on_off))
    elif target == 'audio':
        await _call(client.set_audio_mute(on_off))
    elif target == 'all':
        await _call(client.set_video_and_audio_mute(on_off))
    else:
        raise HTTPException(status_code=400, detail=f"Invalid mute target: '{target}'")
    return dict(target=target, state=state)

@router.get("/freeze")
async def get_freeze(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(freeze=await _call(client.get_freeze()))

@router.post("/freeze/{state}")
async def set_freeze(state: str, client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    await _call(client.set_freeze(cast(Literal['on', 'off'], state)))
    return dict(freeze=state == 'on')

@router.post("/volume/{direction}")
async def set_volume(direction: str, client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    await _call(client.set_volume(cast(Literal['increase', 'decrease'], direction)))
    return dict(volume=direction)

@router.get("/resolution")
async def get_resolution(client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    return dict(resolution=await _call(client.get_input_resolution()))

@router.post("/command")
async def raw_command(body: RawCommandRequest, client: PjlinkProjectorClient = Depends(get_client)) -> Dict[str, Any]:
    try:
        command = PjlinkCommand(body.name, QUERY if body.value is None else body.value)
    except PjlinkProjectorError as e:
        raise HTTPException(status_code=400, detail=str(e))
    response = await _call(client.perform_command(command))
    return dict(command=str(command), response_type=response.response_type.value, value=response.value)
