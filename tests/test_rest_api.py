"""Tests of the REST routes, with the projector client replaced by a fake."""

import json
from typing import Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pjlink_projector import (
    PjlinkCommand,
    PjlinkInputNotFoundError,
    PjlinkResponse,
    PjlinkRetryExhaustedError,
    ResponseType,
)
from pjlink_projector.rest_server import proj_api, fastapi_lifetime
from pjlink_projector.rest_server.api import get_client


class FakeProjectorClient:
    name = "Fake Projector"
    manufacturer = "ACME"
    model = "Beamer 9000"
    aux_info = None
    pjlink_class = "1"
    initialized = True

    def __init__(self) -> None:
        self.power_state = "off"
        self.input_number = 31
        self.muted = (False, False)
        self.calls: list[tuple] = []
        self.fail_with: Optional[Exception] = None

    async def _record(self, *call) -> None:
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    async def get_power(self) -> str:
        await self._record("get_power")
        return self.power_state

    async def power(self, state: str) -> None:
        await self._record("power", state)
        self.power_state = state

    async def get_input(self) -> str:
        await self._record("get_input")
        return "Digital 1"

    async def set_input_by_direct_number(self, input_number: int) -> None:
        await self._record("set_input", input_number)
        if input_number not in (11, 31):
            raise PjlinkInputNotFoundError(f'Input "{input_number}" does not exist')
        self.input_number = input_number

    async def get_available_input_list(self) -> list[str]:
        return ["11", "31"]

    async def get_lamp(self) -> int:
        return 1234

    async def get_video_and_audio_mute(self) -> tuple[bool, bool]:
        return self.muted

    async def set_video_mute(self, state: str) -> None:
        await self._record("video_mute", state)

    async def set_audio_mute(self, state: str) -> None:
        await self._record("audio_mute", state)

    async def set_video_and_audio_mute(self, state: str) -> None:
        await self._record("all_mute", state)

    async def get_freeze(self) -> bool:
        return False

    async def set_freeze(self, state: str) -> None:
        await self._record("freeze", state)

    async def set_volume(self, direction: str) -> None:
        await self._record("volume", direction)

    async def get_input_resolution(self) -> str:
        return "1920x1080"

    async def perform_command(self, command: PjlinkCommand) -> PjlinkResponse:
        await self._record("command", str(command))
        if command.is_query:
            return PjlinkResponse(ResponseType.PAYLOAD, "1")
        return PjlinkResponse(ResponseType.ACK)


@pytest.fixture
def fake_client():
    fake = FakeProjectorClient()
    proj_api.dependency_overrides[get_client] = lambda: fake
    yield fake
    proj_api.dependency_overrides.clear()


@pytest.fixture
def http(fake_client) -> TestClient:
    return TestClient(proj_api)


def test_identity(http):
    response = http.get("/api/v1/identity")
    assert response.status_code == 200
    assert response.json() == dict(
        name="Fake Projector",
        manufacturer="ACME",
        model="Beamer 9000",
        aux_info=None,
        pjlink_class="1",
        initialized=True,
    )


def test_power(http, fake_client):
    assert http.get("/api/v1/power").json() == dict(power="off")
    response = http.post("/api/v1/power/on")
    assert response.status_code == 200
    assert fake_client.calls[-1] == ("power", "on")
    assert http.get("/api/v1/power").json() == dict(power="on")


def test_input(http, fake_client):
    assert http.get("/api/v1/input").json() == dict(input="Digital 1")
    assert http.get("/api/v1/inputs").json() == dict(inputs=["11", "31"])
    assert http.post("/api/v1/input/11").status_code == 200
    assert fake_client.input_number == 11


def test_input_not_found(http):
    response = http.post("/api/v1/input/59")
    assert response.status_code == 404
    assert "59" in response.json()["detail"]


def test_projector_unreachable(http, fake_client):
    fake_client.fail_with = PjlinkRetryExhaustedError("Failed command to projector")
    response = http.get("/api/v1/power")
    assert response.status_code == 502
    assert response.json()["detail"] == "Failed command to projector"


def test_lamp_and_resolution(http):
    assert http.get("/api/v1/lamp").json() == dict(lamp_hours=1234)
    assert http.get("/api/v1/resolution").json() == dict(resolution="1920x1080")


def test_mute(http, fake_client):
    assert http.get("/api/v1/mute").json() == dict(video_muted=False, audio_muted=False)
    assert http.post("/api/v1/mute/video/on").status_code == 200
    assert http.post("/api/v1/mute/audio/off").status_code == 200
    assert http.post("/api/v1/mute/all/on").status_code == 200
    assert fake_client.calls == [("video_mute", "on"), ("audio_mute", "off"), ("all_mute", "on")]
    assert http.post("/api/v1/mute/subtitles/on").status_code == 400


def test_freeze_and_volume(http, fake_client):
    assert http.get("/api/v1/freeze").json() == dict(freeze=False)
    assert http.post("/api/v1/freeze/on").json() == dict(freeze=True)
    assert http.post("/api/v1/volume/increase").status_code == 200
    assert fake_client.calls == [("freeze", "on"), ("volume", "increase")]


def test_raw_query_command(http, fake_client):
    response = http.post("/api/v1/command", json=dict(name="powr"))
    assert response.status_code == 200
    assert response.json() == dict(command="%1POWR ?", response_type="payload", value="1")


def test_raw_set_command(http, fake_client):
    response = http.post("/api/v1/command", json=dict(name="FREZ", value=1))
    assert response.json() == dict(command="%2FREZ 1", response_type="ack", value=None)
    assert fake_client.calls == [("command", "%2FREZ 1")]


def test_raw_command_invalid(http, fake_client):
    response = http.post("/api/v1/command", json=dict(name="TOOLONG", value=1))
    assert response.status_code == 400
    assert fake_client.calls == []


async def test_lifespan_connects_from_config_file(emulator, tmp_path, monkeypatch):
    config_file = tmp_path / "projector.json"
    config_file.write_text(json.dumps(dict(
        default_host="127.0.0.1",
        default_port=emulator.port,
        timeout_secs=1.0,
        close_timeout_secs=0.05,
    )))
    monkeypatch.setenv("PJLINK_PROJECTOR_CONFIG", str(config_file))
    app = FastAPI()

    async with fastapi_lifetime(app):
        client = app.state.pjlink_client
        assert client.initialized
        assert client.name == "Emulated Projector"
        assert client.session.port == emulator.port
