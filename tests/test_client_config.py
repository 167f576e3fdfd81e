import pytest

from pjlink_projector import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    CLOSE_TIMEOUT,
    MAX_RETRIES,
    PjlinkClientConfig,
    PjlinkProjectorError,
    PjlinkSession,
    resolve_projector_tcp_host,
)


def test_defaults():
    config = PjlinkClientConfig()
    assert config.default_host is None
    assert config.default_port == DEFAULT_PORT
    assert config.password is None
    assert config.timeout_secs == DEFAULT_TIMEOUT
    assert config.close_timeout_secs == CLOSE_TIMEOUT
    assert config.max_retries == MAX_RETRIES


def test_environment(monkeypatch):
    monkeypatch.setenv("PJLINK_PROJECTOR_HOST", "projector.local")
    monkeypatch.setenv("PJLINK_PROJECTOR_PORT", "14352")
    monkeypatch.setenv("PJLINK_PROJECTOR_PASSWORD", "secret")
    monkeypatch.setenv("PJLINK_PROJECTOR_TIMEOUT", "3.5")
    config = PjlinkClientConfig()
    assert config.default_host == "projector.local"
    assert config.default_port == 14352
    assert config.password == "secret"
    assert config.timeout_secs == 3.5


def test_arguments_override_base_config():
    base = PjlinkClientConfig("projector.local", "secret", timeout_secs=5.0, max_retries=2)
    config = PjlinkClientConfig(default_port=1234, base_config=base)
    assert config.default_host == "projector.local"
    assert config.password == "secret"
    assert config.default_port == 1234
    assert config.timeout_secs == 5.0
    assert config.max_retries == 2


def test_negative_retries_rejected():
    with pytest.raises(PjlinkProjectorError):
        PjlinkClientConfig(max_retries=-1)


def test_zero_retries_allowed():
    assert PjlinkClientConfig(max_retries=0).max_retries == 0


def test_from_jsonable():
    config = PjlinkClientConfig.from_jsonable(
        dict(default_host="10.0.0.5", default_port=4353, password="pw", timeout_secs=1, max_retries=3))
    assert config.default_host == "10.0.0.5"
    assert config.default_port == 4353
    assert config.password == "pw"
    assert config.timeout_secs == 1.0
    assert config.max_retries == 3


def test_from_jsonable_unknown_key():
    with pytest.raises(PjlinkProjectorError):
        PjlinkClientConfig.from_jsonable(dict(default_host="10.0.0.5", retries=3))


def test_to_jsonable_omits_password():
    data = PjlinkClientConfig("10.0.0.5", "pw").to_jsonable()
    assert "password" not in data
    assert data["default_host"] == "10.0.0.5"
    assert PjlinkClientConfig.from_jsonable(data).default_host == "10.0.0.5"


@pytest.mark.parametrize(
    "host, expected",
    [
        ("projector.local", ("projector.local", 4352)),
        ("tcp://projector.local", ("projector.local", 4352)),
        ("10.0.0.5:14352", ("10.0.0.5", 14352)),
        ("tcp://10.0.0.5:14352", ("10.0.0.5", 14352)),
        ("[fe80::1]:14352", ("fe80::1", 14352)),
        ("[fe80::1]", ("fe80::1", 4352)),
        ("fe80::1", ("fe80::1", 4352)),
    ],
)
def test_resolve_host(host, expected):
    assert resolve_projector_tcp_host(host) == expected


def test_resolve_host_default_port():
    assert resolve_projector_tcp_host("projector.local", 5000) == ("projector.local", 5000)


def test_resolve_host_from_environment(monkeypatch):
    monkeypatch.setenv("PJLINK_PROJECTOR_HOST", "env-projector")
    monkeypatch.setenv("PJLINK_PROJECTOR_PORT", "5001")
    assert resolve_projector_tcp_host() == ("env-projector", 5001)


@pytest.mark.parametrize("host", [None, "", "udp://projector.local", "[fe80::1", ":4352"])
def test_resolve_host_invalid(host):
    with pytest.raises(PjlinkProjectorError):
        resolve_projector_tcp_host(host)


def test_session_resolves_host_at_construction():
    session = PjlinkSession("tcp://10.0.0.5:14352", password="pw")
    assert session.host == "10.0.0.5"
    assert session.port == 14352
    assert session.password == "pw"


def test_session_without_host(monkeypatch):
    with pytest.raises(PjlinkProjectorError):
        PjlinkSession()
