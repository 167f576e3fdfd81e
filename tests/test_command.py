import hashlib

import pytest

from pjlink_projector import (
    PjlinkProjectorError,
    PjlinkCommand,
    QUERY,
    ResponseType,
    get_all_commands,
    name_to_command_meta,
)
from pjlink_projector.protocol import VERSION2_COMMANDS


@pytest.mark.parametrize("name", ["SVOL", "IRES", "FREZ"])
def test_class2_commands_use_version2_tag(name):
    assert PjlinkCommand(name, QUERY).version_tag == "%2"
    assert PjlinkCommand(name, 1).request_line().startswith(b"%2" + name.encode())


@pytest.mark.parametrize("name", ["POWR", "INPT", "AVMT", "LAMP", "NAME", "CLSS", "ABCD"])
def test_other_commands_use_version1_tag(name):
    assert PjlinkCommand(name, QUERY).version_tag == "%1"


def test_version2_commands_match_command_metadata():
    class2 = set(meta.name for meta in get_all_commands() if meta.pjlink_class == 2)
    assert class2 == set(VERSION2_COMMANDS)


def test_name_is_normalized_to_upper_case():
    command = PjlinkCommand("svol", 0)
    assert command.name == "SVOL"
    assert command.version_tag == "%2"
    assert str(command) == "%2SVOL 0"


def test_query_argument():
    command = PjlinkCommand.create_query("POWR")
    assert command.is_query
    assert command.arg_str == "?"
    assert command.request_line() == b"%1POWR ?\r"


def test_question_mark_string_is_a_query():
    assert PjlinkCommand("LAMP", "?").is_query


def test_set_argument():
    command = PjlinkCommand.create_set("INPT", 31)
    assert not command.is_query
    assert command.request_line() == b"%1INPT 31\r"
    assert PjlinkCommand("POWR", 0).request_line() == b"%1POWR 0\r"


@pytest.mark.parametrize("arg", [-1, True, "1", "on", 1.5])
def test_invalid_argument(arg):
    with pytest.raises(PjlinkProjectorError):
        PjlinkCommand("POWR", arg)


@pytest.mark.parametrize("name", ["POW", "POWER", "PO R", "PO%R", ""])
def test_invalid_name(name):
    with pytest.raises(PjlinkProjectorError):
        PjlinkCommand(name, QUERY)


def test_authenticated_request_line():
    command = PjlinkCommand("POWR", 1)
    line = command.request_line(seed="12345678", password="panasonic")
    assert line == hashlib.md5(b"12345678panasonic").hexdigest().encode("ascii") + b"%1POWR 1\r"


def test_digest_depends_only_on_seed_and_password():
    seed = "0a1b2c3d"
    line1 = PjlinkCommand("POWR", 1).request_line(seed=seed, password="pw")
    line2 = PjlinkCommand("FREZ", QUERY).request_line(seed=seed, password="pw")
    assert line1[:32] == line2[:32]
    assert PjlinkCommand("POWR", 1).request_line(seed="ffffffff", password="pw")[:32] != line1[:32]


def test_parse_response_uses_command_version_tag():
    command = PjlinkCommand("FREZ", QUERY)
    assert command.parse_response(b"%2FREZ=1\r").payload == "1"
    assert command.parse_response(b"%1FREZ=1\r").response_type == ResponseType.MALFORMED


def test_command_meta_lookup():
    meta = name_to_command_meta("powr")
    assert meta.name == "POWR"
    assert meta.settable
    assert meta.set_values == [0, 1]
    assert not name_to_command_meta("SVOL").queryable
    assert not name_to_command_meta("LAMP").settable
    with pytest.raises(PjlinkProjectorError):
        name_to_command_meta("XXXX")
