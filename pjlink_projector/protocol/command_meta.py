#!/usr/bin/env python3

"""
PJLink known commands and metadata.

This module contains the known commands and metadata for the PJLink protocol, as
published by JBMIA here:

https://pjlink.jbmia.or.jp/english/

There is no protocol implementation here; only metadata about the protocol.
"""
from __future__ import annotations

from ..internal_types import *
from ..exceptions import PjlinkProjectorError

power_status_map: Dict[str, str] = {
    "0": "off",
    "1": "on",
    "2": "cooling",
    "3": "warm-up",
  }
"""Response payloads for a POWR query, and the projector power states they correspond to."""

input_type_map: Dict[str, str] = {
    "1": "RGB",
    "2": "Video",
    "3": "Digital",
    "4": "Storage",
    "5": "Network",
  }
"""First digit of an INPT value, and the input type it corresponds to. The second digit
   is the input number within the type."""

av_mute_status_map: Dict[str, Tuple[bool, bool]] = {
    "11": (True, False),
    "21": (False, True),
    "31": (True, True),
    "30": (False, False),
  }
"""Response payloads for an AVMT query, and the (video_muted, audio_muted) states they correspond
   to."""

class CommandMeta:
    """Metadata for a single PJLink command"""
    name: str
    """The 4-character command name, e.g. "POWR"."""

    pjlink_class: int
    """The PJLink class that introduced the command (1 or 2)."""

    description: Optional[str]

    queryable: bool
    """True iff the command accepts the "?" query argument."""

    set_values: Optional[List[int]]
    """The values the command may be set to. None if the command cannot be set."""

    def __init__(
            self,
            name: str,
            pjlink_class: int,
            description: Optional[str]=None,
            queryable: bool=True,
            set_values: Optional[List[int]]=None,
          ):
        self.name = name
        self.pjlink_class = pjlink_class
        self.description = description
        self.queryable = queryable
        self.set_values = set_values

    @property
    def settable(self) -> bool:
        return self.set_values is not None

    def __str__(self) -> str:
        return f"CommandMeta({self.name}, class={self.pjlink_class})"

    def __repr__(self) -> str:
        return str(self)

_C = CommandMeta

_input_values = [ type_digit * 10 + number for type_digit in range(1, 6) for number in range(1, 10) ]

# The commands used by this package, with their metadata as described in the PJLink specification.
_command_metas: List[CommandMeta] = [
    _C("POWR", 1, "Power control / power status", set_values=[0, 1]),
    _C("INPT", 1, "Input switch / input status", set_values=_input_values),
    _C("AVMT", 1, "Video/audio mute control / mute status", set_values=[10, 11, 20, 21, 30, 31]),
    _C("ERST", 1, "Error status query"),
    _C("LAMP", 1, "Lamp hours and lamp on/off status query"),
    _C("INST", 1, "Available input list query"),
    _C("NAME", 1, "Projector name query"),
    _C("INF1", 1, "Manufacturer name query"),
    _C("INF2", 1, "Product name query"),
    _C("INFO", 1, "Other information query"),
    _C("CLSS", 1, "PJLink class query"),
    _C("SVOL", 2, "Speaker volume adjustment (0=decrease, 1=increase)", queryable=False, set_values=[0, 1]),
    _C("IRES", 2, "Input resolution query"),
    _C("FREZ", 2, "Freeze control / freeze status", set_values=[0, 1]),
  ]

command_metas: Dict[str, CommandMeta] = {}
for _command in _command_metas:
    assert not _command.name in command_metas
    command_metas[_command.name] = _command

def get_all_commands() -> List[CommandMeta]:
    """Returns a list of all known commands"""
    return list(command_metas.values())

def name_to_command_meta(name: str) -> CommandMeta:
    """Returns the metadata for a command name, e.g. "POWR". Raises PjlinkProjectorError if
       the command is not known."""
    result = command_metas.get(name.upper())
    if result is None:
        raise PjlinkProjectorError(f"Unknown PJLink command name: '{name}'")
    return result
