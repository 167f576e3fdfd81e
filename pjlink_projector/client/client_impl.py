# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink Projector client.

Provides human-readable projector actions (power, input selection, mute, etc.)
on top of a PjlinkSession.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import (
    PjlinkProjectorError,
    PjlinkRetryExhaustedError,
    PjlinkInputNotFoundError,
  )
from ..pkg_logging import logger
from ..protocol import (
    PjlinkCommand,
    PjlinkResponse,
    power_status_map,
    input_type_map,
    av_mute_status_map,
  )

from .client_config import PjlinkClientConfig
from .session import PjlinkSession

OnOff = Literal['on', 'off']

class PjlinkProjectorClient:
    """PJLink Projector TCP/IP client."""

    session: PjlinkSession

    name: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    aux_info: Optional[str] = None
    pjlink_class: Optional[str] = None

    initialized: bool = False
    """True iff the identity probe has completed successfully."""

    def __init__(self, session: PjlinkSession):
        self.session = session

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            password: Optional[str]=None,
            port: Optional[int]=None,
            config: Optional[PjlinkClientConfig]=None,
          ) -> Self:
        """Creates a client and probes the projector's identity.

        A failed identity probe is logged, not raised; the identity
        properties that were not retrieved remain None.
        """
        session = PjlinkSession(host=host, password=password, port=port, config=config)
        self = cls(session)
        await self.probe_identity()
        return self

    async def probe_identity(self) -> bool:
        """Queries the projector's name, manufacturer, model, other information
           and PJLink class, in that order.

        Stops at the first failure, which is logged; there is no retry of the
        sequence beyond the retries of each individual command. Returns True
        if all queries succeeded.
        """
        try:
            self.name = await self.session.query('NAME')
            self.manufacturer = await self.session.query('INF1')
            self.model = await self.session.query('INF2')
            self.aux_info = await self.session.query('INFO')
            self.pjlink_class = await self.session.query('CLSS')
        except PjlinkProjectorError as e:
            logger.error(f"{self}: Projector initialization error: {e}")
            return False
        self.initialized = True
        logger.debug(
            f"{self}: Identified projector name='{self.name}', manufacturer='{self.manufacturer}', "
            f"model='{self.model}', class='{self.pjlink_class}'")
        return True

    async def perform_command(self, command: PjlinkCommand) -> PjlinkResponse:
        """Sends a raw command and returns the response."""
        return await self.session.perform_command(command)

    async def power(self, state: OnOff) -> None:
        """Turns the projector on or off. Does not wait for warm-up or cool-down."""
        state = cast(OnOff, state.lower())
        if state == 'on':
            await self.session.set('POWR', 1)
        elif state == 'off':
            await self.session.set('POWR', 0)
        else:
            raise PjlinkProjectorError(f"Invalid power command: '{state}'")

    async def get_power(self) -> str:
        """Returns the power status: one of "on", "off", "cooling" or "warm-up"."""
        value = await self.session.query('POWR')
        result = power_status_map.get(value)
        if result is None:
            raise PjlinkProjectorError(f"{self}: Unexpected power status: '{value}'")
        return result

    async def get_lamp(self) -> int:
        """Returns the accumulated hours of the first lamp.

        The LAMP payload is "<hours> <on/off>" for each lamp, separated by spaces.
        """
        value = await self.session.query('LAMP')
        hours_str, sep, _ = value.partition(' ')
        if sep == '' or not hours_str.isdigit():
            raise PjlinkProjectorError(f"{self}: Unexpected lamp status: '{value}'")
        hours = int(hours_str)
        if str(hours).zfill(len(hours_str)) != hours_str:
            raise PjlinkProjectorError(f"{self}: Unexpected lamp status: '{value}'")
        return hours

    async def get_input(self) -> str:
        """Returns the current input, e.g., "RGB 1" or "Digital 2"."""
        value = await self.session.query('INPT')
        input_type = input_type_map.get(value[:1])
        if input_type is None:
            return f"Unknown Input: {value}"
        return f"{input_type} {value[1:2]}"

    async def set_volume(self, direction: Literal['increase', 'decrease']) -> None:
        """Steps the speaker volume up or down."""
        if direction == 'increase':
            await self.session.set('SVOL', 1)
        elif direction == 'decrease':
            await self.session.set('SVOL', 0)
        else:
            raise PjlinkProjectorError(f"Invalid volume instruction: '{direction}'")

    async def _set_av_mute(self, state: OnOff, code: int, kind: str) -> None:
        if state == 'on':
            await self.session.set('AVMT', code * 10 + 1)
        elif state == 'off':
            await self.session.set('AVMT', code * 10)
        else:
            raise PjlinkProjectorError(f"Invalid {kind} mute instruction: '{state}'")

    async def set_video_mute(self, state: OnOff) -> None:
        await self._set_av_mute(state, 1, "video")

    async def set_audio_mute(self, state: OnOff) -> None:
        await self._set_av_mute(state, 2, "audio")

    async def set_video_and_audio_mute(self, state: OnOff) -> None:
        await self._set_av_mute(state, 3, "video and audio")

    async def get_video_and_audio_mute(self) -> Tuple[bool, bool]:
        """Returns (video_muted, audio_muted)."""
        value = await self.session.query('AVMT')
        result = av_mute_status_map.get(value)
        if result is None:
            raise PjlinkProjectorError(f"{self}: Unexpected mute status: '{value}'")
        return result

    async def get_input_resolution(self) -> str:
        """Returns the input signal resolution, e.g., "1920x1080"."""
        return await self.session.query('IRES')

    async def set_freeze(self, state: OnOff) -> None:
        if state == 'on':
            await self.session.set('FREZ', 1)
        elif state == 'off':
            await self.session.set('FREZ', 0)
        else:
            raise PjlinkProjectorError(f"Invalid freeze instruction: '{state}'")

    async def get_freeze(self) -> bool:
        return (await self.session.query('FREZ')) == '1'

    async def get_available_input_list(self) -> List[str]:
        """Returns the available inputs, e.g., ["11", "12", "32"]."""
        value = await self.session.query('INST')
        return value.split()

    async def set_input_by_direct_number(self, input_number: int) -> None:
        """Selects an input by its two-digit PJLink number, e.g., 31 for "Digital 1".

        Raises PjlinkInputNotFoundError if the projector reports the input does not exist.
        """
        try:
            await self.session.set('INPT', input_number)
        except PjlinkRetryExhaustedError as e:
            if e.device_error == 'ERR2':
                raise PjlinkInputNotFoundError(f'Input "{input_number}" does not exist') from e
            raise

    async def set_input(
            self,
            input_type: Union[str, int],
            number: Optional[int]=None,
          ) -> None:
        """Selects an input by type name ("RGB", "Video", "Digital", "Storage" or "Network")
           and number within the type, or by direct number if input_type is an int.

        Raises PjlinkInputNotFoundError if the projector reports the input does not exist.
        """
        if number is None or number == 0:
            number = 1
        if isinstance(input_type, int):
            input_number = input_type
        else:
            type_digits = dict((v, k) for k, v in input_type_map.items())
            type_digit = type_digits.get(input_type)
            if type_digit is None:
                raise PjlinkProjectorError(f"Invalid input type: '{input_type}'")
            input_number = int(f"{type_digit}{number}")
        try:
            await self.session.set('INPT', input_number)
        except PjlinkRetryExhaustedError as e:
            if e.device_error == 'ERR2':
                raise PjlinkInputNotFoundError(f"Input {input_type} {number} does not exist") from e
            raise

    def __str__(self) -> str:
        return f"PjlinkProjectorClient(session={self.session})"

    def __repr__(self) -> str:
       return str(self)
