# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for PJLink projectors.

Refer to https://pjlink.jbmia.or.jp/english/
for the official protocol documentation.
"""

from .constants import (
    END_OF_LINE,
    CLASS1_VERSION_TAG,
    CLASS2_VERSION_TAG,
    VERSION2_COMMANDS,
    RESPONSE_PREFIX_LENGTH,
    QUERY_ARG,
    ACK_VALUE,
    ERROR_CODES,
    AUTH_ERROR_CODE,
  )

from .handshake import (
    PJLINK_NO_AUTH,
    PJLINK_AUTH,
    PJLINK_AUTH_ERROR,
    SEED_LENGTH,
    Greeting,
    GreetingType,
)

from .auth import compute_digest

from .response import (
    PjlinkResponse,
    ResponseType,
  )

from .framing import (
    build_plain_line,
    build_authenticated_line,
    classify_greeting,
    parse_response,
    parse_request_line,
    PjlinkRequest,
  )

from .command import (
    PjlinkCommand,
    PjlinkArg,
    QueryMarker,
    QUERY,
    version_tag_for_command,
  )

from .command_meta import (
    CommandMeta,
    get_all_commands,
    name_to_command_meta,
    power_status_map,
    input_type_map,
    av_mute_status_map,
  )
