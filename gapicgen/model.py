"""Intermediate representation of services and methods as CLI commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .flags import Flag
from .naming import ImportSpec

EMPTY_PROTO_TYPE = "google.protobuf.Empty"
"""Fully qualified name of the Empty message type."""

LRO_PROTO_TYPE = "google.longrunning.Operation"
"""Fully qualified name of the long-running Operation message type."""


@dataclass
class NestedMessage:
    """A nested message that the generated code must initialise."""

    field_name: str = ""
    field_type: str = ""


@dataclass
class GeneratedFile:
    """One generated output file."""

    name: str
    content: str


@dataclass
class Command:
    """An RPC method, or a whole service, represented as a CLI command."""

    service: str = ""
    service_client_type: str = ""
    method: str = ""
    method_cmd: str = ""
    input_message_type: str = ""
    input_message: str = ""
    input_message_var: str = ""
    short_desc: str = ""
    long_desc: str = ""
    imports: Dict[str, ImportSpec] = field(default_factory=dict)
    flags: List[Flag] = field(default_factory=list)
    one_of_selectors: Dict[str, Flag] = field(default_factory=dict)
    nested_messages: List[NestedMessage] = field(default_factory=list)
    env_prefix: str = ""
    output_message_type: str = ""
    server_streaming: bool = False
    client_streaming: bool = False
    paged: bool = False
    has_page_size: bool = False
    has_page_token: bool = False
    is_lro: bool = False
    is_lro_resp_empty: bool = False
    has_enums: bool = False
    has_optional: bool = False
    sub_commands: List["Command"] = field(default_factory=list)