"""Command-line flags built from protobuf fields."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional

from .naming import ImportSpec, dot_to_camel, title, to_title


class FieldType(enum.IntEnum):
    """Protobuf field types, numbered as in the descriptor format."""

    DOUBLE = 1
    FLOAT = 2
    INT64 = 3
    UINT64 = 4
    INT32 = 5
    FIXED64 = 6
    FIXED32 = 7
    BOOL = 8
    STRING = 9
    GROUP = 10
    MESSAGE = 11
    BYTES = 12
    UINT32 = 13
    ENUM = 14
    SFIXED32 = 15
    SFIXED64 = 16
    SINT32 = 17
    SINT64 = 18


_GO_PRIM_TYPES = {
    FieldType.DOUBLE: "float64",
    FieldType.FLOAT: "float32",
    FieldType.INT64: "int64",
    FieldType.UINT64: "uint64",
    FieldType.INT32: "int32",
    FieldType.FIXED64: "uint64",
    FieldType.FIXED32: "uint32",
    FieldType.BOOL: "bool",
    FieldType.STRING: "string",
    FieldType.BYTES: "[]byte",
    FieldType.UINT32: "uint32",
    FieldType.SFIXED32: "int32",
    FieldType.SFIXED64: "int64",
    FieldType.SINT32: "int32",
    FieldType.SINT64: "int64",
}

_INT_TYPES = {"int32", "int64", "int", "uint32", "uint64"}


def go_type_for_prim(field_type: Optional[FieldType]) -> str:
    """Go type name of a primitive protobuf type, or "" if it has none."""
    return _GO_PRIM_TYPES.get(field_type, "")


@dataclass
class Flag:
    """A request field exposed as a command-line flag."""

    name: str = ""
    type: Optional[FieldType] = None
    message: str = ""
    repeated: bool = False
    required: bool = False
    usage: str = ""
    message_import: ImportSpec = field(default_factory=ImportSpec)
    one_ofs: Dict[str, "Flag"] = field(default_factory=dict)
    one_of_selector: str = ""
    var_name: str = ""
    field_name: str = ""
    slice_accessor: str = ""
    is_one_of_field: bool = False
    is_nested: bool = False
    is_map: bool = False
    optional: bool = False
    # Set by gen_flag.
    accessor: str = ""
    # Message type details for message-typed fields.
    msg_name: str = ""
    msg_parent: Optional[str] = None
    msg_package: str = ""
    # Details of the message that owns the oneof this flag belongs to.
    oneof_owner_package: str = ""
    oneof_owner_import: Optional[ImportSpec] = None

    def gen_flag(self) -> str:
        """Return the pflag call registering this flag, or "" if unsupported."""
        t_str = go_type_for_prim(self.type)
        if self.is_enum():
            t_str = "string"
        f_type = to_title(t_str)

        if self.repeated:
            if self.type == FieldType.MESSAGE:
                # Repeated messages are given as JSON strings.
                return (
                    f'StringArrayVar(&{self.var_name}, "{self.name}", '
                    f'[]string{{}}, "{self.usage}")'
                )
            f_type += "Slice"
            default = "[]" + t_str + "{}"
        elif t_str == "bool":
            default = "false"
        elif t_str == "string":
            default = '""'
        elif t_str in _INT_TYPES:
            if self.field_name == "PageSize":
                # A zero page size short-circuits the call.
                default = "10"
                self.usage = f"Default is {default}. {self.usage}"
            else:
                default = "0"
        elif t_str in ("float32", "float64"):
            default = "0.0"
        elif t_str == "[]byte":
            default = "[]byte{}"
            f_type = "BytesHex"
        else:
            return ""

        target = f"{self.var_name}.{self.field_name}"
        if self.one_ofs or self.is_enum():
            target = self.var_name
        self.accessor = target

        if self.optional and not self.is_enum():
            target = self.optional_var_name()

        return f'{f_type}Var(&{target}, "{self.name}", {default}, "{self.usage}")'

    def is_message(self) -> bool:
        """Whether the field holds a message."""
        return self.type == FieldType.MESSAGE

    def is_enum(self) -> bool:
        """Whether the field holds an enum value."""
        return self.type == FieldType.ENUM

    def is_bytes(self) -> bool:
        """Whether the field holds bytes."""
        return self.type == FieldType.BYTES

    def enum_field_access(self, input_var: str) -> str:
        """Accessor expression used when assigning this enum on the request."""
        if self.is_one_of_field:
            seg = self.field_name.rfind(".")
            input_var = self.var_name.removesuffix(self.field_name[seg + 1:])
        return f"{input_var}.{self.field_name}"

    def optional_var_name(self) -> str:
        """Placeholder variable name for a proto3 optional field."""
        s = dot_to_camel(f"{self.var_name}.{self.field_name}")
        return s[:1].lower() + s[1:]

    def go_type_for_prim(self) -> str:
        """Go type name of this flag's primitive type."""
        return go_type_for_prim(self.type)


def oneof_type_name(field: str, input_msg_type: str, flag: Flag) -> str:
    """Name of the Go wrapper type for a oneof choice."""
    upper_field = title(field)
    tname = f"{input_msg_type}_{upper_field}"

    if flag.is_nested:
        imp = flag.message_import.name
        # A message from another package uses the owner's import for the wrapper.
        if flag.is_message() and flag.msg_package != flag.oneof_owner_package:
            owner = flag.oneof_owner_import
            imp = owner.name if owner is not None else ""
        tname = f"{imp}.{flag.message}_{upper_field}"

    if flag.is_message() and flag.msg_parent is not None:
        nested_name = f"{flag.msg_parent}_{flag.msg_name}"
        if tname.endswith(nested_name):
            tname += "_"

    return tname