"""Long-running operation wrapper types collected for the auxiliary file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .naming import ImportSpec

EMPTY_VALUE = "google.protobuf.Empty"
"""Fully qualified name of the Empty message type."""

DEFAULT_POLL_MAX_DELAY = "time.Minute"
"""Go expression for the longest delay between polls while waiting."""

WRAPPER_IMPORTS = frozenset(
    {
        ImportSpec(path="cloud.google.com/go/longrunning"),
        ImportSpec(path="context"),
        ImportSpec(path="time"),
        ImportSpec(name="gax", path="github.com/googleapis/gax-go/v2"),
    }
)
"""Imports every generated operation wrapper needs."""

_WITH_POLL_PATH = "opts = append([]gax.CallOption{gax.WithPath(op.pollPath)}, opts...)"


class OperationError(ValueError):
    """Raised when an operation wrapper cannot be built or would collide."""


@dataclass(frozen=True)
class MessageType:
    """A protobuf message known by name within its proto package."""

    name: str
    package: str = ""

    @property
    def full_name(self) -> str:
        """Fully qualified name, without a leading dot."""
        return f"{self.package}.{self.name}" if self.package else self.name


@dataclass(frozen=True)
class OperationWrapper:
    """An RPC-specific long-running operation type, e.g. ``CreateFooOperation``."""

    name: str
    response: Optional[MessageType] = None
    metadata: Optional[MessageType] = None
    response_name: str = ""
    metadata_name: str = ""


def lro_type_name(method_name: str) -> str:
    """Go type name of the operation wrapper for an RPC."""
    return method_name + "Operation"


def _qualify(raw: str, package: str) -> str:
    if "." in raw:
        return raw
    return f"{package}.{raw}" if package else raw


@dataclass
class AuxTypes:
    """Types generated alongside a client, such as operation wrappers."""

    op_wrappers: Dict[str, OperationWrapper] = field(default_factory=dict)
    method_to_wrapper: Dict[str, OperationWrapper] = field(default_factory=dict)

    def wrapper_exists(self, wrapper: OperationWrapper) -> bool:
        """Whether a wrapper of that name is known.

        A known wrapper of the same name with different response or metadata
        types raises :class:`OperationError`.
        """
        existing = self.op_wrappers.get(wrapper.name)
        if existing is None:
            return False
        if wrapper.response_name != existing.response_name:
            raise OperationError(
                f'duplicate operation wrapper types "{wrapper.name}" have mismatched '
                f"response_types: {existing.response_name} v. {wrapper.response_name}"
            )
        if wrapper.metadata_name != existing.metadata_name:
            raise OperationError(
                f'duplicate operation wrapper types "{wrapper.name}" have mismatched '
                f"metadata_types: {existing.metadata_name} v. {wrapper.metadata_name}"
            )
        return True

    def add_operation_wrapper(
        self,
        method_name: str,
        package: str,
        response_type: Optional[str],
        metadata_type: Optional[str],
        known_types: Mapping[str, MessageType],
    ) -> OperationWrapper:
        """Register the wrapper for an LRO method from its operation_info.

        ``response_type`` and ``metadata_type`` are the raw operation_info
        values (both ``None`` when the method has no operation_info); short
        names are resolved within ``package``. ``known_types`` maps fully
        qualified names with a leading dot to message types.
        """
        if response_type is None and metadata_type is None:
            raise OperationError(
                f"{method_name} missing google.longrunning.operation_info"
            )

        if not response_type:
            raise OperationError(
                f'rpc "{method_name}" has google.longrunning.operation_info but is '
                "missing option google.longrunning.operation_info.response_type"
            )
        resp_name = _qualify(response_type, package)
        response = known_types.get("." + resp_name)
        if response is None:
            raise OperationError(
                "unable to resolve google.longrunning.operation_info.response_type "
                f'value "{response_type}" in rpc "{method_name}"'
            )

        if not metadata_type:
            raise OperationError(
                f'rpc "{method_name}" has google.longrunning.operation_info but is '
                "missing option google.longrunning.operation_info.metadata_type"
            )
        meta_name = _qualify(metadata_type, package)
        metadata = known_types.get("." + meta_name)
        if metadata is None:
            raise OperationError(
                "unable to resolve google.longrunning.operation_info.metadata_type "
                f'value "{metadata_type}" in rpc "{method_name}"'
            )

        wrapper = OperationWrapper(
            name=lro_type_name(method_name),
            response=response,
            metadata=metadata,
            response_name=resp_name,
            metadata_name=meta_name,
        )
        if not self.wrapper_exists(wrapper):
            self.op_wrappers[wrapper.name] = wrapper

        registered = self.op_wrappers[wrapper.name]
        self.method_to_wrapper[method_name] = registered
        return registered


def sort_operation_wrappers(
    wrappers: Union[Mapping[str, OperationWrapper], Iterable[OperationWrapper]],
) -> List[OperationWrapper]:
    """Wrappers ordered by type name, for deterministic output."""
    values = wrappers.values() if isinstance(wrappers, Mapping) else wrappers
    return sorted(values, key=lambda w: w.name)


def operation_wrapper_code(
    wrapper: OperationWrapper,
    response_type: Optional[str],
    metadata_type: str,
    has_rest: bool,
) -> str:
    """Go source of one operation wrapper type and its methods.

    ``response_type`` and ``metadata_type`` are Go type expressions such as
    ``examplepb.Foo``; the response type is unused for Empty responses.
    """
    name = wrapper.name
    is_empty = wrapper.response_name == EMPTY_VALUE
    if not is_empty and not response_type:
        raise OperationError(f'missing Go response type for "{name}"')

    lines: List[str] = []
    out = lines.append

    out(f"// {name} manages a long-running operation from {name.removesuffix('Operation')}.")
    out(f"type {name} struct {{")
    out("  lro *longrunning.Operation")
    if has_rest:
        out("  pollPath string")
    out("}")
    out("")

    out("// Wait blocks until the long-running operation is completed, returning the response and any errors encountered.")
    out("//")
    out("// See documentation of Poll for error-handling information.")
    if is_empty:
        out(f"func (op *{name}) Wait(ctx context.Context, opts ...gax.CallOption) error {{")
        if has_rest:
            out(_WITH_POLL_PATH)
        out(f"  return op.lro.WaitWithInterval(ctx, nil, {DEFAULT_POLL_MAX_DELAY}, opts...)")
    else:
        out(f"func (op *{name}) Wait(ctx context.Context, opts ...gax.CallOption) (*{response_type}, error) {{")
        if has_rest:
            out(_WITH_POLL_PATH)
        out(f"  var resp {response_type}")
        out(f"  if err := op.lro.WaitWithInterval(ctx, &resp, {DEFAULT_POLL_MAX_DELAY}, opts...); err != nil {{")
        out("    return nil, err")
        out("  }")
        out("  return &resp, nil")
    out("}")
    out("")

    out("// Poll fetches the latest state of the long-running operation.")
    out("//")
    out("// Poll also fetches the latest metadata, which can be retrieved by Metadata.")
    out("//")
    out("// If Poll fails, the error is returned and op is unmodified. If Poll succeeds and")
    out("// the operation has completed with failure, the error is returned and op.Done will return true.")
    out("// If Poll succeeds and the operation has completed successfully,")
    out("// op.Done will return true, and the response of the operation is returned.")
    out("// If Poll succeeds and the operation has not completed, the returned response and error are both nil.")
    if is_empty:
        out(f"func (op *{name}) Poll(ctx context.Context, opts ...gax.CallOption) error {{")
        if has_rest:
            out(_WITH_POLL_PATH)
        out("  return op.lro.Poll(ctx, nil, opts...)")
    else:
        out(f"func (op *{name}) Poll(ctx context.Context, opts ...gax.CallOption) (*{response_type}, error) {{")
        if has_rest:
            out(_WITH_POLL_PATH)
        out(f"  var resp {response_type}")
        out("  if err := op.lro.Poll(ctx, &resp, opts...); err != nil {")
        out("    return nil, err")
        out("  }")
        out("  if !op.Done() {")
        out("    return nil, nil")
        out("  }")
        out("  return &resp, nil")
    out("}")
    out("")

    out("// Metadata returns metadata associated with the long-running operation.")
    out("// Metadata itself does not contact the server, but Poll does.")
    out("// To get the latest metadata, call this method after a successful call to Poll.")
    out("// If the metadata is not available, the returned metadata and error are both nil.")
    out(f"func (op *{name}) Metadata() (*{metadata_type}, error) {{")
    out(f"  var meta {metadata_type}")
    out("  if err := op.lro.Metadata(&meta); err == longrunning.ErrNoMetadata {")
    out("    return nil, nil")
    out("  } else if err != nil {")
    out("    return nil, err")
    out("  }")
    out("  return &meta, nil")
    out("}")
    out("")

    out("// Done reports whether the long-running operation has completed.")
    out(f"func (op *{name}) Done() bool {{")
    out("return op.lro.Done()")
    out("}")
    out("")

    out("// Name returns the name of the long-running operation.")
    out("// The name is assigned by the server and is unique within the service from which the operation is created.")
    out(f"func (op *{name}) Name() string {{")
    out("return op.lro.Name()")
    out("}")
    out("")

    return "".join(line + "\n" for line in lines)