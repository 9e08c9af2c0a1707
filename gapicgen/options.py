"""Plugin parameter parsing and protobuf-to-Go naming helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from .naming import ImportSpec, put_import

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


class ParameterError(ValueError):
    """Raised when the plugin parameter string is invalid."""


@dataclass
class GeneratorOptions:
    """Options that steer CLI generation."""

    root: str = ""
    gapic_name: str = ""
    format: bool = True
    imports: Dict[str, ImportSpec] = field(default_factory=dict)

    @property
    def gapic_import(self) -> Optional[ImportSpec]:
        """Import registered under the ``gapic`` key, if any."""
        return self.imports.get("gapic")


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ParameterError(f'invalid boolean value for fmt: "{text}"')


def parse_parameters(params: Optional[str]) -> GeneratorOptions:
    """Parse a comma-separated ``key=value`` plugin parameter string."""
    if params is None:
        raise ParameterError("parameters should not be nil")

    opts = GeneratorOptions()
    for item in params.split(","):
        key, sep, value = item.partition("=")
        if not sep:
            raise ParameterError(f"unknown parameter: {item}")

        if key == "gapic":
            pkg, semi, gapic_name = value.partition(";")
            if semi:
                # Kept for reducing service names later.
                opts.gapic_name = gapic_name
            put_import(opts.imports, ImportSpec(name="gapic", path=pkg))
        elif key == "root":
            opts.root = value
        elif key == "fmt":
            opts.format = _parse_bool(value)
        else:
            raise ParameterError(f"unknown parameter: {item}")

    if "gapic" not in opts.imports:
        raise ParameterError(
            f'missing option "gapic=[import path]". Got "{params}"'
        )
    if not opts.root:
        raise ParameterError(f'missing option "root=[root cmd]". Got "{params}"')
    return opts


def _append_pb(name: str) -> str:
    return name if name.endswith("pb") else name + "pb"


def import_for_go_package(go_package: str, name: str, file_name: str) -> ImportSpec:
    """Derive the Go import for a type from its file's ``go_package`` option.

    ``name`` and ``file_name`` identify the type and file for error messages.
    """
    if not go_package:
        raise ValueError(
            f'can\'t determine import path for "{name}", '
            f'file "{file_name}" missing `option go_package`'
        )

    path, semi, pkg_name = go_package.partition(";")
    if semi:
        return ImportSpec(path=path, name=_append_pb(pkg_name))

    pkg = go_package
    while True:
        head, slash, elem = pkg.rpartition("/")
        if not slash:
            return ImportSpec(path=pkg, name=_append_pb(pkg))
        if len(elem) >= 2 and elem[0] == "v" and elem[1].isdigit():
            # A version number; skip it for a more meaningful name.
            pkg = head
            continue
        return ImportSpec(path=pkg, name=_append_pb(elem))


def prepare_name(name: str, parent_names: Iterable[str] = ()) -> str:
    """Go type name of a possibly nested type.

    ``parent_names`` lists the enclosing messages, outermost first.
    """
    return "_".join([*parent_names, name])


def build_oneof_usage(choices: Iterable[str]) -> str:
    """Usage text listing the choices of a oneof."""
    usage = "Choices:" + "".join(f" {choice}," for choice in choices)
    # Drop the trailing comma.
    return usage[:-1]