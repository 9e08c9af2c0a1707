import pytest

from gapicgen.naming import ImportSpec
from gapicgen.options import (
    GeneratorOptions,
    ParameterError,
    build_oneof_usage,
    import_for_go_package,
    parse_parameters,
    prepare_name,
)


def test_parse_full_parameters():
    opts = parse_parameters("gapic=github.com/foo/bar;baz,root=Root")
    assert opts.root == "Root"
    assert opts.gapic_name == "baz"
    assert opts.format is True
    assert opts.gapic_import == ImportSpec(name="gapic", path="github.com/foo/bar")


def test_parse_without_gapic_name():
    opts = parse_parameters("gapic=github.com/foo/bar,root=Root")
    assert opts.gapic_name == ""
    assert opts.imports["gapic"].path == "github.com/foo/bar"


@pytest.mark.parametrize("value, expected", [("false", False), ("0", False), ("true", True), ("T", True)])
def test_parse_fmt(value, expected):
    opts = parse_parameters(f"gapic=a/b,root=R,fmt={value}")
    assert opts.format is expected


def test_parse_bad_fmt():
    with pytest.raises(ParameterError):
        parse_parameters("gapic=a/b,root=R,fmt=maybe")


def test_parse_none():
    with pytest.raises(ParameterError, match="parameters should not be nil"):
        parse_parameters(None)


def test_parse_unknown_key():
    with pytest.raises(ParameterError, match="unknown parameter: other=1"):
        parse_parameters("gapic=a/b,root=R,other=1")


def test_parse_missing_separator():
    with pytest.raises(ParameterError, match="unknown parameter: root"):
        parse_parameters("gapic=a/b,root")


def test_parse_missing_gapic():
    with pytest.raises(ParameterError, match=r'missing option "gapic=\[import path\]"'):
        parse_parameters("root=R")


def test_parse_missing_root():
    with pytest.raises(ParameterError, match=r'missing option "root=\[root cmd\]"'):
        parse_parameters("gapic=a/b")


def test_options_default_format():
    assert GeneratorOptions().format is True
    assert GeneratorOptions().gapic_import is None


def test_import_skips_version_suffix():
    spec = import_for_go_package("github.com/googleapis/mypackage/v1", "Foo", "foo.proto")
    assert spec == ImportSpec(name="mypackagepb", path="github.com/googleapis/mypackage")


def test_import_keeps_pb_suffix():
    spec = import_for_go_package("cloud.google.com/go/example/apiv1/examplepb", "Foo", "f.proto")
    assert spec == ImportSpec(name="examplepb", path="cloud.google.com/go/example/apiv1/examplepb")


def test_import_with_explicit_name():
    spec = import_for_go_package("github.com/googleapis/todo/generated;todopb", "T", "t.proto")
    assert spec == ImportSpec(name="todopb", path="github.com/googleapis/todo/generated")


def test_import_explicit_name_gets_pb():
    spec = import_for_go_package("github.com/x/y;mypackage", "T", "t.proto")
    assert spec.name == "mypackage" + "pb"
    assert spec.path == "github.com/x/y"


def test_import_missing_go_package():
    with pytest.raises(ValueError, match="missing `option go_package`"):
        import_for_go_package("", "Foo", "foo.proto")


def test_prepare_name_top_level():
    assert prepare_name("Foo") == "Foo"


def test_prepare_name_nested():
    assert prepare_name("Leaf", ["Outer", "Inner"]) == "Outer_Inner_Leaf"


def test_oneof_usage_lists_choices():
    usage = build_oneof_usage(["a", "b"])
    assert usage == "Choices: a, b"
    assert not usage.endswith(",")


def test_oneof_usage_single_choice():
    assert build_oneof_usage(["only"]) == "Choices: only"