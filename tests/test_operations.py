import pytest

from gapicgen.naming import ImportSpec
from gapicgen.operations import (
    WRAPPER_IMPORTS,
    AuxTypes,
    MessageType,
    OperationError,
    OperationWrapper,
    lro_type_name,
    operation_wrapper_code,
    sort_operation_wrappers,
)


def _wrapper(name, resp, meta):
    return OperationWrapper(name=name, response_name=resp, metadata_name=meta)


@pytest.mark.parametrize(
    "existing, target, want, err",
    [
        (
            {"FooOperation": _wrapper("FooOperation", "google.example.v1.Foo", "google.example.v1.FooMetadata")},
            _wrapper("FooOperation", "google.example.v1.Foo", "google.example.v1.FooMetadata"),
            True,
            "",
        ),
        (
            {"FooOperation": _wrapper("FooOperation", "google.example.v1.Bar", "google.example.v1.FooMetadata")},
            _wrapper("FooOperation", "google.example.v1.Foo", "google.example.v1.FooMetadata"),
            True,
            "mismatched response_types",
        ),
        (
            {"FooOperation": _wrapper("FooOperation", "google.example.v1.Foo", "google.example.v1.BarMetadata")},
            _wrapper("FooOperation", "google.example.v1.Foo", "google.example.v1.FooMetadata"),
            True,
            "mismatched metadata_types",
        ),
        (
            {},
            _wrapper("FooOperation", "google.example.v1.Foo", "google.example.v1.FooMetadata"),
            False,
            "",
        ),
    ],
    ids=["existing match", "response mismatch", "metadata mismatch", "doesn't exist"],
)
def test_wrapper_exists(existing, target, want, err):
    aux = AuxTypes(op_wrappers=existing)
    if err:
        with pytest.raises(OperationError, match=err):
            aux.wrapper_exists(target)
    else:
        assert aux.wrapper_exists(target) is want


def _foo_wrapper(pkg):
    return OperationWrapper(
        name="CreateFooOperation",
        response=MessageType("Foo", pkg),
        metadata=MessageType("FooMetadata", pkg),
        response_name=f"{pkg}.Foo",
        metadata_name=f"{pkg}.FooMetadata",
    )


_BAR_WRAPPER = OperationWrapper(
    name="CreateFooOperation",
    response=MessageType("Bar", "google.other.v1"),
    metadata=MessageType("FooMetadata", "google.other.v1"),
    response_name="google.other.v1.Bar",
    metadata_name="google.other.v1.FooMetadata",
)


@pytest.mark.parametrize(
    "existing, want, err, oi_res, oi_meta, other_pkg",
    [
        ({}, {"CreateFooOperation": _foo_wrapper("google.example.v1")}, "", "Foo", "FooMetadata", ""),
        (
            {},
            {"CreateFooOperation": _foo_wrapper("google.example.v1")},
            "",
            "google.example.v1.Foo",
            "google.example.v1.FooMetadata",
            "",
        ),
        (
            {},
            {"CreateFooOperation": _foo_wrapper("google.other.v1")},
            "",
            "google.other.v1.Foo",
            "google.other.v1.FooMetadata",
            "google.other.v1",
        ),
        ({}, {}, "missing option google.longrunning.operation_info.response_type", "", "FooMetadata", ""),
        ({}, {}, "missing option google.longrunning.operation_info.metadata_type", "Foo", "", ""),
        ({}, {}, "unable to resolve google.longrunning.operation_info.response_type", "DoesNotExist", "FooMetadata", ""),
        ({}, {}, "unable to resolve google.longrunning.operation_info.metadata_type", "Foo", "DoesNotExist", ""),
        (
            {"CreateFooOperation": _BAR_WRAPPER},
            {"CreateFooOperation": _BAR_WRAPPER},
            "duplicate operation wrapper types",
            "Foo",
            "FooMetadata",
            "",
        ),
    ],
    ids=[
        "add new",
        "add new fully qualified",
        "add new different package",
        "missing response_type",
        "missing metadata_type",
        "unresolvable response_type",
        "unresolvable metadata_type",
        "mismatch collision",
    ],
)
def test_add_operation_wrapper(existing, want, err, oi_res, oi_meta, other_pkg):
    pkg = "google.example.v1"
    parent = other_pkg or pkg
    known = {
        f".{parent}.Foo": MessageType("Foo", parent),
        f".{parent}.FooMetadata": MessageType("FooMetadata", parent),
    }
    aux = AuxTypes(op_wrappers=dict(existing))
    if err:
        with pytest.raises(OperationError, match=err):
            aux.add_operation_wrapper("CreateFoo", pkg, oi_res, oi_meta, known)
    else:
        aux.add_operation_wrapper("CreateFoo", pkg, oi_res, oi_meta, known)
    assert aux.op_wrappers == want


def test_add_operation_wrapper_records_method():
    known = {
        ".google.example.v1.Foo": MessageType("Foo", "google.example.v1"),
        ".google.example.v1.FooMetadata": MessageType("FooMetadata", "google.example.v1"),
    }
    aux = AuxTypes()
    got = aux.add_operation_wrapper("CreateFoo", "google.example.v1", "Foo", "FooMetadata", known)
    assert aux.method_to_wrapper == {"CreateFoo": got}
    assert got == _foo_wrapper("google.example.v1")


def test_add_operation_wrapper_missing_info():
    with pytest.raises(OperationError, match="missing google.longrunning.operation_info"):
        AuxTypes().add_operation_wrapper("CreateFoo", "google.example.v1", None, None, {})


def test_sort_operation_wrappers():
    wrappers = {
        "FooOperation": OperationWrapper(name="FooOperation"),
        "ZzzzzOperation": OperationWrapper(name="ZzzzzOperation"),
        "BarOperation": OperationWrapper(name="BarOperation"),
        "AaaaaOperation": OperationWrapper(name="AaaaaOperation"),
    }
    got = sort_operation_wrappers(wrappers)
    assert [w.name for w in got] == [
        "AaaaaOperation",
        "BarOperation",
        "FooOperation",
        "ZzzzzOperation",
    ]


def test_lro_type_name():
    assert lro_type_name("CreateFoo") == "CreateFooOperation"


def test_message_type_full_name():
    assert MessageType("Foo", "google.example.v1").full_name == "google.example.v1.Foo"
    assert MessageType("Foo").full_name == "Foo"


def test_wrapper_code_with_response_and_rest():
    code = operation_wrapper_code(
        _foo_wrapper("google.example.v1"), "examplepb.Foo", "examplepb.FooMetadata", True
    )
    assert code.startswith(
        "// CreateFooOperation manages a long-running operation from CreateFoo.\n"
        "type CreateFooOperation struct {\n"
        "  lro *longrunning.Operation\n"
        "  pollPath string\n"
        "}\n"
    )
    assert (
        "func (op *CreateFooOperation) Wait(ctx context.Context, opts ...gax.CallOption) "
        "(*examplepb.Foo, error) {\n"
        "opts = append([]gax.CallOption{gax.WithPath(op.pollPath)}, opts...)\n"
        "  var resp examplepb.Foo\n"
        "  if err := op.lro.WaitWithInterval(ctx, &resp, time.Minute, opts...); err != nil {\n"
    ) in code
    assert "func (op *CreateFooOperation) Metadata() (*examplepb.FooMetadata, error) {\n" in code
    assert code.endswith("return op.lro.Name()\n}\n\n")


def test_wrapper_code_empty_response_without_rest():
    wrapper = OperationWrapper(
        name="DeleteFooOperation",
        response=MessageType("Empty", "google.protobuf"),
        metadata=MessageType("FooMetadata", "google.example.v1"),
        response_name="google.protobuf.Empty",
        metadata_name="google.example.v1.FooMetadata",
    )
    code = operation_wrapper_code(wrapper, None, "examplepb.FooMetadata", False)
    assert "pollPath" not in code
    assert (
        "func (op *DeleteFooOperation) Wait(ctx context.Context, opts ...gax.CallOption) error {\n"
        "  return op.lro.WaitWithInterval(ctx, nil, time.Minute, opts...)\n"
    ) in code
    assert (
        "func (op *DeleteFooOperation) Poll(ctx context.Context, opts ...gax.CallOption) error {\n"
        "  return op.lro.Poll(ctx, nil, opts...)\n"
    ) in code


def test_wrapper_code_requires_response_type():
    with pytest.raises(OperationError):
        operation_wrapper_code(_foo_wrapper("google.example.v1"), None, "examplepb.FooMetadata", False)


def test_wrapper_imports():
    assert WRAPPER_IMPORTS == {
        ImportSpec(path="context"),
        ImportSpec(path="cloud.google.com/go/longrunning"),
        ImportSpec(name="gax", path="github.com/googleapis/gax-go/v2"),
        ImportSpec(path="time"),
    }