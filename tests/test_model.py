from gapicgen.flags import FieldType, Flag
from gapicgen.model import Command, GeneratedFile, NestedMessage
from gapicgen.naming import ImportSpec


def test_command_defaults_are_empty():
    cmd = Command()
    assert cmd.flags == []
    assert cmd.imports == {}
    assert cmd.one_of_selectors == {}
    assert cmd.sub_commands == []
    assert cmd.is_lro is False
    assert cmd.paged is False


def test_commands_do_not_share_containers():
    first = Command()
    second = Command()
    first.imports["todopb"] = ImportSpec(name="todopb", path="example.com/todo/generated")
    first.flags.append(Flag(name="task", type=FieldType.STRING))
    assert second.imports == {}
    assert second.flags == []


def test_command_holds_sub_commands():
    service = Command(
        service="Todo",
        method_cmd="todo",
        sub_commands=[Command(method_cmd="start-todo", is_lro=True), Command(method_cmd="list-todo")],
    )
    assert [c.method_cmd for c in service.sub_commands] == ["start-todo", "list-todo"]
    assert service.sub_commands[0].is_lro is True


def test_nested_message_fields():
    nested = NestedMessage(field_name="CreateTodoInput.Meta", field_type="todopb.Meta")
    assert nested.field_name == "CreateTodoInput.Meta"
    assert nested.field_type == "todopb.Meta"


def test_generated_file_equality():
    assert GeneratedFile("root.go", "x") == GeneratedFile("root.go", "x")
    assert GeneratedFile("root.go", "x") != GeneratedFile("root.go", "y")