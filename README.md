# gapicgen

`gapicgen` writes Go source for command-line tools built on cobra, and
pieces of Go client code, from plain Python records that describe
services, methods, request fields and long-running operations. Every
generator returns text. Nothing is written to disk.

## Modules

- `gapicgen.naming`: name and text helpers: `to_title`, `title`,
  `dot_to_camel`, `shorten`, `to_short_usage` (50 characters),
  `to_long_usage` (150 characters) and `sanitize_comment`. It also has the
  frozen `ImportSpec(path, name)` record and `put_import`, which stores a
  spec under its name, or under its path when it has no name.
- `gapicgen.flags`: `FieldType`, an enum of the protobuf field types, and
  `go_type_for_prim`. `Flag` describes a request field as a command-line
  flag:
  - `gen_flag()` returns the pflag registration call. It returns `""` for
    types it cannot express.
  - `is_message()`, `is_enum()` and `is_bytes()` report the field's kind.
  - `enum_field_access(input_var)` and `optional_var_name()` return the
    accessor expressions the generated code uses.
  - `oneof_type_name(field, input_msg_type, flag)` names the Go wrapper
    type of a oneof choice.
- `gapicgen.model`: the `Command`, `NestedMessage` and `GeneratedFile(name,
  content)` records. It also has the `EMPTY_PROTO_TYPE` and
  `LRO_PROTO_TYPE` constants.
- `gapicgen.commandfile`: `render_command(command)` renders a method's
  sub-command from a Jinja2 template. `command_file(command)` adds the
  "Code generated" header, strips trailing whitespace, collapses blank
  lines and returns `<method_cmd>.go`.
- `gapicgen.cli_files`: each of these returns a `GeneratedFile`:
  - `root_file(root)` returns `<root>.go`, with the root name lower-cased.
  - `completion_file(root)` returns `completion.go`.
  - `service_file(command)` returns `<method_cmd>_service.go`. It lists the
    service's sub-commands and adds a `poll-` command for each long-running
    method.
- `gapicgen.options`:
  - `parse_parameters(params)` reads a `gapic=<import path>[;<name>],root=<cmd>,fmt=<bool>`
    string into `GeneratorOptions` (`root`, `gapic_name`, `format`,
    `imports`, `gapic_import`). It raises `ParameterError` for `None`,
    unknown keys, a bad boolean, or when `gapic` or `root` is missing.
  - `import_for_go_package` derives an `ImportSpec` from a `go_package`
    option.
  - `prepare_name` joins nested type names with `_`.
  - `build_oneof_usage` builds a "Choices: a, b" usage string.
- `gapicgen.operations`: `MessageType`, `OperationWrapper`, and `AuxTypes`
  with two methods:
  - `wrapper_exists` raises `OperationError` when two wrappers share a name
    but have different response or metadata types.
  - `add_operation_wrapper` resolves operation_info types against the known
    types and registers the wrapper.

  The module also has `sort_operation_wrappers`, `lro_type_name` and
  `operation_wrapper_code`, which writes a wrapper's Wait, Poll, Metadata,
  Done and Name methods.
- `gapicgen.clients`: `generate_default_endpoint_template`,
  `generate_default_mtls_endpoint`, `generate_default_audience`,
  `client_hook` and `service_doc`. `service_doc` writes a service doc
  comment and adds deprecation notices.

## Example

```python
from gapicgen.flags import Flag, FieldType
from gapicgen.options import parse_parameters
from gapicgen.cli_files import root_file

flag = Flag(
    name="field",
    field_name="Field",
    var_name="ClientInput",
    type=FieldType.STRING,
    usage="this is the usage",
)
print(flag.gen_flag())
# StringVar(&ClientInput.Field, "field", "", "this is the usage")

options = parse_parameters("gapic=example.com/todo/apiv1;todo,root=Todo")
print(options.root)        # Todo
print(options.gapic_name)  # todo

print(root_file(options.root).name)  # todo.go
```

## What it does not do

- The package has no command to run and does not act as a compiler
  plugin. It does not read compiled descriptor sets.
- It does not build `Command` and `Flag` records from service descriptions
  on its own. You fill them in yourself and pass them to the generators.
- It does not format the Go it emits. `GeneratorOptions.format` is parsed
  but not acted on.
- It has no full client generation. Only the fragments listed above are
  provided.

## Running the tests

```
pip install -e ".[test]"
pytest
```