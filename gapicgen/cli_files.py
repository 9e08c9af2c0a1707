"""Rendering of the root, completion and per-service command source files."""

from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Iterator, List, Sequence, Tuple

from .commandfile import HEADER
from .model import Command, GeneratedFile

_GOOGLE_ORG = "google." + "go" + "lang.org"
_X_ORG = "go" + "lang.org/x"
_PROTOBUF_V1 = "github.com/" + "go" + "lang/protobuf"
_COBRA = "github.com/spf13/cobra"
_VIPER = "github.com/spf13/viper"

_BLANK_RUN = re.compile(r"\n{3,}")

_Import = Tuple[str, str]


class _Writer:
    """Accumulates tab-indented source lines."""

    def __init__(self) -> None:
        self._lines: List[str] = []
        self._depth = 0

    def __call__(self, *lines: str) -> None:
        for text in lines:
            self._lines.append("\t" * self._depth + text if text else "")

    def raw(self, text: str) -> None:
        """Append a line without the current indentation."""
        self._lines.append(text)

    @contextmanager
    def block(self, opener: str, closer: str = "}") -> Iterator[None]:
        self(opener)
        self._depth += 1
        yield
        self._depth -= 1
        self(closer)

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"


def _tidy(source: str) -> str:
    """Strip trailing whitespace and collapse runs of blank lines."""
    lines = (line.rstrip() for line in source.splitlines())
    text = _BLANK_RUN.sub("\n\n", "\n".join(lines))
    return text.strip("\n") + "\n"


def _finish(writer: _Writer) -> str:
    return _tidy(HEADER + "\n" + writer.text())


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _imports(writer: _Writer, groups: Sequence[Sequence[_Import]]) -> None:
    non_empty = [group for group in groups if group]
    with writer.block("import (", ")"):
        for index, group in enumerate(non_empty):
            if index:
                writer("")
            for name, path in group:
                writer(f'{name} "{path}"' if name else f'"{path}"')


def _descriptions(writer: _Writer, command: Command) -> None:
    if command.short_desc:
        writer(f'Short: "{command.short_desc}",')
    if command.long_desc:
        writer(f'Long: "{command.long_desc}",')


def completion_file(root: str) -> GeneratedFile:
    """Produce the bash completion command file for the root command."""
    name = root.lower()
    w = _Writer()
    w("package main", "")
    _imports(w, [[("", "os")], [("", _COBRA)]])
    w("")
    with w.block("func init() {"):
        w("rootCmd.AddCommand(completionCmd)")
    w("", "// completionCmd represents the completion command")
    with w.block("var completionCmd = &cobra.Command{"):
        w(
            'Use:   "completion",',
            f'Short: "Emits bash a completion for {name}",',
            "Long: `Enable bash completion like so:",
        )
        help_lines = (
            (2, "Linux:"),
            (3, f"source <({name} completion)"),
            (2, "Mac:"),
            (3, "brew install bash-completion"),
            (3, f"{name} completion > $(brew --prefix)/etc/bash_completion.d/{name}`,"),
        )
        for depth, line in help_lines:
            w.raw("\t" * depth + line)
        with w.block("Run: func(cmd *cobra.Command, args []string) {", "},"):
            w("rootCmd.GenBashCompletion(os.Stdout)")
    return GeneratedFile(name="completion.go", content=_finish(w))


def root_file(root: str) -> GeneratedFile:
    """Produce the root command file, named after the lower-cased root."""
    name = root.lower()
    command = Command(method_cmd=name, short_desc="Root command of " + root)

    w = _Writer()
    w("package main", "")
    _imports(
        w,
        [
            [("", "bytes"), ("", "context"), ("", "fmt"), ("", "os")],
            [
                ("", _PROTOBUF_V1 + "/jsonpb"),
                ("", _PROTOBUF_V1 + "/proto"),
                ("", _COBRA),
            ],
        ],
    )
    w(
        "",
        "var Verbose, OutputJSON bool",
        "var ctx = context.Background()",
        'var marshaler = &jsonpb.Marshaler{Indent: "  "}',
        "",
    )
    persistent = (
        ("Verbose", "verbose", "v", "Print verbose output"),
        ("OutputJSON", "json", "j", "Print JSON output"),
    )
    with w.block("func init() {"):
        for var, long_name, short_name, usage in persistent:
            w(
                f"rootCmd.PersistentFlags().BoolVarP(&{var}, "
                f'"{long_name}", "{short_name}", false, "{usage}")'
            )
    w("")
    with w.block("var rootCmd = &cobra.Command{"):
        w(f'Use:   "{command.method_cmd}",')
        _descriptions(w, command)
    w("")
    with w.block("func Execute() {"):
        with w.block("if err := rootCmd.Execute(); err != nil {"):
            w("fmt.Println(err)", "os.Exit(1)")
    w("")
    with w.block("func main() {"):
        w("Execute()")
    w("")
    with w.block("func printVerboseInput(srv, mthd string, data interface{}) {"):
        w(
            'fmt.Println("Service:", srv)',
            'fmt.Println("Method:", mthd)',
            'fmt.Print("Input: ")',
            "printMessage(data)",
        )
    w("")
    with w.block("func printMessage(data interface{}) {"):
        w("var s string", "")
        with w.block("if msg, ok := data.(proto.Message); ok {"):
            w("s = msg.String()")
            with w.block("if OutputJSON {"):
                w("var b bytes.Buffer", "marshaler.Marshal(&b, msg)", "s = b.String()")
        w("", "fmt.Println(s)")
    return GeneratedFile(name=name + ".go", content=_finish(w))


def service_file(command: Command) -> GeneratedFile:
    """Produce the service command file grouping a service's subcommands."""
    service = command.service
    cmd_var = service + "ServiceCmd"
    client = service + "Client"
    sub_commands = service + "SubCommands"
    config = service + "Config"
    prefix = command.env_prefix

    w = _Writer()
    w("package main", "")
    third_party: List[_Import] = [
        ("", _COBRA),
        ("", _VIPER),
        ("", _GOOGLE_ORG + "/api/option"),
        ("", _GOOGLE_ORG + "/grpc"),
        ("", _GOOGLE_ORG + "/grpc/credentials/insecure"),
        ("", _X_ORG + "/oauth2"),
    ]
    third_party.extend(
        (spec.name, spec.path) for _, spec in sorted(command.imports.items())
    )
    _imports(w, [[("", "fmt")], third_party])
    w(
        "",
        f"var {config} *viper.Viper",
        f"var {client} *gapic.{command.service_client_type}",
    )
    with w.block(f"var {sub_commands} []string = []string{{"):
        for sub in command.sub_commands:
            w(f'"{sub.method_cmd}",')
            if sub.is_lro:
                w(f'"poll-{sub.method_cmd}",')
    w("")

    persistent = (
        ("insecure", "Bool", "false",
         f'Make insecure client connection. Or use {prefix}_INSECURE. Must be used with "address" option'),
        ("address", "String", '""', f"Set API address used by client. Or use {prefix}_ADDRESS."),
        ("token", "String", '""', f"Set Bearer token used by the client. Or use {prefix}_TOKEN."),
        ("api_key", "String", '""', f"Set API Key used by the client. Or use {prefix}_API_KEY."),
    )
    with w.block("func init() {"):
        w(
            f"rootCmd.AddCommand({cmd_var})",
            "",
            f"{config} = viper.New()",
            f'{config}.SetEnvPrefix("{prefix}")',
            f"{config}.AutomaticEnv()",
        )
        for flag_name, kind, default, usage in persistent:
            w(
                "",
                f'{cmd_var}.PersistentFlags().{kind}("{flag_name}", {default}, {_quote(usage)})',
                f'{config}.BindPFlag("{flag_name}", {cmd_var}.PersistentFlags().Lookup("{flag_name}"))',
                f'{config}.BindEnv("{flag_name}")',
            )
    w("")

    with w.block(f"var {cmd_var} = &cobra.Command{{"):
        w(f'Use:   "{command.method_cmd}",')
        _descriptions(w, command)
        w(f"ValidArgs: {sub_commands},")
        with w.block(
            "PersistentPreRunE: func(cmd *cobra.Command, args []string) (err error) {",
            "},",
        ):
            w("var opts []option.ClientOption", "")
            w(f'address := {config}.GetString("address")')
            with w.block('if address != "" {'):
                w("opts = append(opts, option.WithEndpoint(address))")
            w("")
            with w.block(f'if {config}.GetBool("insecure") {{'):
                with w.block('if address == "" {'):
                    w('return fmt.Errorf("Missing address to use with insecure connection")')
                w(
                    "",
                    "conn, err := grpc.Dial(address, "
                    "grpc.WithTransportCredentials(insecure.NewCredentials()))",
                )
                with w.block("if err != nil {"):
                    w("return err")
                w("opts = append(opts, option.WithGRPCConn(conn))")
            w("")
            with w.block(f'if token := {config}.GetString("token"); token != "" {{'):
                w("opts = append(opts, option.WithTokenSource(oauth2.StaticTokenSource(")
                with w.block("\t&oauth2.Token{", "\t})))"):
                    w("\tAccessToken: token,", '\tTokenType:   "Bearer",')
            w("")
            with w.block(f'if key := {config}.GetString("api_key"); key != "" {{'):
                w("opts = append(opts, option.WithAPIKey(key))")
            w(
                "",
                f"{client}, err = gapic.New{command.service_client_type}(ctx, opts...)",
                "return",
            )
    return GeneratedFile(
        name=command.method_cmd + "_service.go",
        content=_finish(w),
    )