"""Rendering of the per-method cobra subcommand source file."""

from __future__ import annotations

import re

from jinja2 import Environment, StrictUndefined

from .flags import oneof_type_name
from .model import Command, GeneratedFile

HEADER = "// Code generated. DO NOT EDIT.\n"

_COMMAND_TEMPLATE = """\
{% set method_cmd_var = c.method ~ "Cmd" %}
{% set polling_cmd_var = c.method ~ "PollCmd" %}
{% set polling_operation_var = c.method ~ "PollOperation" %}
{% set from_file_var = c.method ~ "FromFile" %}
{% set out_file_var = c.method ~ "OutFile" %}
{% set service_cmd_var = c.service ~ "ServiceCmd" %}
{% set follow_var = c.method ~ "Follow" %}
{% set service_client = c.service ~ "Client" %}
package main

import (
	"github.com/spf13/cobra"
	{% for key, pkg in items(c.imports) %}
	{{ pkg.name }} "{{ pkg.path }}"
	{% endfor %}
)
{% if not c.client_streaming %}
var {{ c.input_message_var }} {{ c.input_message }}{% endif %}
{% if c.flags or c.client_streaming %}
var {{ from_file_var }} string
{% endif %}
{% if c.server_streaming and c.client_streaming %}
var {{ out_file_var }} string
{% endif %}
{% if c.is_lro %}
var {{ follow_var }} bool

var {{ polling_operation_var }} string
{% endif %}
{% for key, val in items(c.one_of_selectors) %}
var {{ val.var_name }} string
{% for one_of_key, one_of_val in items(val.one_ofs) %}
var {{ one_of_val.var_name }} {{ oneof_type_name(one_of_key, c.input_message, one_of_val) }}
{% endfor %}
{% endfor %}
{% for flag in c.flags %}
{% if flag.is_message() and flag.repeated %}
var {{ flag.var_name }} []string
{% elif flag.is_enum() %}
var {{ flag.var_name }} {% if flag.repeated %}[]{% endif %}string
{% elif flag.optional %}
var {{ flag.optional_var_name() }} {{ flag.go_type_for_prim() }}
{% endif %}
{% endfor %}

func init() {
	{{ service_cmd_var }}.AddCommand({{ method_cmd_var }})
	{% for nested in c.nested_messages %}
	{{ nested.field_name }} = new({{ nested.field_type }})
	{% endfor %}
	{% for flag in c.flags %}
	{{ method_cmd_var }}.Flags().{{ flag.gen_flag() }}
	{% endfor %}
	{% for key, val in items(c.one_of_selectors) %}
	{{ method_cmd_var }}.Flags().{{ val.gen_flag() }}
	{% endfor %}
	{% if c.flags or c.client_streaming %}
	{{ method_cmd_var }}.Flags().StringVar(&{{ from_file_var }}, "from_file", "", "Absolute path to JSON file containing request payload")
	{% endif %}
	{% if c.client_streaming and c.server_streaming %}
	{{ method_cmd_var }}.Flags().StringVar(&{{ out_file_var }}, "out_file", "", "Absolute path to a file to pipe output to")
	{{ method_cmd_var }}.MarkFlagRequired("out_file")
	{% endif %}
	{% if c.is_lro %}
	{{ method_cmd_var }}.Flags().BoolVar(&{{ follow_var }}, "follow", false, "Block until the long running operation completes")

	{{ service_cmd_var }}.AddCommand({{ polling_cmd_var }})

	{{ polling_cmd_var }}.Flags().BoolVar(&{{ follow_var }}, "follow", false, "Block until the long running operation completes")

	{{ polling_cmd_var }}.Flags().StringVar(&{{ polling_operation_var }}, "operation", "", "Required. Operation name to poll for")

	{{ polling_cmd_var }}.MarkFlagRequired("operation")

	{% endif %}
}

var {{ method_cmd_var }} = &cobra.Command{
  Use:   "{{ c.method_cmd }}",
  {% if c.short_desc %}Short: "{{ c.short_desc }}",{% endif %}
	{% if c.long_desc %}Long: "{{ c.long_desc }}",{% endif %}
	PreRun: func(cmd *cobra.Command, args []string) {
		{% if c.flags or c.one_of_selectors %}
		if {{ from_file_var }} == "" {
			{% for flag in c.flags %}
			{% if flag.required and not flag.is_one_of_field %}
			cmd.MarkFlagRequired("{{ flag.name }}")
			{% endif %}
			{% endfor %}
			{% for key, val in items(c.one_of_selectors) %}
			cmd.MarkFlagRequired("{{ val.name }}")
			{% endfor %}
		}
		{% endif %}
	},
	RunE: func(cmd *cobra.Command, args []string) (err error) {
		{% if c.flags or c.client_streaming %}
		in := os.Stdin
		if {{ from_file_var }} != "" {
			in, err = os.Open({{ from_file_var }})
			if err != nil {
				return err
			}
			defer in.Close()
			{% if not c.client_streaming %}
			err = jsonpb.Unmarshal(in, &{{ c.input_message_var }})
			if err != nil {
				return err
			}
			{% endif %}
		} {% if c.one_of_selectors or c.has_enums or c.has_optional %} else {
			{% if c.one_of_selectors %}
			{% for key, val in items(c.one_of_selectors) %}
			switch {{ val.var_name }} {
			{% for one_of_key, one_of_val in items(val.one_ofs) %}
			case "{{ one_of_key }}":
				{{ c.input_message_var }}.{{ val.field_name }} = &{{ one_of_val.var_name }}
			{% endfor %}
			default:
				return fmt.Errorf("Missing oneof choice for {{ val.name }}")
			}
			{% endfor %}
			{% endif %}
			{% if c.has_enums %}
			{% for flag in c.flags %}
			{% if flag.is_enum() %}{% set enum_type = flag.message_import.name ~ "." ~ flag.message %}{% set request_field = flag.enum_field_access(c.input_message_var) %}
			{% if flag.repeated %}
			for _, in := range {{ flag.var_name }} {
				val := {{ enum_type }}({{ enum_type }}_value[strings.ToUpper(in)])
				{{ request_field }} = append({{ request_field }}, val)
			}
			{% else %}
			{% if flag.optional %}
			if cmd.Flags().Changed("{{ flag.name }}") {
				e := {{ enum_type }}({{ enum_type }}_value[strings.ToUpper({{ flag.var_name }})])
				{{ request_field }} = &e
			}
			{% else %}
			{{ request_field }} = {{ enum_type }}({{ enum_type }}_value[strings.ToUpper({{ flag.var_name }})])
			{% endif %}
			{% endif %}
			{% endif %}
			{% endfor %}
			{% endif %}
			{% if c.has_optional %}
			{% for flag in c.flags %}
			{% if flag.optional and not flag.is_enum() %}
			if cmd.Flags().Changed("{{ flag.name }}") {
				{{ flag.accessor }} = &{{ flag.optional_var_name() }}
			}
			{% endif %}
			{% endfor %}
			{% endif %}
		}
		{% endif %}
		{% endif %}
		{% for flag in c.flags %}
		{% if flag.is_message() and flag.repeated and not flag.is_map %}
		// unmarshal JSON strings into slice of structs
		for _, item := range {{ flag.var_name }} {
			tmp := {{ flag.message_import.name }}.{{ flag.message }}{}
			err = jsonpb.UnmarshalString(item, &tmp)
			if err != nil {
				return
			}

			{{ flag.slice_accessor }} = append({{ flag.slice_accessor }}, &tmp)
		}
		{% endif %}
		{% if flag.is_map %}
		if len({{ flag.var_name }}) > 0 {
			{{ flag.slice_accessor }} = make(map[string]string)
		}
		for _, item := range {{ flag.var_name }} {
			split := strings.Split(item, "=")
			if len(split) < 2 {
				err = fmt.Errorf("Invalid map item: %q", item)
				return
			}

			{{ flag.slice_accessor }}[split[0]] = split[1]
		}
		{% endif %}
		{% endfor %}
		{% if not c.output_message_type and not c.client_streaming %}
		if Verbose {
			printVerboseInput("{{ c.service }}", "{{ c.method }}", &{{ c.input_message_var }})
		}
		err = {{ service_client }}.{{ c.method }}(ctx, &{{ c.input_message_var }})
		if err != nil {
			return err
		}
		{% else %}
		{% if not c.client_streaming and not c.paged %}
		if Verbose {
			printVerboseInput("{{ c.service }}", "{{ c.method }}", &{{ c.input_message_var }})
		}
		resp, err := {{ service_client }}.{{ c.method }}(ctx, &{{ c.input_message_var }})
		if err != nil {
			return err
		}
		{% elif c.paged and not c.is_lro %}
		if Verbose {
			printVerboseInput("{{ c.service }}", "{{ c.method }}", &{{ c.input_message_var }})
		}
		iter := {{ service_client }}.{{ c.method }}(ctx, &{{ c.input_message_var }})
		{% elif not c.is_lro %}
		stream, err := {{ service_client }}.{{ c.method }}(ctx)
		if err != nil {
			return err
		}
		{% else %}
		if Verbose {
			printVerboseInput("{{ c.service }}", "{{ c.method }}", &{{ c.input_message_var }})
		}
		resp, err := {{ service_client }}.{{ c.method }}(ctx, &{{ c.input_message_var }})
		if err != nil {
			return err
		}
		{% endif %}
		{% if c.server_streaming and not c.client_streaming %}
		var item *{{ c.output_message_type }}
		for {
			item, err = resp.Recv()
			if err != nil {
				break
			}

			if Verbose {
				fmt.Print("Output: ")
			}
			printMessage(item)
		}

		if err == io.EOF {
			return nil
		}
		{% elif c.client_streaming %}
		{% if c.server_streaming %}
		out, err := os.OpenFile({{ out_file_var }}, os.O_APPEND|os.O_WRONLY, os.ModeAppend)
		if err != nil {
			return err
		}

		// start background stream receive
		go func() {
			var res *{{ c.output_message_type }}
			for {
				res, err = stream.Recv()
				if err != nil {
					return
				}

				str := res.String()
				if OutputJSON {
					str, _ = marshaler.MarshalToString(res)
				}
				fmt.Fprintln(out, str)
			}
		}()
		{% endif %}
		if Verbose {
			fmt.Println("Client stream open. Close with ctrl+D.")
		}

		var {{ c.input_message_var }} {{ c.input_message }}
		scanner := bufio.NewScanner(in)
		for scanner.Scan() {
			input := scanner.Text()
			if input == "" {
				continue
			}
			err = jsonpb.UnmarshalString(input, &{{ c.input_message_var }})
			if err != nil {
				return err
			}

			err = stream.Send(&{{ c.input_message_var }})
			if err != nil {
				return err
			}
		}
		if err = scanner.Err(); err != nil {
			return err
		}
		{% if c.server_streaming %}
		err = stream.CloseSend()
		{% else %}
		resp, err := stream.CloseAndRecv()
		if err != nil {
			return err
		}
		{% if not c.is_lro %}
		if Verbose {
			fmt.Print("Output: ")
		}
		printMessage(resp)
		{% endif %}
		{% endif %}
		{% elif c.paged and not c.is_lro %}
		// populate iterator with a page
		_, err = iter.Next()
		if err != nil && err != iterator.Done {
			return err
		}

		if Verbose {
			fmt.Print("Output: ")
		}
		printMessage(iter.Response)
		{% elif not c.is_lro %}
		if Verbose {
			fmt.Print("Output: ")
		}
		printMessage(resp)
		{% endif %}

		{% if c.is_lro %}
		if !{{ follow_var }} {
			var s interface{}
			s = resp.Name()

			if OutputJSON {
				d := make(map[string]string)
				d["operation"] = resp.Name()
				s = d
			}

			printMessage(s)
			return err
		}

		{% if c.is_lro_resp_empty %}err = resp.Wait(ctx)
		{% else %}result, err := resp.Wait(ctx)
		if err != nil {
			return err
		}

		if Verbose {
			fmt.Print("Output: ")
		}
		printMessage(result){% endif %}
		{% endif %}
		{% endif %}
		return err
  },
}

{% if c.is_lro %}
var {{ polling_cmd_var }} = &cobra.Command{
	Use: "poll-{{ c.method_cmd }}",
	Short: "Poll the status of a {{ c.method }}Operation by name",
	RunE: func(cmd *cobra.Command, args []string) (err error) {
		op := {{ service_client }}.{{ c.method }}Operation({{ polling_operation_var }})

		if {{ follow_var }} {
			{% if c.is_lro_resp_empty %}return op.Wait(ctx){% else %}resp, err := op.Wait(ctx)
			if err != nil {
				return err
			}

			if Verbose {
				fmt.Print("Output: ")
			}
			printMessage(resp)
			return err{% endif %}
		}

		{% if c.is_lro_resp_empty %}
		err = op.Poll(ctx)
		if err != nil {
			return err
		}
		{% else %}
		resp, err := op.Poll(ctx)
		if err != nil {
			return err
		} else if resp != nil {
			if Verbose {
				fmt.Print("Output: ")
			}

			printMessage(resp)
			return
		}
		{% endif %}

		if op.Done() {
			fmt.Println(fmt.Sprintf("Operation %s is done", op.Name()))
		} else {
			fmt.Println(fmt.Sprintf("Operation %s not done", op.Name()))
		}

		return err
	},
}
{% endif %}
"""

_ENV = Environment(
    autoescape=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)
_ENV.globals["oneof_type_name"] = oneof_type_name
_ENV.globals["items"] = lambda mapping: sorted(mapping.items(), key=lambda kv: kv[0])

_TEMPLATE = _ENV.from_string(_COMMAND_TEMPLATE)

_BLANK_RUN = re.compile(r"\n{3,}")


def _tidy(source: str) -> str:
    """Strip trailing whitespace and collapse runs of blank lines."""
    lines = (line.rstrip() for line in source.splitlines())
    text = _BLANK_RUN.sub("\n\n", "\n".join(lines))
    return text.strip("\n") + "\n"


def render_command(command: Command) -> str:
    """Render the raw Go source of the subcommand for ``command``."""
    return _TEMPLATE.render(c=command)


def command_file(command: Command) -> GeneratedFile:
    """Produce the generated file holding the subcommand for ``command``."""
    content = _tidy(HEADER + render_command(command))
    return GeneratedFile(name=command.method_cmd + ".go", content=content)