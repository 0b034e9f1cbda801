# serpentcli

serpentcli provides the building blocks of a command-line application:

- `serpentcli.flags`: typed flags and a POSIX-style flag parser.
- `serpentcli.tree`: a tree of named commands with aliases, availability
  rules and "did you mean" suggestions.
- `serpentcli.streams`: output, error and input streams that a node takes
  from its parent unless it sets its own.
- `serpentcli.templates`: Jinja2 rendering of help, usage and version text.

## Installation

```
pip install serpentcli
```

## Flags

A `FlagSet` holds boolean, integer and string flags. Each flag may have a
one-letter shorthand.

```python
from serpentcli.flags import FlagSet

fs = FlagSet("app")
fs.add_int("count", 1, "how many", "c")
fs.add_bool("verbose", False, "talk more", "v")

fs.parse(["-c", "3", "-v", "file.txt", "--", "-x"])
fs.get("count")           # 3
fs.get_bool("verbose")    # True
fs.args()                 # ["file.txt", "-x"]
fs.args_len_at_dash()     # 1
```

- Long flags take `--name value` or `--name=value`. Shorthands take
  `-c 3`, `-c3` or `-c=3`, and several boolean shorthands can be grouped,
  as in `-abc`. A boolean flag needs no value.
- Integers are read as 64-bit values. A `0x`, `0o` or `0b` prefix gives
  the base, and a leading `0` means octal. Booleans accept `1`, `t`,
  `true`, `0`, `f`, `false` and the capitalised forms of these.
- `--` ends flag parsing, and everything after it is kept as an argument.
- Errors raise `FlagError`: unknown flags, missing values, bad values,
  redefined names and shorthands, and access to flags that are not
  defined. The message is also written to the set's `output` (stderr if
  that is unset), followed by the usage text.
- A `--help` or `-h` that is not defined as a flag raises `HelpRequested`.
- Setting `parse_errors_whitelist = ParseErrorsWhitelist(unknown_flags=True)`
  makes the parser skip unknown flags instead of raising.
- `mark_deprecated` hides a flag. When the flag is used, a notice is
  written to `output`. `mark_hidden` hides a flag without a notice.
  `set_annotation` attaches lists of strings to a flag.
- `set_normalize_func(func)` installs a function `(flag_set, name) -> name`
  that is applied to every flag name when it is defined or looked up.
- `flag_usages()` renders aligned help lines for the visible flags. They
  are sorted by name unless `sort_flags` is `False`, in which case they
  appear in the order they were defined.
- `add_flag_set(other)` copies in the flags of `other` that are not
  already present.

`serpentcli.flags.COMMAND_LINE` is a process-wide flag set.
`reset_command_line()` replaces it with an empty set and returns the new
set.

## The command tree

```python
from serpentcli.tree import CommandTree, levenshtein, settings

root = CommandTree("app")
echo = CommandTree("echo [text]", aliases=["say"], short="Print text",
                   run=lambda cmd, args: None)
root.add_command(echo)

echo.name()                  # "echo"
echo.command_path()          # "app echo"
echo.name_and_aliases()      # "echo, say"
root.suggestions_for("ech")  # ["echo"]
levenshtein("tiems", "times", True)  # 2
```

- `add_command` and `remove_command` attach children and detach them.
  Adding a command as its own child raises `ValueError`.
- `commands()` returns the children sorted by name. Set
  `settings.enable_command_sorting = False` to keep them in the order
  they were added.
- A command is runnable if it has `run` or `run_e`. It is available if it
  is not deprecated, not hidden, not its parent's `help_command`, and
  either runnable or the parent of an available child. A non-runnable,
  visible command whose children are all of the same kind is an
  additional help topic.
- `suggestions_for(name)` lists the available children whose name
  starts with `name` (ignoring case), or is within
  `suggestions_minimum_distance` edits of it, or has `name` in its
  `suggest_for` list.
- `usage_padding()`, `command_path_padding()` and `name_padding()` give
  column widths for help text. Each is the longest matching value among
  the siblings, and never less than 25, 11 and 11.

## Streams

Mix `StreamsMixin` into a class that has a `parent` attribute. Set `out`,
`err` or `input` on a node, or use `set_output` to set both `out` and
`err`. A node that has no stream of its own uses its nearest ancestor's,
and in the end the process's standard stream.

- `print`, `println` and `printf` write to the output stream, or to
  stderr if no output stream is set.
- `print_err`, `print_errln` and `print_errf` write to the error stream.
- `printf` uses `%` formatting.

## Templates

`render(template, command)` renders a Jinja2 template in which the object
is available as `cmd`. `rpad` and `trim_trailing_whitespaces` can be used
both as filters and as functions. Unknown names raise
`jinja2.UndefinedError`.

```python
from serpentcli.templates import render

render("{{ cmd.name() | rpad(8) }}|", echo)   # "echo    |"
```

## What this package does not do

These pieces are not yet combined into an executable command. There is
no object that:

- attaches flag sets to the nodes of a `CommandTree` or passes
  persistent flags down to subcommands;
- reads the process arguments, finds the command they name and runs its
  hooks;
- adds default `--help`, `--version` or `help` commands;
- checks required flags.

An application has to do that wiring itself, using the parts described
above.

## Running the tests

```
pip install -e .[test]
pytest
```