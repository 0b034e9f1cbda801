"""Flag definitions, flag sets and a POSIX-style command-line flag parser."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, TextIO

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_DIGITS = "0123456789abcdef"


class FlagError(Exception):
    """Raised when a flag is misused, misdefined or cannot be parsed."""


class HelpRequested(Exception):
    """Raised when -h or --help is given but no help flag is defined."""

    def __init__(self, message: str = "help requested") -> None:
        super().__init__(message)


@dataclass
class ParseErrorsWhitelist:
    """Parse errors that should be ignored instead of reported."""

    unknown_flags: bool = False


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _quote_char(char: str) -> str:
    if char in ("'", "\\"):
        return f"'\\{char}'"
    return f"'{char}'"


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"parsing {_quote(text)}: invalid syntax")


def _parse_int(text: str) -> int:
    invalid = ValueError(f"parsing {_quote(text)}: invalid syntax")
    negative = text.startswith("-")
    body = text[1:] if text[:1] in ("+", "-") else text
    lowered = body.lower()
    if lowered.startswith(("0x", "0b", "0o")):
        base = {"x": 16, "b": 2, "o": 8}[lowered[1]]
        digits, underscores_ok = lowered[2:], True
    elif len(body) > 1 and body[0] == "0":
        base, digits, underscores_ok = 8, lowered[1:], True
    else:
        base, digits, underscores_ok = 10, lowered, False
    if "_" in digits:
        if not underscores_ok or "__" in digits or digits.endswith("_"):
            raise invalid
        digits = digits.replace("_", "")
    allowed = _DIGITS[:base]
    if not digits or any(char not in allowed for char in digits):
        raise invalid
    number = int(digits, base)
    if negative:
        number = -number
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"parsing {_quote(text)}: value out of range")
    return number


_PARSERS: dict[str, Callable[[str], object]] = {
    "bool": _parse_bool,
    "int": _parse_int,
    "string": str,
}

_ZERO_DEFAULTS = {"bool": "false", "int": "0", "string": ""}


def _format_value(value_type: str, value: object) -> str:
    if value_type == "bool":
        return "true" if value else "false"
    return str(value)


@dataclass(eq=False)
class Flag:
    """A single named flag with its current value and metadata."""

    name: str
    value_type: str
    value: object
    def_value: str
    usage: str = ""
    shorthand: str = ""
    no_opt_def_val: str = ""
    changed: bool = False
    deprecated: str = ""
    shorthand_deprecated: str = ""
    hidden: bool = False
    annotations: dict[str, list[str]] = field(default_factory=dict)

    @property
    def value_string(self) -> str:
        """The current value rendered as text."""
        return _format_value(self.value_type, self.value)

    def set_value(self, text: str) -> None:
        """Parse ``text`` according to the flag's type and store it."""
        self.value = _PARSERS[self.value_type](text)

    def default_is_zero_value(self) -> bool:
        return self.def_value == _ZERO_DEFAULTS.get(self.value_type, "")


def _strip_unknown_flag_value(args: list[str]) -> list[str]:
    if not args:
        return args
    first = args[0]
    if first.startswith("-"):
        return args
    return args[1:]


def _unquote_usage(flag: Flag) -> tuple[str, str]:
    usage = flag.usage
    start = usage.find("`")
    if start >= 0:
        end = usage.find("`", start + 1)
        if end >= 0:
            name = usage[start + 1 : end]
            return name, usage[:start] + name + usage[end + 1 :]
    return ("" if flag.value_type == "bool" else flag.value_type), usage


class FlagSet:
    """An ordered collection of flags that can parse an argument list."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.sort_flags = True
        self.parse_errors_whitelist = ParseErrorsWhitelist()
        self.output: Optional[TextIO] = None
        self.parsed = False
        self._normalize: Optional[Callable[[FlagSet, str], str]] = None
        self._formal: dict[str, Flag] = {}
        self._ordered: list[Flag] = []
        self._shorthands: dict[str, Flag] = {}
        self._args: list[str] = []
        self._args_len_at_dash = -1

    def _write(self, text: str) -> None:
        (self.output or sys.stderr).write(text)

    def _normalized(self, name: str) -> str:
        if self._normalize is None:
            return name
        return self._normalize(self, name)

    def __len__(self) -> int:
        return len(self._formal)

    def __iter__(self) -> Iterator[Flag]:
        if self.sort_flags:
            flags = [self._formal[key] for key in sorted(self._formal)]
        else:
            flags = list(self._ordered)
        yield from flags

    def add_flag(self, flag: Flag) -> None:
        """Add ``flag``; redefining a name or shorthand is an error."""
        normalized = self._normalized(flag.name)
        if normalized in self._formal:
            message = f"{self.name} flag redefined: {flag.name}"
            self._write(message + "\n")
            raise FlagError(message)
        if len(flag.shorthand) > 1:
            raise FlagError(
                f"{_quote(flag.shorthand)} shorthand is more than one ASCII character"
            )
        if flag.shorthand:
            used = self._shorthands.get(flag.shorthand)
            if used is not None:
                raise FlagError(
                    f"unable to redefine {_quote_char(flag.shorthand)} shorthand in "
                    f"{_quote(self.name)} flagset: it's already used for "
                    f"{_quote(used.name)} flag"
                )
        flag.name = normalized
        self._formal[normalized] = flag
        self._ordered.append(flag)
        if flag.shorthand:
            self._shorthands[flag.shorthand] = flag

    def add_flag_set(self, other: Optional["FlagSet"]) -> None:
        """Add every flag of ``other`` that is not already defined here."""
        if other is None:
            return
        for flag in other:
            if self.lookup(flag.name) is None:
                self.add_flag(flag)

    def lookup(self, name: str) -> Optional[Flag]:
        return self._formal.get(self._normalized(name))

    def shorthand_lookup(self, name: str) -> Optional[Flag]:
        if not name:
            return None
        if len(name) > 1:
            raise ValueError(
                "can not look up shorthand which is more than one ASCII "
                f"character: {_quote(name)}"
            )
        return self._shorthands.get(name)

    def _define(self, name, value_type, value, usage, shorthand, no_opt=""):
        flag = Flag(
            name=name,
            value_type=value_type,
            value=value,
            def_value=_format_value(value_type, value),
            usage=usage,
            shorthand=shorthand,
            no_opt_def_val=no_opt,
        )
        self.add_flag(flag)
        return flag

    def add_bool(self, name: str, default: bool = False, usage: str = "",
                 shorthand: str = "") -> Flag:
        return self._define(name, "bool", bool(default), usage, shorthand, "true")

    def add_int(self, name: str, default: int = 0, usage: str = "",
                shorthand: str = "") -> Flag:
        return self._define(name, "int", int(default), usage, shorthand)

    def add_string(self, name: str, default: str = "", usage: str = "",
                   shorthand: str = "") -> Flag:
        return self._define(name, "string", str(default), usage, shorthand)

    def _require(self, name: str) -> Flag:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag accessed but not defined: {name}")
        return flag

    def get(self, name: str) -> object:
        """Return the current value of the named flag."""
        return self._require(name).value

    def get_bool(self, name: str) -> bool:
        flag = self._require(name)
        if flag.value_type != "bool":
            raise FlagError(
                f"trying to get bool value of flag of type {flag.value_type}"
            )
        return bool(flag.value)

    def _set_flag(self, flag: Flag, value: str) -> None:
        try:
            flag.set_value(value)
        except ValueError as exc:
            if flag.shorthand and not flag.shorthand_deprecated:
                flag_name = f"-{flag.shorthand}, --{flag.name}"
            else:
                flag_name = f"--{flag.name}"
            raise FlagError(
                f"invalid argument {_quote(value)} for {_quote(flag_name)} flag: {exc}"
            ) from exc
        flag.changed = True
        if flag.deprecated:
            self._write(f"Flag --{flag.name} has been deprecated, {flag.deprecated}\n")

    def set(self, name: str, value: str) -> None:
        """Set the named flag from text and mark it as changed."""
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"no such flag -{name}")
        self._set_flag(flag, value)

    def _print_usage(self) -> None:
        header = "Usage:\n" if not self.name else f"Usage of {self.name}:\n"
        self._write(header + self.flag_usages())

    def _fail(self, message: str) -> FlagError:
        self._write(message + "\n")
        self._print_usage()
        return FlagError(message)

    def _apply(self, flag: Flag, value: str) -> None:
        try:
            self._set_flag(flag, value)
        except FlagError as exc:
            raise self._fail(str(exc)) from exc

    def _parse_long(self, arg: str, args: list[str]) -> list[str]:
        name = arg[2:]
        if not name or name[0] in "-=":
            raise self._fail(f"bad flag syntax: {arg}")
        name, has_value, value = name.partition("=")
        flag = self.lookup(name)
        if flag is None:
            if name == "help":
                self._print_usage()
                raise HelpRequested()
            if self.parse_errors_whitelist.unknown_flags:
                return args if has_value else _strip_unknown_flag_value(args)
            raise self._fail(f"unknown flag: --{name}")
        if not has_value:
            if flag.no_opt_def_val:
                value = flag.no_opt_def_val
            elif args:
                value, args = args[0], args[1:]
            else:
                raise self._fail(f"flag needs an argument: {arg}")
        self._apply(flag, value)
        return args

    def _parse_single_short(
        self, shorthands: str, args: list[str]
    ) -> tuple[str, list[str]]:
        rest = shorthands[1:]
        char = shorthands[0]
        flag = self._shorthands.get(char)
        if flag is None:
            if char == "h":
                self._print_usage()
                raise HelpRequested()
            if self.parse_errors_whitelist.unknown_flags:
                if len(shorthands) > 2 and shorthands[1] == "=":
                    return "", args
                return rest, _strip_unknown_flag_value(args)
            raise self._fail(
                f"unknown shorthand flag: {_quote_char(char)} in -{shorthands}"
            )
        if len(shorthands) > 2 and shorthands[1] == "=":
            value, rest = shorthands[2:], ""
        elif flag.no_opt_def_val:
            value = flag.no_opt_def_val
        elif len(shorthands) > 1:
            value, rest = shorthands[1:], ""
        elif args:
            value, args = args[0], args[1:]
        else:
            raise self._fail(
                f"flag needs an argument: {_quote_char(char)} in -{shorthands}"
            )
        if flag.shorthand_deprecated:
            self._write(
                f"Flag shorthand -{flag.shorthand} has been deprecated, "
                f"{flag.shorthand_deprecated}\n"
            )
        self._apply(flag, value)
        return rest, args

    def parse(self, arguments: list[str]) -> None:
        """Parse flags out of ``arguments``; the rest become :meth:`args`."""
        self.parsed = True
        self._args = []
        args = list(arguments)
        while args:
            arg, args = args[0], args[1:]
            if len(arg) < 2 or arg[0] != "-":
                self._args.append(arg)
                continue
            if arg[1] == "-":
                if len(arg) == 2:
                    self._args_len_at_dash = len(self._args)
                    self._args.extend(args)
                    break
                args = self._parse_long(arg, args)
            else:
                shorthands = arg[1:]
                while shorthands:
                    shorthands, args = self._parse_single_short(shorthands, args)

    def args(self) -> list[str]:
        return list(self._args)

    def args_len_at_dash(self) -> int:
        return self._args_len_at_dash

    def has_flags(self) -> bool:
        return bool(self._formal)

    def has_available_flags(self) -> bool:
        return any(not flag.hidden for flag in self._formal.values())

    def flag_usages(self) -> str:
        """Render the aligned usage text of all visible flags."""
        lines = []
        max_len = 0
        for flag in self:
            if flag.hidden:
                continue
            if flag.shorthand and not flag.shorthand_deprecated:
                line = f"  -{flag.shorthand}, --{flag.name}"
            else:
                line = f"      --{flag.name}"
            var_name, usage = _unquote_usage(flag)
            if var_name:
                line += " " + var_name
            if flag.no_opt_def_val:
                if flag.value_type == "string":
                    line += f'[="{flag.no_opt_def_val}"]'
                elif flag.value_type == "bool":
                    if flag.no_opt_def_val != "true":
                        line += f"[={flag.no_opt_def_val}]"
                else:
                    line += f"[={flag.no_opt_def_val}]"
            line += "\x00"
            max_len = max(max_len, len(line))
            line += usage
            if not flag.default_is_zero_value():
                if flag.value_type == "string":
                    line += f" (default {_quote(flag.def_value)})"
                else:
                    line += f" (default {flag.def_value})"
            if flag.deprecated:
                line += f" (DEPRECATED: {flag.deprecated})"
            lines.append(line)
        rendered = []
        for line in lines:
            head, _, usage = line.partition("\x00")
            spacing = " " * (max_len - len(head))
            rendered.append(f"{head} {spacing} {usage}\n")
        return "".join(rendered)

    def mark_deprecated(self, name: str, message: str) -> None:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag {_quote(name)} does not exist")
        if not message:
            raise FlagError(f"deprecated message for flag {_quote(name)} must be set")
        flag.deprecated = message
        flag.hidden = True

    def mark_hidden(self, name: str) -> None:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag {_quote(name)} does not exist")
        flag.hidden = True

    def set_annotation(self, name: str, key: str, values: list[str]) -> None:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"no such flag -{name}")
        flag.annotations[key] = list(values)

    def set_normalize_func(
        self, func: Optional[Callable[["FlagSet", str], str]]
    ) -> None:
        """Install a name normalizer and re-key the existing flags with it."""
        self._normalize = func
        renamed: dict[str, Flag] = {}
        for flag in self._formal.values():
            flag.name = self._normalized(flag.name)
            renamed[flag.name] = flag
        self._formal = renamed


COMMAND_LINE = FlagSet(sys.argv[0] if sys.argv else "")


def reset_command_line() -> FlagSet:
    """Replace the process-wide flag set with an empty one and return it."""
    global COMMAND_LINE
    COMMAND_LINE = FlagSet(sys.argv[0] if sys.argv else "")
    return COMMAND_LINE