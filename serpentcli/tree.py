"""The command tree: parent/child links, naming, availability and suggestions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

MIN_USAGE_PADDING = 25
MIN_COMMAND_PATH_PADDING = 11
MIN_NAME_PADDING = 11


@dataclass
class Settings:
    """Process-wide switches that change how command trees behave."""

    enable_prefix_matching: bool = False
    enable_command_sorting: bool = True


settings = Settings()


def levenshtein(a: str, b: str, ignore_case: bool = False) -> int:
    """Return the edit distance between ``a`` and ``b``."""
    if ignore_case:
        a, b = a.lower(), b.lower()
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j], current[j - 1], previous[j - 1]) + 1)
        previous = current
    return previous[-1]


class CommandTree:
    """A node in a tree of commands, addressed by the first word of ``use``."""

    # Owned by the flag handling; cleared when the tree links are reset.
    _parents_pflags: Any = None
    _glob_norm_func: Optional[Callable[..., str]] = None

    def __init__(
        self,
        use: str = "",
        *,
        aliases: Iterable[str] = (),
        suggest_for: Iterable[str] = (),
        short: str = "",
        long: str = "",
        example: str = "",
        deprecated: str = "",
        hidden: bool = False,
        run: Optional[Callable[..., Any]] = None,
        run_e: Optional[Callable[..., Any]] = None,
        disable_suggestions: bool = False,
        suggestions_minimum_distance: int = 0,
        annotations: Optional[dict[str, str]] = None,
    ) -> None:
        self.use = use
        self.aliases = list(aliases)
        self.suggest_for = list(suggest_for)
        self.short = short
        self.long = long
        self.example = example
        self.deprecated = deprecated
        self.hidden = hidden
        self.run = run
        self.run_e = run_e
        self.disable_suggestions = disable_suggestions
        self.suggestions_minimum_distance = suggestions_minimum_distance
        self.annotations = dict(annotations or {})
        self.parent: Optional[CommandTree] = None
        self.help_command: Optional[CommandTree] = None
        self._commands: list[CommandTree] = []
        self._commands_are_sorted = False
        self._called_name = ""
        self._called = False
        self._max_use_len = 0
        self._max_command_path_len = 0
        self._max_name_len = 0

    # Naming

    def name(self) -> str:
        """The first word of the use line."""
        return self.use.split(" ", 1)[0]

    def has_alias(self, alias: str) -> bool:
        return alias in self.aliases

    def called_as(self) -> str:
        """The name or alias used to invoke this command, or "" if not invoked."""
        return self._called_name if self._called else ""

    def _mark_called(self) -> None:
        self._called = True
        if not self._called_name:
            self._called_name = self.name()

    def _has_name_or_alias_prefix(self, prefix: str) -> bool:
        if self.name().startswith(prefix):
            self._called_name = self.name()
            return True
        for alias in self.aliases:
            if alias.startswith(prefix):
                self._called_name = alias
                return True
        return False

    def name_and_aliases(self) -> str:
        return ", ".join([self.name(), *self.aliases])

    def command_path(self) -> str:
        """The names of all ancestors and this command, separated by spaces."""
        if self.parent is not None:
            return f"{self.parent.command_path()} {self.name()}"
        return self.name()

    # Structure

    def _track_lengths(self, child: "CommandTree") -> None:
        self._max_use_len = max(self._max_use_len, len(child.use))
        self._max_command_path_len = max(
            self._max_command_path_len, len(child.command_path())
        )
        self._max_name_len = max(self._max_name_len, len(child.name()))

    def add_command(self, *args: "CommandTree") -> None:
        """Attach each command in ``args`` as a child of this one."""
        for child in args:
            if child is self:
                raise ValueError("Command can't be a child of itself")
            child.parent = self
            self._track_lengths(child)
            if self._glob_norm_func is not None:
                child.set_global_normalization_func(self._glob_norm_func)
            self._commands.append(child)
            self._commands_are_sorted = False

    def remove_command(self, *args: "CommandTree") -> None:
        """Detach each command in ``args`` from this one."""
        kept = []
        for command in self._commands:
            if any(command is removed for removed in args):
                command.parent = None
            else:
                kept.append(command)
        self._commands = kept
        self._max_use_len = 0
        self._max_command_path_len = 0
        self._max_name_len = 0
        for command in self._commands:
            self._track_lengths(command)

    def commands(self) -> list["CommandTree"]:
        """The children, sorted by name unless sorting is disabled."""
        if settings.enable_command_sorting and not self._commands_are_sorted:
            self._commands.sort(key=lambda command: command.name())
            self._commands_are_sorted = True
        return self._commands

    def reset_commands(self) -> None:
        """Forget the parent, the children and the help command."""
        self.parent = None
        self._commands = []
        self.help_command = None
        self._parents_pflags = None

    def root(self) -> "CommandTree":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def has_parent(self) -> bool:
        return self.parent is not None

    def visit_parents(self, fn: Callable[["CommandTree"], Any]) -> None:
        """Call ``fn`` on each ancestor, nearest first."""
        node = self.parent
        while node is not None:
            fn(node)
            node = node.parent

    def has_sub_commands(self) -> bool:
        return bool(self._commands)

    def _find_next(self, next_name: str) -> Optional["CommandTree"]:
        matches = []
        for command in self._commands:
            if command.name() == next_name or command.has_alias(next_name):
                command._called_name = next_name
                return command
            if settings.enable_prefix_matching and command._has_name_or_alias_prefix(
                next_name
            ):
                matches.append(command)
        if len(matches) == 1:
            return matches[0]
        return None

    # Availability

    def runnable(self) -> bool:
        return self.run is not None or self.run_e is not None

    def is_available_command(self) -> bool:
        """True unless deprecated, hidden, the help command, or empty."""
        if self.deprecated or self.hidden:
            return False
        if self.parent is not None and self.parent.help_command is self:
            return False
        return self.runnable() or self.has_available_sub_commands()

    def is_additional_help_topic_command(self) -> bool:
        """True for a visible, non-runnable command whose children are all topics."""
        if self.runnable() or self.deprecated or self.hidden:
            return False
        return all(sub.is_additional_help_topic_command() for sub in self._commands)

    def has_help_sub_commands(self) -> bool:
        return any(sub.is_additional_help_topic_command() for sub in self._commands)

    def has_available_sub_commands(self) -> bool:
        return any(sub.is_available_command() for sub in self._commands)

    # Suggestions

    def suggestions_for(self, typed_name: str) -> list[str]:
        """Names of available children close to or prefixed by ``typed_name``."""
        suggestions = []
        lowered = typed_name.lower()
        for command in self._commands:
            if not command.is_available_command():
                continue
            name = command.name()
            close = (
                levenshtein(typed_name, name, True)
                <= self.suggestions_minimum_distance
            )
            if close or name.lower().startswith(lowered):
                suggestions.append(name)
            for explicit in command.suggest_for:
                if typed_name.casefold() == explicit.casefold():
                    suggestions.append(name)
        return suggestions

    def _find_suggestions(self, arg: str) -> str:
        if self.disable_suggestions:
            return ""
        if self.suggestions_minimum_distance <= 0:
            self.suggestions_minimum_distance = 2
        suggestions = self.suggestions_for(arg)
        if not suggestions:
            return ""
        return "\n\nDid you mean this?\n" + "".join(f"\t{s}\n" for s in suggestions)

    # Padding

    def usage_padding(self) -> int:
        if self.parent is None or MIN_USAGE_PADDING > self.parent._max_use_len:
            return MIN_USAGE_PADDING
        return self.parent._max_use_len

    def command_path_padding(self) -> int:
        if (
            self.parent is None
            or MIN_COMMAND_PATH_PADDING > self.parent._max_command_path_len
        ):
            return MIN_COMMAND_PATH_PADDING
        return self.parent._max_command_path_len

    def name_padding(self) -> int:
        if self.parent is None or MIN_NAME_PADDING > self.parent._max_name_len:
            return MIN_NAME_PADDING
        return self.parent._max_name_len