"""
Command arguments and flags
Positional word arguments, ``-x``/``--long`` flags and the parser that
splits a tokenised invocation into both
"""

from dataclasses import dataclass, field
from typing import Collection, Dict, List, Optional, Sequence

from mappings_bot.utils.errors import MissingArgument, UnknownFlag


@dataclass(frozen=True)
class Flag:
    """A ``-s``/``--long`` switch, optionally taking a value."""

    short: str
    long: str
    description: str
    has_value: bool = False

    def usage(self) -> str:
        value = " <value>" if self.has_value else ""
        return f"-{self.short}, --{self.long}{value}"


@dataclass(frozen=True)
class Argument:
    """
    A single-word positional argument.

    ``required_unless`` names flags whose presence makes a required
    argument optional.
    """

    name: str
    description: str
    required: bool = True
    required_unless: Sequence[Flag] = ()

    def is_required(self, flags_present: Collection[Flag]) -> bool:
        if not self.required:
            return False
        return not any(flag in flags_present for flag in self.required_unless)


@dataclass
class ParsedInvocation:
    args: Dict[str, str] = field(default_factory=dict)
    flags: Dict[Flag, Optional[str]] = field(default_factory=dict)


def _match_flag(token: str, flags: Sequence[Flag]) -> Optional[Flag]:
    if token.startswith("--"):
        long_name = token[2:].split("=", 1)[0]
        return next((f for f in flags if f.long == long_name), None)
    return next((f for f in flags if f.short == token[1:]), None)


def _is_flag_token(token: str) -> bool:
    # A lone "-" or negative-looking numbers are positional values
    return len(token) > 1 and token.startswith("-") and not token[1:].replace(".", "").isdigit()


def parse_arguments(
    tokens: Sequence[str],
    arguments: Sequence[Argument],
    flags: Sequence[Flag],
) -> ParsedInvocation:
    """
    Split tokens into flags and positional arguments.

    Args:
        tokens: Whitespace-split words following the command name
        arguments: Positional arguments in declaration order
        flags: Flags the command accepts

    Returns:
        The parsed invocation

    Raises:
        UnknownFlag: A flag token the command does not declare
        MissingArgument: A required argument, or a flag's value, is absent
    """
    parsed = ParsedInvocation()
    positionals: List[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1

        if not _is_flag_token(token):
            positionals.append(token)
            continue

        flag = _match_flag(token, flags)
        if flag is None:
            raise UnknownFlag(token)

        if not flag.has_value:
            parsed.flags[flag] = None
            continue

        if token.startswith("--") and "=" in token:
            parsed.flags[flag] = token.split("=", 1)[1]
        elif i < len(tokens):
            parsed.flags[flag] = tokens[i]
            i += 1
        else:
            raise MissingArgument(flag.usage())

    for argument, value in zip(arguments, positionals):
        parsed.args[argument.name] = value

    for argument in arguments:
        if argument.name not in parsed.args and argument.is_required(parsed.flags.keys()):
            raise MissingArgument(argument.name)

    return parsed
