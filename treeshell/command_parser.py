#!/usr/bin/env python3
"""
Command parser for the treeshell engine.

This module translates command strings into structured representations
that the builtins can execute.

Design Principles:
- Single responsibility: Parse commands, don't execute them
- One shared flag scanner, parametrized per command by a flag table
- Pure functions with predictable outputs
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .errors import CommandError, invalid_argument


COMMANDS = ('cd', 'pwd', 'ls', 'cat', 'head', 'tail', 'wc', 'grep', 'cut')


class UsageError(Exception):
    """Raised by the flag scanner when a stage's options are malformed."""

    def __init__(self, error: CommandError):
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class FlagSpec:
    """
    Flag table for one command.

    `switches` maps boolean single-letter options to their long names,
    `options` maps value-taking letters to theirs. When `numeric_option`
    is set, a `-N` token is shorthand for that option with value N.
    """
    switches: Dict[str, str] = field(default_factory=dict)
    options: Dict[str, str] = field(default_factory=dict)
    numeric_option: Optional[str] = None


FLAG_TABLES: Dict[str, FlagSpec] = {
    'cd': FlagSpec(),
    'pwd': FlagSpec(),
    'ls': FlagSpec(switches={
        'a': 'all',
        'l': 'long',
        'h': 'human',
        's': 'blocks',
    }),
    'cat': FlagSpec(),
    'head': FlagSpec(options={'n': 'lines'}, numeric_option='lines'),
    'tail': FlagSpec(options={'n': 'lines'}, numeric_option='lines'),
    'wc': FlagSpec(switches={
        'l': 'lines',
        'w': 'words',
        'c': 'bytes',
    }),
    'grep': FlagSpec(switches={
        'i': 'ignore_case',
        'c': 'count',
    }),
    'cut': FlagSpec(options={
        'f': 'fields',
        'd': 'delimiter',
    }),
}


@dataclass
class Command:
    """
    A single pipeline stage: command name, parsed flags and arguments.
    """
    name: str
    args: List[str]
    flags: Dict[str, Union[bool, str]]
    raw_args: List[str]  # Original arguments before flag parsing


@dataclass
class Pipeline:
    """
    Stages connected by pipes, executed left to right with text output
    flowing into the next stage.
    """
    stages: List[str]


def is_flag(token: str) -> bool:
    """A flag token starts with '-' and has at least one more character."""
    return token.startswith('-') and len(token) > 1


@dataclass
class ScanResult:
    """Output of the flag scanner."""
    flags: Dict[str, Union[bool, str]]
    positionals: List[str]
    pending_option: Optional[str] = None  # option still waiting for its value


def scan_flags(name: str, args: List[str], strict: bool = True) -> ScanResult:
    """
    Scan clustered short flags left to right until the first non-flag token.

    In strict mode unknown letters and value options without a value raise
    UsageError. Non-strict mode (used by completion) ignores unknown
    letters and reports an option still waiting for its value.
    """
    spec = FLAG_TABLES.get(name, FlagSpec())
    flags: Dict[str, Union[bool, str]] = {}

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == '--':
            i += 1
            break
        if not is_flag(arg):
            break

        if spec.numeric_option and arg[1:].isdigit():
            flags[spec.numeric_option] = arg[1:]
            i += 1
            continue

        for j, char in enumerate(arg[1:], start=1):
            if char in spec.switches:
                flags[spec.switches[char]] = True
            elif char in spec.options:
                long_name = spec.options[char]
                attached = arg[j + 1:]
                if attached:
                    flags[long_name] = attached
                elif i + 1 < len(args):
                    i += 1
                    flags[long_name] = args[i]
                elif strict:
                    raise UsageError(invalid_argument(
                        name, f"option requires an argument -- '{char}'"))
                else:
                    return ScanResult(flags, [], pending_option=long_name)
                break
            elif strict:
                raise UsageError(invalid_argument(name, f"invalid option -- '{char}'"))
        i += 1

    return ScanResult(flags, list(args[i:]))


class CommandParser:
    """
    Parser for the treeshell command syntax.

    This parser handles:
    - Whitespace-separated commands and arguments (no quoting)
    - Short flags, clustered (-lh) or separate (-l -h)
    - Value options, attached (-f1,2) or separate (-f 1,2)
    - Pipes (|)
    """

    def split_pipeline(self, command_line: str) -> Pipeline:
        """Split a line on '|', trimming and discarding empty stages."""
        stages = [part.strip() for part in command_line.split('|')]
        return Pipeline(stages=[stage for stage in stages if stage])

    def tokenize(self, stage: str) -> List[str]:
        """Split one stage on whitespace."""
        return stage.split()

    def parse_stage(self, stage: str) -> Optional[Command]:
        """
        Parse one pipeline stage.

        Returns None for an empty stage. Raises UsageError for malformed
        options of a recognized command.
        """
        tokens = self.tokenize(stage)
        if not tokens:
            return None

        name = tokens[0]
        raw_args = tokens[1:]
        if name not in FLAG_TABLES:
            return Command(name=name, args=raw_args, flags={}, raw_args=raw_args)

        scanned = scan_flags(name, raw_args)
        return Command(
            name=name,
            args=scanned.positionals,
            flags=scanned.flags,
            raw_args=raw_args
        )


def split_last_stage(command_line: str) -> Tuple[List[str], bool]:
    """Tokens of the last pipeline stage and whether it ends in whitespace."""
    last_stage = command_line.split('|')[-1]
    ends_with_space = bool(last_stage) and last_stage[-1].isspace()
    return last_stage.split(), ends_with_space
