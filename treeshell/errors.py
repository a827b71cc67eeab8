#!/usr/bin/env python3
"""
Error values reported by the treeshell engine.

Errors are plain values, never raised: every handler reports failure by
returning a CommandError, and the engine stays usable for the next line.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional


class ErrorKind(Enum):
    """Classification of engine errors."""
    INVALID_INPUT = 'invalid_input'            # forbidden characters, too long, unknown command
    MISSING_OPERAND = 'missing_operand'
    NOT_FOUND = 'not_found'                    # file or directory does not exist
    NOT_A_DIRECTORY = 'not_a_directory'
    INVALID_ARGUMENT = 'invalid_argument'      # bad flag value, empty field list
    PIPE_NOT_SUPPORTED = 'pipe_not_supported'  # cd inside a pipe


@dataclass(frozen=True)
class CommandError:
    """
    A reported error.

    `message` keeps the historical "<cmd>: <detail>" format. For commands
    that read several files, `partial_output` holds the text produced for
    the files that could be read. `command_not_found` marks an unknown
    command name (exit status 127).
    """
    kind: ErrorKind
    message: str
    partial_output: Optional[str] = None
    command_not_found: bool = False

    @property
    def exit_code(self) -> int:
        """Shell-style exit status for this error."""
        if self.command_not_found:
            return 127
        if self.kind in (ErrorKind.INVALID_ARGUMENT, ErrorKind.MISSING_OPERAND):
            return 2
        return 1

    def with_partial_output(self, text: Optional[str]) -> 'CommandError':
        """Return a copy carrying the output accumulated before the error."""
        return replace(self, partial_output=text)

    def __str__(self) -> str:
        return self.message


def invalid_input(message: str) -> CommandError:
    return CommandError(ErrorKind.INVALID_INPUT, message)


def missing_operand(command: str, detail: str = 'missing operand') -> CommandError:
    return CommandError(ErrorKind.MISSING_OPERAND, f"{command}: {detail}")


def not_found(command: str, detail: str) -> CommandError:
    return CommandError(ErrorKind.NOT_FOUND, f"{command}: {detail}")


def not_a_directory(command: str, detail: str) -> CommandError:
    return CommandError(ErrorKind.NOT_A_DIRECTORY, f"{command}: {detail}")


def invalid_argument(command: str, detail: str) -> CommandError:
    return CommandError(ErrorKind.INVALID_ARGUMENT, f"{command}: {detail}")


def pipe_not_supported(command: str) -> CommandError:
    return CommandError(ErrorKind.PIPE_NOT_SUPPORTED, f"{command}: cannot be piped")


def unknown_command(name: str, supported: Iterable[str]) -> CommandError:
    return CommandError(ErrorKind.INVALID_INPUT,
                        f"Unknown command: {name}. Supported: {', '.join(supported)}.",
                        command_not_found=True)
