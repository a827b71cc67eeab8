#!/usr/bin/env python3
"""
Whole-line input validation.

Runs on the trimmed line before any pipeline splitting. The first failing
rule wins; a valid line yields None.
"""

import logging
from typing import Optional

from .command_parser import COMMANDS
from .errors import CommandError, invalid_input, unknown_command

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 200
FORBIDDEN_CHARACTERS = frozenset('`;&><$')


def has_forbidden_characters(line: str) -> bool:
    """Check for shell metacharacters other than the pipe."""
    return any(char in FORBIDDEN_CHARACTERS for char in line.replace('|', ''))


def validate(line: str) -> Optional[CommandError]:
    """Return the first validation error for a trimmed line, or None."""
    if has_forbidden_characters(line):
        logger.debug("rejected line with forbidden characters: %r", line)
        return invalid_input("Unsupported or potentially dangerous characters in command.")

    if len(line) > MAX_LINE_LENGTH:
        logger.debug("rejected line of length %d", len(line))
        return invalid_input("Command too long.")

    # Pipelines are checked stage by stage by the dispatcher.
    if '|' not in line:
        tokens = line.split()
        if tokens and tokens[0] not in COMMANDS:
            logger.debug("rejected unknown command %r", tokens[0])
            return unknown_command(tokens[0], COMMANDS)

    return None
