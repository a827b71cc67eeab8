#!/usr/bin/env python3
"""
Path completion for partially typed command lines.

Only path arguments are completed: the directory of `cd` and `ls`, the
file arguments of `cat`, `head`, `tail`, `wc` and `cut`, and the files of
`grep` once its pattern has been typed. Flags and option values are
never completed.
"""

import logging
from typing import List, Optional

from . import paths
from .command_parser import COMMANDS, is_flag, scan_flags, split_last_stage
from .vfs import DirNode, VirtualFileSystem

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 8
SINGLE_PATH_COMMANDS = frozenset({'cd', 'ls'})


class PathCompleter:
    """Suggest completions for the path argument under the cursor."""

    def __init__(self, fs: VirtualFileSystem, home: str):
        self.fs = fs
        self.home = home

    def complete(self, line: str, cwd: str) -> List[str]:
        """Completions for the end of line, at most MAX_SUGGESTIONS."""
        argument = self.argument_for_completion(line)
        if argument is None:
            return []
        suggestions = self.path_completions(argument, cwd)
        logger.debug("complete %r in %s -> %d suggestions", argument, cwd, len(suggestions))
        return suggestions

    def argument_for_completion(self, line: str) -> Optional[str]:
        """
        The partial path argument at the end of line.

        Returns None when the cursor is not at a completable path: still
        typing the command name, typing a flag, typing an option value, or
        past the single path of `cd`/`ls`. Returns '' right after a space.
        """
        tokens, ends_with_space = split_last_stage(line)
        if not tokens or tokens[0] not in COMMANDS or tokens[0] == 'pwd':
            return None
        if len(tokens) == 1 and not ends_with_space:
            return None

        name, args = tokens[0], tokens[1:]
        if ends_with_space:
            current, previous = '', args
        else:
            current, previous = args[-1], args[:-1]

        if is_flag(current):
            return None

        scanned = scan_flags(name, previous, strict=False)
        if scanned.pending_option:
            return None

        if name in SINGLE_PATH_COMMANDS and scanned.positionals:
            return None
        if name == 'grep' and not scanned.positionals:
            return None

        return current

    def path_completions(self, argument: str, cwd: str) -> List[str]:
        """
        Children of the argument's directory whose names start with its
        last segment, in storage order. Directories get a trailing '/'.
        """
        use_tilde = argument == '~' or argument.startswith('~/')
        expanded = paths.expand_home(argument, self.home) if use_tilde else argument

        split_at = expanded.rfind('/') + 1
        directory_part, prefix = expanded[:split_at], expanded[split_at:]
        if expanded.startswith('/'):
            base = paths.normalize(directory_part)
        else:
            base = paths.join(cwd, directory_part)

        node = self.fs.lookup(base)
        if not isinstance(node, DirNode):
            return []

        suggestions = []
        for child in node.children:
            if not child.name.startswith(prefix):
                continue

            if expanded.startswith('/'):
                suggestion = paths.join(base, child.name)
            else:
                suggestion = directory_part + child.name
            if isinstance(child, DirNode):
                suggestion += '/'
            if use_tilde:
                suggestion = paths.abbreviate_home(suggestion.rstrip('/'), self.home) + \
                    ('/' if suggestion.endswith('/') else '')

            suggestions.append(suggestion)
            if len(suggestions) == MAX_SUGGESTIONS:
                break

        return suggestions
