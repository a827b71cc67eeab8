#!/usr/bin/env python3
"""
Builtin commands for treeshell.

Each public method implements one command over the read-only virtual
filesystem. Methods receive the parsed Command, the current directory and
the previous stage's text (stdin, or None) and return a StageOutcome.
Nothing here mutates the filesystem; `cd` only reports where to go.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from . import paths
from .command_parser import COMMANDS, Command, CommandParser, UsageError
from .errors import (
    CommandError, invalid_argument, missing_operand, not_a_directory,
    not_found, pipe_not_supported, unknown_command,
)
from .results import Chdir, Failure, Listing, ListingEntry, ListingResult, StageOutcome, Text
from .vfs import DirNode, FileNode, VirtualFileSystem

logger = logging.getLogger(__name__)

DEFAULT_LINE_COUNT = 10
MAX_CUT_FIELDS = 1024


def listing_sort_key(entry: ListingEntry) -> Tuple[int, str, str]:
    """Directories first, then names in dictionary order.

    Names compare case-insensitively first; on a tie lowercase sorts
    before uppercase. Punctuation orders by code point, so `a-b` sorts
    before `a_b` where a locale collation may reverse them.
    """
    return (0 if entry.kind == 'directory' else 1, entry.name.casefold(), entry.name.swapcase())


def strip_quotes(pattern: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(pattern) >= 2 and pattern[0] == pattern[-1] and pattern[0] in ('"', "'"):
        return pattern[1:-1]
    return pattern


def build_matcher(pattern: str, ignore_case: bool = False) -> Callable[[str], bool]:
    """
    Build a line predicate for grep.

    The pattern is used as a regular expression when it compiles. A
    pattern that is not a valid regular expression (e.g. an unbalanced
    bracket) falls back to a literal substring test, case-normalized when
    ignore_case is set.
    """
    try:
        regex = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as e:
        logger.debug("grep pattern %r is not a regex (%s); matching literally", pattern, e)
        if ignore_case:
            needle = pattern.lower()
            return lambda line: needle in line.lower()
        return lambda line: pattern in line

    return lambda line: regex.search(line) is not None


def parse_field_list(spec: str) -> List[int]:
    """Parse a cut field list like 1,3 or 2-4.

    Items that are not positive integers or ascending ranges are skipped.
    Order is preserved, so 3,1 selects field 3 before field 1.
    """
    fields = []
    for part in spec.split(','):
        match = re.fullmatch(r'([0-9]+)(?:-([0-9]+))?', part.strip())
        if not match:
            continue
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) else start
        if start < 1 or end < start:
            continue
        if len(fields) + end - start + 1 > MAX_CUT_FIELDS:
            raise UsageError(invalid_argument('cut', 'field list too long'))
        fields.extend(range(start, end + 1))
    return fields


class Builtins:
    """
    The nine builtin commands.

    Commands are looked up by name on this class, the same way a shell
    maps a command word to its implementation.
    """

    def __init__(self, fs: VirtualFileSystem, home: str):
        self.fs = fs
        self.home = paths.normalize(home)
        self.parser = CommandParser()

    # Dispatch

    def dispatch(self, stage: str, cwd: str, stdin: Optional[str] = None,
                 in_pipeline: bool = False) -> StageOutcome:
        """Parse one stage and run the matching builtin."""
        tokens = self.parser.tokenize(stage)
        if not tokens:
            return Text('')

        name = tokens[0]
        if name not in COMMANDS:
            logger.debug("unknown command %r", name)
            return Failure(unknown_command(name, COMMANDS))
        if name == 'cd' and in_pipeline:
            return Failure(pipe_not_supported('cd'))

        try:
            command = self.parser.parse_stage(stage)
            logger.debug("dispatch %s flags=%s args=%s cwd=%s stdin=%s",
                         command.name, command.flags, command.args, cwd,
                         'yes' if stdin is not None else 'no')
            return getattr(self, name)(command, cwd, stdin)
        except UsageError as e:
            return Failure(e.error)

    # Helpers

    def _resolve(self, raw: str, cwd: str) -> str:
        return paths.resolve(raw, cwd, self.home)

    def _read_file(self, raw: str, cwd: str) -> Optional[Tuple[str, str]]:
        """Resolve and read a file, returning (absolute path, text)."""
        path = self._resolve(raw, cwd)
        node = self.fs.lookup(path)
        if not isinstance(node, FileNode):
            return None
        return path, node.text

    @staticmethod
    def _finish(text: str, error: Optional[CommandError]) -> StageOutcome:
        """Text outcome, or a failure carrying the text produced so far."""
        if error:
            return Failure(error.with_partial_output(text))
        return Text(text)

    # Navigation

    def cd(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Change the current directory.

        Usage:
            cd [PATH]

        Options:
            PATH                   Directory to change to (default: HOME)

        Examples:
            cd                     # Go to home directory
            cd ..                  # Go to parent directory
            cd ~/Documents         # Go to Documents in home
        """
        if not command.args:
            return Chdir(self.home)

        raw = ' '.join(command.args)
        target = self._resolve(raw, cwd)
        node = self.fs.lookup(target)
        if node is None:
            return Failure(not_found('cd', f"no such file or directory: {raw}"))
        if not isinstance(node, DirNode):
            return Failure(not_a_directory('cd', f"not a directory: {raw}"))
        return Chdir(target)

    def pwd(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Print working directory.

        Usage:
            pwd
        """
        return Text(cwd)

    def ls(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """List directory contents.

        Usage:
            ls [-a] [-l] [-h] [-s] [PATH]

        Options:
            -a                     Show hidden files (starting with .)
            -l                     Use long listing format
            -h                     Human-readable sizes
            -s                     Show allocated blocks
            PATH                   Directory to list (default: current)

        Examples:
            ls -a ~                # Everything in the home directory
            ls -lh Documents       # Long format with readable sizes
        """
        raw = ' '.join(command.args)
        target = self._resolve(raw, cwd) if command.args else cwd

        node = self.fs.lookup(target)
        if node is None:
            return Failure(not_found('ls', f"cannot access '{raw}': No such directory"))
        if not isinstance(node, DirNode):
            return Failure(not_a_directory('ls', f"cannot access '{raw}': Not a directory"))

        show_hidden = bool(command.flags.get('all'))
        entries = [
            ListingEntry(child.name, child.kind)
            for child in node.children
            if show_hidden or not child.name.startswith('.')
        ]
        entries.sort(key=listing_sort_key)

        return Listing(ListingResult(
            path=target,
            entries=entries,
            show_hidden=show_hidden,
            long_format=bool(command.flags.get('long')),
            human_readable=bool(command.flags.get('human')),
            show_blocks=bool(command.flags.get('blocks')),
        ))

    # Text commands

    def cat(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Concatenate and display files.

        Usage:
            cat [FILE...]

        Options:
            FILE                   File(s) to display (default: stdin)

        Examples:
            cat README.txt         # Display a file
            cat a.txt b.txt        # Each file under a ==> path <== header
        """
        if not command.args:
            if stdin is not None:
                return Text(stdin)
            return Failure(missing_operand('cat'))

        outputs = []
        error = None
        for raw in command.args:
            file = self._read_file(raw, cwd)
            if file is None:
                error = not_found('cat', f"{raw}: No such file")
                continue
            path, content = file
            if len(command.args) > 1:
                outputs.append(f"==> {path} <==")
            outputs.append(content)

        return self._finish('\n'.join(outputs), error)

    def head(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Display first lines of a file.

        Usage:
            head [-n NUM | -NUM] [FILE]

        Options:
            -n NUM                 Number of lines to display (default: 10)
            FILE                   File to read (default: stdin)

        Examples:
            head -n 5 chapter1.md  # First 5 lines
            cat log | head -3      # First 3 lines of piped input
        """
        return self._head_or_tail(command, cwd, stdin)

    def tail(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Display last lines of a file.

        Usage:
            tail [-n NUM | -NUM] [FILE]

        Options:
            -n NUM                 Number of lines to display (default: 10)
            FILE                   File to read (default: stdin)

        Examples:
            tail -n 2 chapter2.md  # Last 2 lines
        """
        return self._head_or_tail(command, cwd, stdin)

    def _head_or_tail(self, command: Command, cwd: str, stdin: Optional[str]) -> StageOutcome:
        name = command.name
        value = command.flags.get('lines', str(DEFAULT_LINE_COUNT))
        if not re.fullmatch(r'[0-9]+', value):
            return Failure(invalid_argument(name, f"invalid number of lines: '{value}'"))
        count = int(value)

        if command.args:
            raw = ' '.join(command.args)
            file = self._read_file(raw, cwd)
            if file is None:
                return Failure(not_found(name, f"{raw}: No such file"))
            content = file[1]
        elif stdin is not None:
            content = stdin
        else:
            return Failure(missing_operand(name))

        lines = content.split('\n')
        if name == 'head':
            selected = lines[:count]
        else:
            # lines[-0:] would be every line
            selected = lines[-count:] if count > 0 else []
        return Text('\n'.join(selected))

    def wc(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Print line, word, and byte counts.

        Usage:
            wc [-l] [-w] [-c] [FILE...]

        Options:
            -l                     Print line count
            -w                     Print word count
            -c                     Print byte count
            FILE                   File(s) to count (default: stdin, shown as -)

        Examples:
            wc expenses.csv        # lines words bytes path
            wc -l a.txt b.txt      # Per-file counts plus a total line
            ls | wc -l             # Count entries
        """
        columns = [key for key in ('lines', 'words', 'bytes') if command.flags.get(key)]
        if not columns:
            columns = ['lines', 'words', 'bytes']

        totals = {'lines': 0, 'words': 0, 'bytes': 0}
        rows = []

        def count(content: str, label: str) -> None:
            counts = {
                'lines': len(content.split('\n')),
                'words': len(content.split()),
                'bytes': len(content.encode('utf-8')),
            }
            for key, value in counts.items():
                totals[key] += value
            rows.append(' '.join([str(counts[key]) for key in columns] + [label]))

        if not command.args:
            if stdin is None:
                return Failure(missing_operand('wc', 'missing file operand'))
            count(stdin, '-')
            return Text(rows[0])

        error = None
        for raw in command.args:
            file = self._read_file(raw, cwd)
            if file is None:
                error = not_found('wc', f"{raw}: No such file")
                continue
            count(file[1], file[0])

        if len(command.args) > 1:
            rows.append(' '.join([str(totals[key]) for key in columns] + ['total']))

        return self._finish('\n'.join(rows), error)

    def grep(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Search for patterns in files or input.

        Usage:
            grep [-i] [-c] PATTERN [FILE...]

        Options:
            -i                     Ignore case distinctions
            -c                     Print only a count of matching lines
            PATTERN                Regular expression (literal text if it does not compile)
            FILE                   File(s) to search (default: stdin)

        Examples:
            grep -i kinase gene_annotations.tsv
            grep -c ERROR pipeline.log
            ls | grep html
        """
        if not command.args:
            return Failure(missing_operand('grep', 'missing pattern'))

        pattern = strip_quotes(command.args[0])
        files = command.args[1:]
        ignore_case = bool(command.flags.get('ignore_case'))
        count_only = bool(command.flags.get('count'))
        matches = build_matcher(pattern, ignore_case)
        labelled = len(files) > 1

        def search(lines: List[str], name: Optional[str] = None) -> Optional[str]:
            found = [line for line in lines if matches(line)]
            if count_only:
                return f"{name}:{len(found)}" if labelled else str(len(found))
            if labelled:
                found = [f"{name}:{line}" for line in found]
            return '\n'.join(found) if found else None

        if not files:
            if stdin is None:
                return Failure(missing_operand('grep', 'missing file'))
            return Text(search(stdin.split('\n')) or '')

        outputs = []
        error = None
        for raw in files:
            file = self._read_file(raw, cwd)
            if file is None:
                error = not_found('grep', f"{raw}: No such file")
                continue
            path, content = file
            out = search(content.split('\n'), path)
            if out is not None:
                outputs.append(out)

        return self._finish('\n'.join(outputs), error)

    def cut(self, command: Command, cwd: str, stdin: Optional[str] = None) -> StageOutcome:
        """Remove sections from each line.

        Usage:
            cut -f LIST [-d DELIM] [FILE...]

        Options:
            -f LIST                Fields to select, e.g. 1,3 or 2-4 (required)
            -d DELIM               Field delimiter (default: tab; \\t is accepted)
            FILE                   File(s) to read (default: stdin)

        Examples:
            cut -f1,2 sample_metadata.tsv
            cut -d , -f 2 expenses.csv
            grep s1 sample_metadata.tsv | cut -f 3
        """
        if not command.raw_args:
            return Failure(missing_operand('cut'))

        fields_spec = command.flags.get('fields')
        if fields_spec is None:
            return Failure(missing_operand('cut', 'missing -f option'))

        delimiter = command.flags.get('delimiter', '\t')
        if delimiter == '\\t':
            delimiter = '\t'

        field_numbers = parse_field_list(fields_spec)
        if not field_numbers:
            return Failure(invalid_argument('cut', 'invalid field list'))

        def select(content: str) -> List[str]:
            selected = []
            for line in content.split('\n'):
                columns = line.split(delimiter)
                selected.append(delimiter.join(
                    columns[n - 1] if n <= len(columns) else '' for n in field_numbers
                ))
            return selected

        if not command.args:
            if stdin is None:
                return Failure(missing_operand('cut', 'missing file'))
            return Text('\n'.join(select(stdin)))

        outputs = []
        error = None
        for raw in command.args:
            file = self._read_file(raw, cwd)
            if file is None:
                error = not_found('cut', f"{raw}: No such file")
                continue
            path, content = file
            if len(command.args) > 1:
                outputs.append(f"==> {path} <==")
            outputs.extend(select(content))

        return self._finish('\n'.join(outputs), error)
