#!/usr/bin/env python3
"""
Terminal front end for treeshell.

This module wraps the engine in an interactive session: a prompt that
shows the current directory, command history, readline tab completion
backed by the path completer, a few slash commands for the host, and
one-shot and script modes.

Design Principles:
- The engine stays pure; all session state lives here
- Listings are rendered only at this edge
- Every command line goes through Engine.evaluate
"""

import argparse
import getpass
import logging
import socket
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

try:
    import readline
except ImportError:  # Windows without pyreadline
    readline = None

from . import __version__, paths
from .builtins import Builtins
from .command_parser import COMMANDS
from .executor import Engine
from .listing import format_listing
from .results import EvaluationResult, Session
from .sample_tree import HOME, build_sample_filesystem
from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ('exit', 'quit')


@dataclass
class TerminalConfig:
    """Configuration for terminal session."""
    user: str = field(default_factory=lambda: getpass.getuser())
    hostname: str = field(default_factory=lambda: socket.gethostname().split('.')[0])
    home_dir: str = HOME
    initial_dir: Optional[str] = None  # defaults to home_dir
    prompt_format: str = '{user}@{hostname}:{cwd}$ '
    enable_colors: bool = True
    history_size: int = 1000
    tree_file: Optional[str] = None  # JSON tree specification
    enable_tab_completion: bool = True


def load_filesystem(tree_file: Optional[str] = None) -> VirtualFileSystem:
    """Load a tree specification from disk, or build the bundled tree."""
    if tree_file is None:
        return build_sample_filesystem()
    logger.info("loading tree specification from %s", tree_file)
    return VirtualFileSystem.from_json(Path(tree_file).read_text(encoding='utf-8'))


def extract_docstring_sections(docstring: str) -> dict:
    """Extract description, usage, options and examples from a docstring."""
    sections = {'description': '', 'usage': '', 'options': [], 'examples': []}
    if not docstring:
        return sections

    lines = docstring.strip().split('\n')
    sections['description'] = lines[0].strip()

    current = None
    for line in lines[1:]:
        line = line.strip()
        if line in ('Usage:', 'Options:', 'Examples:'):
            current = line[:-1].lower()
        elif line and current == 'usage':
            sections['usage'] = line
        elif line and current:
            sections[current].append(line)

    return sections


def command_help(name: str) -> str:
    """Help text for one builtin, built from its docstring."""
    method = getattr(Builtins, name, None) if name in COMMANDS else None
    if method is None:
        return f"help: no help available for '{name}'"

    sections = extract_docstring_sections(method.__doc__)
    help_lines = [f"{name} - {sections['description']}", ""]
    if sections['usage']:
        help_lines += ["Usage:", f"    {sections['usage']}", ""]
    if sections['options']:
        help_lines += ["Options:"] + [f"    {opt}" for opt in sections['options']] + [""]
    if sections['examples']:
        help_lines += ["Examples:"] + [f"    {ex}" for ex in sections['examples']]
    return '\n'.join(help_lines).rstrip()


class CommandHistory:
    """Manages command history for the terminal session."""

    def __init__(self, max_size: int = 1000):
        self.max_size = max_size
        self.history: List[str] = []

    def add(self, command: str):
        """Add a command to history, skipping blanks and repeats."""
        if command and command.strip():
            if not self.history or self.history[-1] != command:
                self.history.append(command)
            if len(self.history) > self.max_size:
                self.history.pop(0)

    def display(self, max_entries: Optional[int] = None) -> str:
        """Numbered history listing, newest last."""
        start = 0
        if max_entries is not None:
            start = max(0, len(self.history) - max_entries)
        return '\n'.join(f"{i:5}  {cmd}"
                         for i, cmd in enumerate(self.history[start:], start + 1))


class TabCompleter:
    """
    Readline completion function backed by the engine's path completer.

    Words are delimited by whitespace and '|' only, so a whole path
    argument is one readline word and suggestions replace it as typed.
    """

    DELIMITERS = ' \t|'

    def __init__(self, engine: Engine, cwd: Callable[[], str]):
        self.engine = engine
        self.cwd = cwd
        self._matches: List[str] = []

    def matches_for(self, line: str) -> List[str]:
        """Completions for a line, command names when none is typed yet."""
        stage = line.split('|')[-1].lstrip()
        if stage and not any(ch.isspace() for ch in stage):
            return [name + ' ' for name in COMMANDS if name.startswith(stage)]
        return self.engine.complete(line, self.cwd())

    def complete(self, text: str, state: int) -> Optional[str]:
        """
        Readline completion function.

        Called by readline with increasing state until it returns None.
        """
        if state == 0:
            line = readline.get_line_buffer()[:readline.get_endidx()]
            self._matches = self.matches_for(line)
        try:
            return self._matches[state]
        except IndexError:
            return None


class TerminalSession:
    """
    Main terminal session manager.

    This class provides the REPL loop and manages the terminal session,
    including prompt display, command execution, and session state.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 engine: Optional[Engine] = None):
        self.config = config or TerminalConfig()
        self.engine = engine or Engine(load_filesystem(self.config.tree_file),
                                       self.config.home_dir)
        self.session = Session(cwd=self._initial_directory())
        self.history = CommandHistory(self.config.history_size)
        self.last_exit_code = 0
        self.running = False

    def _initial_directory(self) -> str:
        """Start directory: the configured one if it is a directory, else home."""
        start = self.config.initial_dir
        if start is None:
            return self.engine.home
        start = paths.resolve(start, self.engine.home, self.engine.home)
        if not self.engine.fs.is_dir(start):
            logger.warning("initial directory %s does not exist; using %s",
                           start, self.engine.home)
            return self.engine.home
        return start

    @property
    def cwd(self) -> str:
        return self.session.cwd

    # Readline

    def _setup_readline(self):
        """Install tab completion if readline is available."""
        if readline is None:
            logger.warning("readline is not available; tab completion disabled")
            return

        completer = TabCompleter(self.engine, lambda: self.session.cwd)
        readline.set_completer_delims(TabCompleter.DELIMITERS)
        readline.set_completer(completer.complete)
        readline.parse_and_bind('tab: complete')
        readline.set_history_length(self.config.history_size)

    # Slash commands

    def _execute_slash_command(self, command_line: str) -> str:
        """Execute a slash command."""
        parts = command_line[1:].split()
        if not parts:
            return "Error: empty slash command"

        cmd = parts[0].lower()
        args = parts[1:]

        handlers: Dict[str, Callable[[List[str]], str]] = {
            'help': self._slash_help,
            'hint': self._slash_hint,
            'history': self._slash_history,
        }

        handler = handlers.get(cmd)
        if handler is None:
            return f"Unknown slash command: /{cmd}\nType /help for available commands"
        return handler(args)

    def _slash_help(self, args: List[str]) -> str:
        """Show command and slash command help."""
        if args:
            return command_help(args[0])

        summaries = []
        for name in COMMANDS:
            sections = extract_docstring_sections(getattr(Builtins, name).__doc__)
            summaries.append(f"  {name:<8} {sections['description']}")

        return '\n'.join([
            "Commands:",
            *summaries,
            "",
            "Commands can be chained with |, e.g. grep ERROR pipeline.log | wc -l",
            "",
            "Slash Commands:",
            "  /help [COMMAND]   Show this help, or detailed help for COMMAND",
            "  /hint PATH        Show how to cd to PATH from here",
            "  /history [N]      Show the last N commands",
            "",
            "Type 'exit' or 'quit' to leave.",
        ])

    def _slash_hint(self, args: List[str]) -> str:
        """Show absolute and relative cd commands for a path."""
        if not args:
            return "Usage: /hint PATH"

        target = paths.resolve(args[0], self.cwd, self.engine.home)
        node = self.engine.fs.lookup(target)
        if node is None:
            return f"hint: no such file or directory: {args[0]}"

        hint = paths.cd_hint(target, self.cwd, node.is_dir())
        lines = [hint['note']] if hint['note'] else []
        lines += [f"  {hint['absolute']}", f"  {hint['relative']}"]
        return '\n'.join(lines)

    def _slash_history(self, args: List[str]) -> str:
        """Show recent history."""
        count = None
        if args:
            if not args[0].isdigit():
                return f"history: {args[0]}: numeric argument required"
            count = int(args[0])
        return self.history.display(count)

    # Prompt and execution

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        display_cwd = paths.abbreviate_home(self.cwd, self.engine.home)

        if self.config.enable_colors:
            # Green for user@host, blue for path
            return (f'\033[32m{self.config.user}@{self.config.hostname}\033[0m:'
                    f'\033[34m{display_cwd}\033[0m$ ')

        return self.config.prompt_format.format(
            user=self.config.user,
            hostname=self.config.hostname,
            cwd=display_cwd,
            time=datetime.now().strftime('%H:%M:%S')
        )

    def render(self, result: EvaluationResult) -> str:
        """Text to show for an evaluated line."""
        if result.error:
            parts = []
            if result.error.partial_output:
                parts.append(result.error.partial_output)
            parts.append(result.error.message)
            return '\n'.join(parts)
        if result.listing is not None:
            return format_listing(result.listing, self.engine.fs)
        return result.text or ''

    def execute_command(self, command_line: str) -> Optional[str]:
        """
        Execute a command line and return the output.

        Returns None for exit commands.
        """
        stripped = command_line.strip()
        if not stripped:
            return ''

        if stripped.startswith('/'):
            return self._execute_slash_command(stripped)

        if stripped in EXIT_COMMANDS:
            return None

        self.session, result = self.engine.run(stripped, self.session)
        self.last_exit_code = result.exit_code
        return self.render(result)

    def run_interactive(self):
        """Run the interactive REPL loop."""
        self.running = True
        if self.config.enable_tab_completion:
            self._setup_readline()

        print(f"treeshell {__version__} - a read-only practice shell")
        print("Type '/help' for help, 'exit' to quit")
        print()

        while self.running:
            try:
                command_line = input(self.get_prompt())
                self.history.add(command_line)

                output = self.execute_command(command_line)
                if output is None:
                    break
                if output:
                    print(output)

            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print()
                break

        self.running = False
        print("Goodbye!")

    def run_command(self, command_line: str) -> str:
        """
        Run a single command and return output.

        This method is useful for non-interactive use.
        """
        output = self.execute_command(command_line)
        return output if output is not None else ''

    def run_script(self, script_lines: List[str]) -> List[str]:
        """
        Run a script (list of command lines) and return outputs.
        """
        outputs = []
        for line in script_lines:
            # Skip comments and empty lines
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            output = self.execute_command(line)
            if output is None:  # Exit command
                break
            outputs.append(output)

        return outputs


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='treeshell',
        description='Practice shell over a read-only virtual filesystem')
    parser.add_argument('script', nargs='?', help='Run commands from a script file and exit')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('-u', '--user', help='Set username', default=getpass.getuser())
    parser.add_argument('-d', '--directory', help='Set initial directory (default: home)')
    parser.add_argument('--tree', help='Load the filesystem from a JSON tree specification')
    parser.add_argument('--no-color', action='store_true', help='Disable colored prompt')
    parser.add_argument('--no-completion', action='store_true', help='Disable tab completion')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: WARNING)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the treeshell terminal."""
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    config = TerminalConfig(
        user=args.user,
        initial_dir=args.directory,
        tree_file=args.tree,
        enable_colors=not args.no_color,
        enable_tab_completion=not args.no_completion,
    )

    try:
        session = TerminalSession(config=config)
    except (OSError, ValueError) as e:
        print(f"treeshell: cannot load filesystem: {e}", file=sys.stderr)
        return 1

    if args.command:
        output = session.run_command(args.command)
        if output:
            print(output)
        return session.last_exit_code

    if args.script:
        try:
            script_lines = Path(args.script).read_text(encoding='utf-8').splitlines()
        except OSError as e:
            print(f"treeshell: {e}", file=sys.stderr)
            return 1
        for output in session.run_script(script_lines):
            if output:
                print(output)
        return session.last_exit_code

    session.run_interactive()
    return 0


if __name__ == '__main__':
    sys.exit(main())
