#!/usr/bin/env python3
"""
Pipeline execution and the engine facade.

The executor runs the stages of one line left to right, feeding each
stage's text into the next. The Engine bundles a filesystem, a home
directory, the executor and the completer behind the two calls a host
needs: evaluate() and complete().
"""

import logging
from typing import List, Optional, Tuple

from . import paths
from .builtins import Builtins
from .command_parser import CommandParser
from .completion import PathCompleter
from .errors import pipe_not_supported
from .results import (
    Chdir, EvaluationResult, Failure, Listing, Session, StageOutcome, to_stdin,
)
from .sample_tree import HOME, build_sample_filesystem
from .validator import validate
from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """
    Executes validated command lines.

    A single stage runs against the live directory and may change it.
    Several stages are run as a pipe; `cd` anywhere in a pipe aborts the
    whole line before any stage runs.
    """

    def __init__(self, builtins: Builtins):
        self.builtins = builtins
        self.parser = CommandParser()

    def execute(self, line: str, cwd: str) -> EvaluationResult:
        """Execute a line that already passed validation."""
        stages = self.parser.split_pipeline(line).stages
        if not stages:
            return EvaluationResult(next_directory=cwd)

        if len(stages) == 1:
            return self._finish(self.builtins.dispatch(stages[0], cwd), cwd)

        for stage in stages:
            tokens = self.parser.tokenize(stage)
            if tokens and tokens[0] == 'cd':
                return EvaluationResult(next_directory=cwd, error=pipe_not_supported('cd'))

        stdin: Optional[str] = None
        for index, stage in enumerate(stages):
            outcome = self.builtins.dispatch(stage, cwd, stdin, in_pipeline=True)
            if isinstance(outcome, Failure):
                logger.debug("pipeline aborted at stage %d: %s", index + 1, outcome.error)
                break
            stdin = to_stdin(outcome)

        return self._finish(outcome, cwd)

    @staticmethod
    def _finish(outcome: StageOutcome, cwd: str) -> EvaluationResult:
        if isinstance(outcome, Chdir):
            return EvaluationResult(next_directory=outcome.path)
        if isinstance(outcome, Failure):
            return EvaluationResult(next_directory=cwd, error=outcome.error)
        if isinstance(outcome, Listing):
            return EvaluationResult(next_directory=cwd, text=to_stdin(outcome),
                                    listing=outcome.listing)
        return EvaluationResult(next_directory=cwd, text=to_stdin(outcome))


class Engine:
    """
    Command interpretation engine over one read-only filesystem.

    The engine keeps no per-user state: the current directory is passed
    in and the next one handed back, so one engine can serve any number
    of sessions.

    Example:
        engine = Engine(build_sample_filesystem(), '/home/user')
        result = engine.evaluate('ls ~/Documents', '/home/user')
        result.listing.names()
        ['Notes/', 'Research/', 'Thesis/']
    """

    def __init__(self, fs: VirtualFileSystem, home: str = HOME):
        self.fs = fs
        self.home = paths.normalize(home)
        self.builtins = Builtins(fs, self.home)
        self.executor = PipelineExecutor(self.builtins)
        self.completer = PathCompleter(fs, self.home)

    def evaluate(self, line: str, cwd: str) -> EvaluationResult:
        """Validate and run one command line from the given directory."""
        line = line.strip()
        if not line:
            return EvaluationResult(next_directory=cwd)

        error = validate(line)
        if error:
            return EvaluationResult(next_directory=cwd, error=error)

        return self.executor.execute(line, cwd)

    def run(self, line: str, session: Session) -> Tuple[Session, EvaluationResult]:
        """Evaluate a line for a session, returning (new session, result)."""
        result = self.evaluate(line, session.cwd)
        return session.apply(result), result

    def complete(self, line: str, cwd: str) -> List[str]:
        """Path completions for a partially typed line."""
        return self.completer.complete(line, cwd)

    def new_session(self) -> Session:
        """A session starting in the home directory."""
        return Session(cwd=self.home)


_default_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get the shared engine over the bundled sample tree."""
    global _default_engine
    if _default_engine is None:
        _default_engine = Engine(build_sample_filesystem(), HOME)
    return _default_engine


def evaluate(line: str, cwd: str = HOME) -> EvaluationResult:
    """Evaluate a line against the bundled sample tree."""
    return get_engine().evaluate(line, cwd)


def complete(line: str, cwd: str = HOME) -> List[str]:
    """Complete a line against the bundled sample tree."""
    return get_engine().complete(line, cwd)
