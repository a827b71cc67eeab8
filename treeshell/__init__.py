"""
treeshell - A practice shell over a read-only virtual filesystem

This package provides an immutable in-memory directory tree, an engine that
interprets nine builtin commands (cd, pwd, ls, cat, head, tail, wc, grep,
cut) with single-level pipes, path completion, and a terminal front end.
"""

__version__ = "0.1.0"

from .vfs import (
    VirtualFileSystem,
    FileNode,
    DirNode,
    Node,
    Mode,
)

from .errors import (
    CommandError,
    ErrorKind,
)

from .results import (
    EvaluationResult,
    ListingEntry,
    ListingResult,
    Session,
)

from .executor import (
    Engine,
    evaluate,
    complete,
)

from .listing import format_listing

from .sample_tree import HOME, build_sample_filesystem

from .terminal import (
    TerminalSession,
    TerminalConfig,
    CommandHistory,
)

__all__ = [
    # Filesystem
    "VirtualFileSystem",
    "FileNode",
    "DirNode",
    "Node",
    "Mode",
    "HOME",
    "build_sample_filesystem",

    # Engine
    "Engine",
    "evaluate",
    "complete",
    "EvaluationResult",
    "ListingEntry",
    "ListingResult",
    "Session",
    "CommandError",
    "ErrorKind",
    "format_listing",

    # Terminal
    "TerminalSession",
    "TerminalConfig",
    "CommandHistory",

    # Version info
    "__version__",
]
