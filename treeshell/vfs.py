#!/usr/bin/env python3
"""
treeshell.vfs - An immutable, in-memory virtual filesystem tree.

Core philosophy:
- Every filesystem object is immutable; the tree is built once
- Directories exclusively own their children (no parent pointers)
- Simple lookups over normalized POSIX paths
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from . import paths

logger = logging.getLogger(__name__)

# Fixed modification time for synthesized metadata (2024-01-01 09:30 UTC).
DEFAULT_MTIME = 1704101400.0


class Mode(IntEnum):
    """Unix-style file mode bits, used only for display."""
    # File types
    IFREG = 0o100000  # regular file
    IFDIR = 0o040000  # directory

    # Permissions
    IRUSR = 0o400  # owner read
    IWUSR = 0o200  # owner write
    IXUSR = 0o100  # owner execute
    IRGRP = 0o040  # group read
    IWGRP = 0o020  # group write
    IXGRP = 0o010  # group execute
    IROTH = 0o004  # other read
    IWOTH = 0o002  # other write
    IXOTH = 0o001  # other execute

    # Common combinations
    FILE_DEFAULT = IFREG | IRUSR | IWUSR | IRGRP | IROTH  # 0o100644
    EXEC_DEFAULT = FILE_DEFAULT | IXUSR | IXGRP | IXOTH  # 0o100755
    DIR_DEFAULT = IFDIR | IRUSR | IWUSR | IXUSR | IRGRP | IXGRP | IROTH | IXOTH  # 0o040755


def format_mode(mode: int) -> str:
    """Format mode bits as an ls-style rwx string."""
    result = 'd' if mode & 0o170000 == Mode.IFDIR else '-'

    for read, write, execute in ((0o400, 0o200, 0o100),
                                 (0o040, 0o020, 0o010),
                                 (0o004, 0o002, 0o001)):
        result += 'r' if mode & read else '-'
        result += 'w' if mode & write else '-'
        result += 'x' if mode & execute else '-'

    return result


@dataclass(frozen=True)
class Node:
    """Base class for all filesystem nodes."""
    name: str
    mode: int
    mtime: float = DEFAULT_MTIME

    @property
    def kind(self) -> str:
        return 'directory' if self.is_dir() else 'file'

    @property
    def permissions(self) -> str:
        return format_mode(self.mode)

    def is_file(self) -> bool:
        """Check if this is a regular file."""
        return (self.mode & Mode.IFDIR) == 0

    def is_dir(self) -> bool:
        """Check if this is a directory."""
        return (self.mode & Mode.IFDIR) != 0

    def to_dict(self) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class FileNode(Node):
    """Regular file node.

    A content of None means the file exists but has no readable text
    (empty or binary). The size override, when given, wins over the
    encoded length of the content.
    """
    content: Optional[str] = None
    size_override: Optional[int] = None

    def __init__(self, name: str, content: Optional[str] = None,
                 size: Optional[int] = None, mode: int = Mode.FILE_DEFAULT,
                 mtime: Optional[float] = None):
        if '/' in name or not name:
            raise ValueError(f"invalid file name: {name!r}")
        if size is not None and size < 0:
            raise ValueError(f"negative size for {name!r}")
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'content', content)
        object.__setattr__(self, 'size_override', size)
        object.__setattr__(self, 'mode', Mode.IFREG | (mode & 0o7777))
        object.__setattr__(self, 'mtime', DEFAULT_MTIME if mtime is None else mtime)

    @property
    def text(self) -> str:
        """Readable text of the file; empty when there is no content."""
        return self.content if self.content is not None else ''

    @property
    def size(self) -> int:
        if self.size_override is not None:
            return self.size_override
        return len(self.text.encode('utf-8'))

    def to_dict(self) -> dict:
        d = {'name': self.name, 'type': 'file'}
        if self.content is not None:
            d['content'] = self.content
        if self.size_override is not None:
            d['size'] = self.size_override
        if self.mode != Mode.FILE_DEFAULT:
            d['mode'] = self.mode & 0o7777
        return d


@dataclass(frozen=True)
class DirNode(Node):
    """Directory node owning an ordered tuple of uniquely named children."""
    children: Tuple[Node, ...] = field(default_factory=tuple)

    def __init__(self, name: str, children: Iterable[Node] = (),
                 mode: int = Mode.DIR_DEFAULT, mtime: Optional[float] = None):
        children = tuple(children)
        seen = set()
        for child in children:
            if child.name in seen:
                raise ValueError(f"duplicate entry {child.name!r} in directory {name!r}")
            seen.add(child.name)
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'children', children)
        object.__setattr__(self, 'mode', Mode.IFDIR | (mode & 0o7777))
        object.__setattr__(self, 'mtime', DEFAULT_MTIME if mtime is None else mtime)

    def child(self, name: str) -> Optional[Node]:
        """Return the direct child with the given name, if any."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    @property
    def size(self) -> int:
        """Recursive size of all files below this directory."""
        return sum(child.size for child in self.children)

    def to_dict(self) -> dict:
        d = {
            'name': self.name,
            'type': 'dir',
            'children': [child.to_dict() for child in self.children],
        }
        if self.mode != Mode.DIR_DEFAULT:
            d['mode'] = self.mode & 0o7777
        return d


def lookup(root: DirNode, path: str) -> Optional[Node]:
    """Walk normalized path segments from the root.

    Returns None when a segment is missing or when an intermediate node
    is a file (files cannot be descended into).
    """
    current: Node = root
    for segment in paths.segments(path):
        if not isinstance(current, DirNode):
            return None
        current = current.child(segment)
        if current is None:
            return None
    return current


def is_directory(root: DirNode, path: str) -> bool:
    """Check whether a path names a directory."""
    return isinstance(lookup(root, path), DirNode)


def node_from_dict(data: Dict[str, Any]) -> Node:
    """Build a node (recursively) from a tree specification record.

    Records look like {"name": ..., "type": "dir" | "file", "children": [...],
    "content": ..., "size": ..., "mode": ...}. Raises ValueError for any
    record that does not have this shape.
    """
    if not isinstance(data, dict):
        raise ValueError(f"tree record must be an object, got {type(data).__name__}")

    node_type = data.get('type', 'file')
    name = data.get('name', '')
    if not isinstance(name, str):
        raise ValueError(f"node name must be a string, got {name!r}")
    mode = data.get('mode', Mode.DIR_DEFAULT if node_type == 'dir' else Mode.FILE_DEFAULT)
    _check_int(mode, 'mode', name)
    mtime = data.get('mtime')
    if mtime is not None and (isinstance(mtime, bool) or not isinstance(mtime, (int, float))):
        raise ValueError(f"mtime of {name!r} must be a number, got {mtime!r}")

    if node_type == 'dir':
        children = data.get('children', [])
        if not isinstance(children, list):
            raise ValueError(f"children of {name!r} must be a list")
        return DirNode(name, [node_from_dict(child) for child in children],
                       mode=mode, mtime=mtime)
    elif node_type == 'file':
        content = data.get('content')
        if content is not None and not isinstance(content, str):
            raise ValueError(f"content of {name!r} must be a string")
        size = data.get('size')
        if size is not None:
            _check_int(size, 'size', name)
        return FileNode(name, content=content, size=size, mode=mode, mtime=mtime)
    else:
        raise ValueError(f"unknown node type {node_type!r} for {name!r}")


def _check_int(value: Any, what: str, name: str):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} of {name!r} must be an integer, got {value!r}")


class VirtualFileSystem:
    """
    Read-only virtual filesystem.

    Wraps an immutable DirNode tree and offers path-based queries. No
    operation here modifies the tree, so one instance can be shared by
    any number of sessions.
    """

    def __init__(self, root: DirNode):
        if not isinstance(root, DirNode):
            raise ValueError("filesystem root must be a directory")
        if root.name:
            raise ValueError("filesystem root must have an empty name")
        self.root = root

    # Queries

    def lookup(self, path: str) -> Optional[Node]:
        """Return the node at path, or None."""
        node = lookup(self.root, path)
        if node is None:
            logger.debug("lookup miss: %s", path)
        return node

    def is_dir(self, path: str) -> bool:
        """Check if a path is a directory."""
        return is_directory(self.root, path)

    def stat(self, path: str) -> Optional[dict]:
        """Get synthesized file/directory statistics."""
        node = self.lookup(path)
        if node is None:
            return None

        return {
            'type': 'dir' if node.is_dir() else 'file',
            'mode': node.mode,
            'permissions': node.permissions,
            'mtime': node.mtime,
            'mtime_display': format_mtime(node.mtime),
            'size': node.size,
        }

    # Serialization

    def to_dict(self) -> dict:
        """Export the tree as a nested specification record."""
        return self.root.to_dict()

    def to_json(self) -> str:
        """Serialize the tree specification to JSON."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VirtualFileSystem':
        """Build a filesystem from a nested specification record."""
        root = node_from_dict(data)
        if not isinstance(root, DirNode):
            raise ValueError("filesystem root must be a directory")
        return cls(root)

    @classmethod
    def from_json(cls, json_str: Union[str, bytes]) -> 'VirtualFileSystem':
        """Deserialize a filesystem from a JSON tree specification."""
        return cls.from_dict(json.loads(json_str))


def format_mtime(mtime: float) -> str:
    """Render a modification time the way `ls -l` shows recent files."""
    return datetime.fromtimestamp(mtime, tz=timezone.utc).strftime('%b %d %H:%M')
