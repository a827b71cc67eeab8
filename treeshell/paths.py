#!/usr/bin/env python3
"""
POSIX path helpers for the treeshell virtual filesystem.

All functions here are pure and operate on plain strings. Every path they
return (except expand_home and relative_to) is absolute, rooted at '/',
and free of empty, '.' and '..' segments.
"""

from typing import Dict, Optional


def normalize(path: str) -> str:
    """Normalize a path, resolving '.' and '..' and collapsing slashes.

    Excess '..' segments are clamped at the root. Empty input gives '/'.
    """
    if not path:
        return '/'

    stack = []
    for part in path.split('/'):
        if part == '' or part == '.':
            continue
        elif part == '..':
            if stack:
                stack.pop()
        else:
            stack.append(part)

    return '/' + '/'.join(stack)


def join(*segments: str) -> str:
    """Join segments with '/' and normalize the result."""
    return normalize('/'.join(segments))


def expand_home(path: str, home: str) -> str:
    """Replace a leading '~' or '~/' with the home directory."""
    if path == '~':
        return home
    if path.startswith('~/'):
        return home + path[1:]
    return path


def segments(path: str) -> list:
    """Return the segment list of a normalized path ('/' has none)."""
    return [part for part in normalize(path).split('/') if part]


def relative_to(start: str, target: str) -> str:
    """Compute the shortest relative path from start to target.

    Similar to `realpath --relative-to`: walks up with '..' past the
    longest common prefix and then down into the target.
    """
    start_parts = segments(start)
    target_parts = segments(target)
    if start_parts == target_parts:
        return '.'

    common = 0
    while (common < len(start_parts) and common < len(target_parts)
           and start_parts[common] == target_parts[common]):
        common += 1

    parts = ['..'] * (len(start_parts) - common) + target_parts[common:]
    return '/'.join(parts) if parts else '.'


def resolve(raw: str, cwd: str, home: str) -> str:
    """Resolve a user-typed path against the current directory."""
    expanded = expand_home(raw, home) if raw.startswith('~') else raw
    if expanded.startswith('/'):
        return normalize(expanded)
    return join(cwd, expanded)


def parent(path: str) -> str:
    """Return the parent directory of a path ('/' is its own parent)."""
    return normalize(normalize(path) + '/..')


def abbreviate_home(path: str, home: str) -> str:
    """Display form of a path with the home prefix shown as '~'."""
    if path == home:
        return '~'
    if path.startswith(home.rstrip('/') + '/'):
        return '~' + path[len(home.rstrip('/')):]
    return path


def cd_hint(target: str, cwd: str, is_dir: bool) -> Dict[str, Optional[str]]:
    """Describe how to reach a target with cd, absolutely and relatively.

    For a file, the hints point at its containing directory instead.
    """
    target = normalize(target)
    if is_dir:
        return {
            'absolute': f"cd {target}",
            'relative': f"cd {relative_to(cwd, target)}",
            'note': None,
        }

    directory = parent(target)
    return {
        'absolute': f"cd {directory}",
        'relative': f"cd {relative_to(cwd, directory)}",
        'note': f"{target} is a file, not a directory",
    }
