#!/usr/bin/env python3
"""
Tests for the POSIX path helpers.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest

from treeshell import paths

HOME = '/home/user'

SAMPLE_PATHS = [
    '', '/', '.', '..', 'a', '/a/b/c', 'a//b/', '/a/./b/../c', '../../x',
    '/home/user/../../etc', '///', 'Documents/Thesis/..', '/a/b/../../..',
]


class TestNormalize(unittest.TestCase):
    """Test path normalization."""

    def test_empty_is_root(self):
        self.assertEqual(paths.normalize(''), '/')

    def test_dot_and_dotdot(self):
        self.assertEqual(paths.normalize('/a/./b/../c'), '/a/c')
        self.assertEqual(paths.normalize('/home/user/../../etc'), '/etc')

    def test_collapses_slashes(self):
        self.assertEqual(paths.normalize('a//b/'), '/a/b')
        self.assertEqual(paths.normalize('///'), '/')

    def test_excess_parent_clamped_at_root(self):
        self.assertEqual(paths.normalize('/../..'), '/')
        self.assertEqual(paths.normalize('../../x'), '/x')

    def test_idempotent(self):
        for path in SAMPLE_PATHS:
            once = paths.normalize(path)
            self.assertEqual(paths.normalize(once), once, path)

    def test_result_shape(self):
        for path in SAMPLE_PATHS:
            result = paths.normalize(path)
            self.assertTrue(result.startswith('/'), path)
            self.assertNotIn('//', result)
            self.assertNotIn('.', result.split('/'))
            self.assertNotIn('..', result.split('/'))


class TestJoinAndExpand(unittest.TestCase):
    """Test join, home expansion and resolution."""

    def test_join(self):
        self.assertEqual(paths.join('/home/user', '../x'), '/home/x')
        self.assertEqual(paths.join('/', 'etc', 'nginx'), '/etc/nginx')

    def test_expand_home(self):
        self.assertEqual(paths.expand_home('~', HOME), HOME)
        self.assertEqual(paths.expand_home('~/Documents', HOME), '/home/user/Documents')
        self.assertEqual(paths.expand_home('~other', HOME), '~other')
        self.assertEqual(paths.expand_home('Documents', HOME), 'Documents')

    def test_resolve(self):
        self.assertEqual(paths.resolve('~/Documents', '/etc', HOME), '/home/user/Documents')
        self.assertEqual(paths.resolve('/etc/../tmp', HOME, HOME), '/tmp')
        self.assertEqual(paths.resolve('Thesis', '/home/user/Documents', HOME),
                         '/home/user/Documents/Thesis')

    def test_parent(self):
        self.assertEqual(paths.parent('/home/user'), '/home')
        self.assertEqual(paths.parent('/'), '/')

    def test_abbreviate_home(self):
        self.assertEqual(paths.abbreviate_home(HOME, HOME), '~')
        self.assertEqual(paths.abbreviate_home('/home/user/Music', HOME), '~/Music')
        self.assertEqual(paths.abbreviate_home('/home/username', HOME), '/home/username')
        self.assertEqual(paths.abbreviate_home('/etc', HOME), '/etc')


class TestRelativeTo(unittest.TestCase):
    """Test relative path computation."""

    def test_descend(self):
        self.assertEqual(paths.relative_to(HOME, '/home/user/Documents/Thesis'),
                         'Documents/Thesis')

    def test_climb(self):
        self.assertEqual(paths.relative_to('/home/user/Documents', '/etc'), '../../../etc')
        self.assertEqual(paths.relative_to('/home/user/Documents', HOME), '..')

    def test_same_path(self):
        self.assertEqual(paths.relative_to(HOME, HOME + '/'), '.')

    def test_from_root(self):
        self.assertEqual(paths.relative_to('/', '/etc'), 'etc')

    def test_round_trip(self):
        pairs = [
            ('/', '/home/user'),
            ('/home/user/Documents/Thesis', '/home/user/Projects/webapp'),
            ('/etc/nginx', '/'),
            ('/a/b', '/a/b'),
        ]
        for a, b in pairs:
            self.assertEqual(paths.normalize(paths.join(a, paths.relative_to(a, b))), b)


class TestCdHint(unittest.TestCase):
    """Test cd hints for directories and files."""

    def test_directory(self):
        hint = paths.cd_hint('/home/user/Documents/Thesis', HOME, is_dir=True)
        self.assertEqual(hint['absolute'], 'cd /home/user/Documents/Thesis')
        self.assertEqual(hint['relative'], 'cd Documents/Thesis')
        self.assertIsNone(hint['note'])

    def test_file_points_at_parent(self):
        hint = paths.cd_hint('/etc/hosts', HOME, is_dir=False)
        self.assertEqual(hint['absolute'], 'cd /etc')
        self.assertEqual(hint['relative'], 'cd ../../etc')
        self.assertEqual(hint['note'], '/etc/hosts is a file, not a directory')


if __name__ == '__main__':
    unittest.main()
