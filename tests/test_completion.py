#!/usr/bin/env python3
"""
Tests for path completion.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from treeshell.completion import MAX_SUGGESTIONS, PathCompleter
from treeshell.sample_tree import HOME, build_sample_filesystem

DOCUMENTS = '/home/user/Documents'
THESIS = '/home/user/Documents/Thesis'


@pytest.fixture(scope='module')
def completer():
    return PathCompleter(build_sample_filesystem(), HOME)


class TestPathCompletion:
    """Test completion of path arguments."""

    def test_unique_prefix(self, completer):
        assert completer.complete('cd Doc', HOME) == ['Documents/']

    def test_storage_order(self, completer):
        assert completer.complete('cd Do', HOME) == ['Documents/', 'Downloads/']

    def test_nested_relative(self, completer):
        assert completer.complete('cat Documents/Thesis/ch', HOME) == [
            'Documents/Thesis/chapter1.md',
            'Documents/Thesis/chapter2.md',
        ]

    def test_empty_argument_lists_directory(self, completer):
        assert completer.complete('cat ', THESIS) == ['chapter1.md', 'chapter2.md']

    def test_absolute(self, completer):
        assert completer.complete('ls /ho', DOCUMENTS) == ['/home/']
        assert completer.complete('ls /etc/n', HOME) == ['/etc/nginx/']

    def test_absolute_directory(self, completer):
        assert completer.complete('cat /etc/', HOME) == ['/etc/hosts', '/etc/passwd', '/etc/nginx/']

    def test_tilde_restored(self, completer):
        assert completer.complete('cat ~/Doc', '/') == ['~/Documents/']
        assert completer.complete('cd ~/', '/')[0] == '~/Documents/'

    def test_bare_tilde_completes_to_home(self, completer):
        assert completer.complete('cd ~', HOME) == ['~/']
        assert completer.complete('ls ~', '/etc') == ['~/']

    def test_parent_relative(self, completer):
        assert completer.complete('ls ../D', DOCUMENTS) == ['../Documents/', '../Downloads/']

    def test_hidden_entries_included(self, completer):
        assert completer.complete('cat .b', HOME) == ['.bashrc']

    def test_missing_base(self, completer):
        assert completer.complete('cat nope/x', HOME) == []
        assert completer.complete('cat README.txt/x', HOME) == []

    def test_capped(self, completer):
        suggestions = completer.complete('cat ', HOME)
        assert len(suggestions) == MAX_SUGGESTIONS
        assert suggestions[0] == 'Documents/'

    def test_last_pipeline_stage(self, completer):
        assert completer.complete('ls | grep x Doc', HOME) == ['Documents/']


class TestCompletionPosition:
    """Test where completion applies and where it does not."""

    @pytest.mark.parametrize('line', [
        '',
        'cd',
        'Doc',
        'foo Doc',
        'pwd ',
        'ls -',
        'ls -l',
        'head -n ',
        'cut -f ',
        'cut -d ',
        'grep Doc',
        'grep ',
        'cd Documents Th',
    ])
    def test_no_completion(self, completer, line):
        assert completer.complete(line, HOME) == []

    def test_after_flags(self, completer):
        assert completer.complete('ls -l Doc', HOME) == ['Documents/']
        assert completer.complete('head -n 5 Doc', HOME) == ['Documents/']
        assert completer.complete('cut -f 1 Ex', HOME) == ['Examples/']
        assert completer.complete('grep -i x Ex', HOME) == ['Examples/']

    def test_multiple_files(self, completer):
        assert completer.complete('cat chapter1.md ch', THESIS) == ['chapter1.md', 'chapter2.md']

    def test_argument_for_completion(self, completer):
        assert completer.argument_for_completion('cat ') == ''
        assert completer.argument_for_completion('wc -l ~/Ex') == '~/Ex'
        assert completer.argument_for_completion('cut -f') is None
