#!/usr/bin/env python3
"""
Tests for stage parsing and the shared flag scanner.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest

from treeshell.command_parser import (
    CommandParser, UsageError, is_flag, scan_flags, split_last_stage,
)
from treeshell.errors import ErrorKind


class TestCommandParser(unittest.TestCase):
    """Test the command parser."""

    def setUp(self):
        self.parser = CommandParser()

    def test_split_pipeline_drops_empty_stages(self):
        pipeline = self.parser.split_pipeline('ls |  | wc -l ')
        self.assertEqual(pipeline.stages, ['ls', 'wc -l'])

    def test_parse_empty_stage(self):
        self.assertIsNone(self.parser.parse_stage('   '))

    def test_clustered_switches(self):
        cmd = self.parser.parse_stage('ls -la ~')
        self.assertEqual(cmd.name, 'ls')
        self.assertEqual(cmd.flags, {'all': True, 'long': True})
        self.assertEqual(cmd.args, ['~'])
        self.assertEqual(cmd.raw_args, ['-la', '~'])

    def test_separate_switches(self):
        cmd = self.parser.parse_stage('wc -l -w file')
        self.assertEqual(cmd.flags, {'lines': True, 'words': True})
        self.assertEqual(cmd.args, ['file'])

    def test_value_option_forms(self):
        for stage in ('head -n 5 f', 'head -n5 f', 'head -5 f'):
            cmd = self.parser.parse_stage(stage)
            self.assertEqual(cmd.flags, {'lines': '5'}, stage)
            self.assertEqual(cmd.args, ['f'], stage)

    def test_value_kept_verbatim(self):
        cmd = self.parser.parse_stage('tail -n +0 f')
        self.assertEqual(cmd.flags, {'lines': '+0'})

    def test_cut_options(self):
        cmd = self.parser.parse_stage('cut -f1,2 -d , data.csv')
        self.assertEqual(cmd.flags, {'fields': '1,2', 'delimiter': ','})
        self.assertEqual(cmd.args, ['data.csv'])

    def test_attached_values(self):
        cmd = self.parser.parse_stage('cut -f2 -d: f')
        self.assertEqual(cmd.flags, {'fields': '2', 'delimiter': ':'})

    def test_flags_stop_at_first_positional(self):
        cmd = self.parser.parse_stage('grep pattern -i file')
        self.assertEqual(cmd.flags, {})
        self.assertEqual(cmd.args, ['pattern', '-i', 'file'])

    def test_double_dash(self):
        cmd = self.parser.parse_stage('cat -- -notes')
        self.assertEqual(cmd.args, ['-notes'])

    def test_lone_dash_is_positional(self):
        cmd = self.parser.parse_stage('cd -')
        self.assertEqual(cmd.args, ['-'])

    def test_unknown_option(self):
        with self.assertRaises(UsageError) as ctx:
            self.parser.parse_stage('ls -x')
        self.assertEqual(ctx.exception.error.kind, ErrorKind.INVALID_ARGUMENT)
        self.assertEqual(ctx.exception.error.message, "ls: invalid option -- 'x'")

    def test_missing_option_value(self):
        with self.assertRaises(UsageError) as ctx:
            self.parser.parse_stage('head -n')
        self.assertEqual(ctx.exception.error.message,
                         "head: option requires an argument -- 'n'")

    def test_unknown_command_not_scanned(self):
        cmd = self.parser.parse_stage('sort -r file')
        self.assertEqual(cmd.name, 'sort')
        self.assertEqual(cmd.args, ['-r', 'file'])
        self.assertEqual(cmd.flags, {})


class TestScanner(unittest.TestCase):
    """Test the lenient scanner used for completion."""

    def test_pending_option(self):
        result = scan_flags('cut', ['-f'], strict=False)
        self.assertEqual(result.pending_option, 'fields')

    def test_unknown_letters_ignored(self):
        result = scan_flags('ls', ['-lz', 'Doc'], strict=False)
        self.assertEqual(result.flags, {'long': True})
        self.assertEqual(result.positionals, ['Doc'])

    def test_is_flag(self):
        self.assertTrue(is_flag('-l'))
        self.assertFalse(is_flag('-'))
        self.assertFalse(is_flag('file'))

    def test_split_last_stage(self):
        self.assertEqual(split_last_stage('ls | cat Doc'), (['cat', 'Doc'], False))
        self.assertEqual(split_last_stage('cat '), (['cat'], True))
        self.assertEqual(split_last_stage(''), ([], False))


if __name__ == '__main__':
    unittest.main()
