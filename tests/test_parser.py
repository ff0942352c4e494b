"""
# BAML: test_parser.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `parser.py`.
"""

import os
import tempfile
import unittest

from baml.containers import Contained, Free
from baml.exceptions import (
    CommandIsNotIdentifierException,
    EmptyBodyException,
    MalformedMetadataLineException,
    UnmatchedCloseDelimiterException,
    UnmatchedOpenDelimiterException,
)
from baml.nodes import Command, CommandCall, Document, Text
from baml.parser import containerize_text, get_metadata, parse, read_file_variables


class TestParser(unittest.TestCase):
    def test_containerize_text(self):
        self.assertEqual(containerize_text('a[b]c'), [Free('a'), Contained([Free('b')]), Free('c')])
        self.assertEqual(containerize_text('a\\[b\\]c'), [Free('a\\[b\\]c')])
        self.assertEqual(containerize_text('[\\]]'), [Contained([Free('\\]')])])

    def test_parse_text(self):
        self.assertEqual(parse(''), Document({}, []))
        self.assertEqual(parse('Hello'), Document({}, [Text('Hello')]))
        self.assertEqual(parse('a \\[b\\] c'), Document({}, [Text('a [b] c')]))
        self.assertEqual(parse('a \\\\ b'), Document({}, [Text('a \\ b')]))

    def test_parse_command_call(self):
        self.assertEqual(
            parse('[cmd]'),
            Document({}, [CommandCall(Command(None, 'cmd', [], []))]),
        )
        self.assertEqual(
            parse('[cmd a;b;c]'),
            Document({}, [CommandCall(Command(None, 'cmd', [], [Text('a'), Text('b'), Text('c')]))]),
        )
        self.assertEqual(
            parse('[cmd{x=1;y=2} a]'),
            Document({}, [CommandCall(Command(None, 'cmd', [('x', '1'), ('y', '2')], [Text('a')]))]),
        )
        self.assertEqual(
            parse('[be@cmd a]'),
            Document({}, [CommandCall(Command('be', 'cmd', [], [Text('a')]))]),
        )
        self.assertEqual(
            parse('[@cmd a]'),
            Document({}, [CommandCall(Command('', 'cmd', [], [Text('a')]))]),
        )

    def test_parse_nested_command_calls(self):
        self.assertEqual(
            parse('x [p see [a{href=/} here]!] y'),
            Document({}, [
                Text('x '),
                CommandCall(Command(None, 'p', [], [
                    Text('see '),
                    CommandCall(Command(None, 'a', [('href', '/')], [Text('here')])),
                    Text('!'),
                ])),
                Text(' y'),
            ]),
        )

    def test_parse_escaped_separators_in_arguments(self):
        self.assertEqual(
            parse('[p a\\;b; \\  c]'),
            Document({}, [CommandCall(Command(None, 'p', [], [Text('a;b'), Text(' c')]))]),
        )

    def test_parse_metadata_and_comments(self):
        self.assertEqual(
            parse('! title My Page\nHello'),
            Document({'title': 'My Page'}, [Text('Hello')]),
        )
        self.assertEqual(parse('a # comment\nb'), Document({}, [Text('a \nb')]))
        self.assertEqual(parse('a \\# still text\nb'), Document({}, [Text('a # still text\nb')]))

    def test_parse_single_line_call(self):
        self.assertEqual(
            parse('.h1 Title\nbody'),
            Document({}, [CommandCall(Command(None, 'h1', [], [Text('Title')])), Text('\nbody')]),
        )

    def test_parse_errors(self):
        self.assertRaises(UnmatchedCloseDelimiterException, parse, 'a]')
        self.assertRaises(UnmatchedCloseDelimiterException, parse, '[a]]')
        self.assertRaises(UnmatchedOpenDelimiterException, parse, '[a')
        self.assertRaises(UnmatchedOpenDelimiterException, parse, '[a [b]')
        self.assertRaises(EmptyBodyException, parse, 'x [ ] y')
        self.assertRaises(CommandIsNotIdentifierException, parse, '[[a] b]')
        self.assertRaises(MalformedMetadataLineException, parse, '!novalue')

    def test_get_metadata(self):
        self.assertEqual(get_metadata('!a 1\n!b 2 3\nbody'), {'a': '1', 'b': '2 3'})
        self.assertEqual(get_metadata('body'), {})
        self.assertEqual(get_metadata('[unclosed'), {})

    def test_read_file_variables(self):
        with tempfile.TemporaryDirectory() as directory:
            baml_file_name = os.path.join(directory, 'post.baml')
            with open(baml_file_name, 'w', encoding='utf-8') as baml_file:
                baml_file.write('!title First post\n!date 2020-01-01\nHello')

            malformed_file_name = os.path.join(directory, 'malformed.baml')
            with open(malformed_file_name, 'w', encoding='utf-8') as malformed_file:
                malformed_file.write('!title\nHello')

            self.assertEqual(
                read_file_variables(baml_file_name),
                {'!title': 'First post', '!date': '2020-01-01'},
            )
            binary_file_name = os.path.join(directory, 'logo.png')
            with open(binary_file_name, 'wb') as binary_file:
                binary_file.write(b'\x89PNG\r\n\x1a\n\xff\xfe')

            self.assertEqual(read_file_variables(malformed_file_name), {})
            self.assertEqual(read_file_variables(binary_file_name), {})
            self.assertEqual(read_file_variables(directory), {})
            self.assertEqual(read_file_variables(os.path.join(directory, 'missing.baml')), {})


if __name__ == '__main__':
    unittest.main()
