"""
# BAML: test_commands.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `commands.py`.
"""

import unittest

from baml.commands import parse_attributes, parse_command, split_arguments, take_attribute_block
from baml.containers import Contained, Free
from baml.exceptions import CommandIsNotIdentifierException, EmptyBodyException
from baml.nodes import Command, Text
from baml.parser import containerize_text


def parse_body(body: str):
    """
    Parse the body of a single command call `[«body»]`.
    """
    return parse_command(containerize_text(f'[{body}]')[0].children)


def parse_as_text(containerized_list: list) -> list:
    return [Text(containerized.content) for containerized in containerized_list]


class TestCommands(unittest.TestCase):
    def test_parse_attributes(self):
        self.assertEqual(parse_attributes(''), [])
        self.assertEqual(parse_attributes('x=1;y=2'), [('x', '1'), ('y', '2')])
        self.assertEqual(parse_attributes(' x = 1 ; y=2 '), [('x', '1'), ('y', '2')])
        self.assertEqual(parse_attributes('x=a=b'), [('x', 'a=b')])
        self.assertEqual(parse_attributes('x=;flag;y=2'), [('x', ''), ('y', '2')])
        self.assertEqual(parse_attributes('x=a\\;b'), [('x', 'a;b')])
        self.assertEqual(parse_attributes('x=1;x=2'), [('x', '1'), ('x', '2')])

    def test_take_attribute_block(self):
        self.assertEqual(
            take_attribute_block([Free('{'), Free('x=1} rest')]),
            ('x=1', [Free(' rest')]),
        )
        self.assertEqual(
            take_attribute_block([Free('{'), Free('x=1}'), Contained([Free('a')])]),
            ('x=1', [Contained([Free('a')])]),
        )
        self.assertEqual(
            take_attribute_block([Free('{'), Free('x='), Contained([Free('a')]), Free('} rest')]),
            ('x=[a]', [Free(' rest')]),
        )
        self.assertEqual(take_attribute_block([Free('{'), Free('x=1')]), ('x=1', []))
        self.assertEqual(take_attribute_block([Free('{'), Free('x=\\}1}')]), ('x=\\}1', []))

    def test_split_arguments(self):
        self.assertEqual(split_arguments([]), [])
        self.assertEqual(split_arguments([Free('a;  b; c')]), [[Free('a')], [Free('b')], [Free('c')]])
        self.assertEqual(split_arguments([Free('a\\;b')]), [[Free('a\\;b')]])
        self.assertEqual(split_arguments([Free('\\  a')]), [[Free(' a')]])
        self.assertEqual(
            split_arguments([Free('x '), Contained([Free('b')]), Free(' y; z')]),
            [[Free('x '), Contained([Free('b')]), Free(' y')], [Free('z')]],
        )
        self.assertEqual(split_arguments([Free('a;')]), [[Free('a')]])

    def test_parse_command(self):
        pending_command = parse_body('cmd')
        self.assertEqual(pending_command.backend, None)
        self.assertEqual(pending_command.name, 'cmd')
        self.assertEqual(pending_command.attributes, [])
        self.assertEqual(pending_command.argument_segments, [])

        pending_command = parse_body('  be@cmd{x=1} a; b')
        self.assertEqual(pending_command.backend, 'be')
        self.assertEqual(pending_command.name, 'cmd')
        self.assertEqual(pending_command.attributes, [('x', '1')])
        self.assertEqual(pending_command.argument_segments, [[Free('a')], [Free('b')]])

        pending_command = parse_body('a@b@cmd x')
        self.assertEqual(pending_command.backend, 'a@b')
        self.assertEqual(pending_command.name, 'cmd')

        pending_command = parse_body('c\\@d x')
        self.assertEqual(pending_command.backend, None)
        self.assertEqual(pending_command.name, 'c@d')

    def test_parse_command_detached_braces_are_arguments(self):
        pending_command = parse_body('p {x=1}')
        self.assertEqual(pending_command.attributes, [])
        self.assertEqual(pending_command.argument_segments, [[Free('{x=1}')]])

        pending_command = parse_body('p a{b}')
        self.assertEqual(pending_command.attributes, [])
        self.assertEqual(pending_command.argument_segments, [[Free('a{b}')]])

    def test_parse_command_unclosed_attribute_block(self):
        pending_command = parse_body('p{x=1; y=2 text')
        self.assertEqual(pending_command.attributes, [('x', '1'), ('y', '2 text')])
        self.assertEqual(pending_command.argument_segments, [])

    def test_parse_command_errors(self):
        self.assertRaises(EmptyBodyException, parse_body, '')
        self.assertRaises(EmptyBodyException, parse_body, '  \n ')
        self.assertRaises(CommandIsNotIdentifierException, parse_body, '[x] y')
        self.assertRaises(CommandIsNotIdentifierException, parse_body, ' [x]')
        self.assertRaises(CommandIsNotIdentifierException, parse_body, 'be@ x')
        self.assertRaises(CommandIsNotIdentifierException, parse_body, '{x=1} y')

    def test_build(self):
        pending_command = parse_body('p{x=1} a;b\\;c')
        self.assertEqual(
            pending_command.build(parse_as_text),
            Command(None, 'p', [('x', '1')], [Text('a'), Text('b\\;c')]),
        )


if __name__ == '__main__':
    unittest.main()
