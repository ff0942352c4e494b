"""
# BAML: test_macros.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `macros.py`.
"""

import unittest

from baml.exceptions import MacroException
from baml.macros import (
    evaluate_alt,
    evaluate_setext,
    find_block_end,
    find_closing_delimiter,
    matches_pattern,
    parse_arguments,
    split_alternatives,
    split_shell_words,
)


class TestMacros(unittest.TestCase):
    def test_find_closing_delimiter(self):
        self.assertEqual(find_closing_delimiter('(a)', 0, '(', ')'), 2)
        self.assertEqual(find_closing_delimiter('x(a(b)c)d', 1, '(', ')'), 7)
        self.assertEqual(find_closing_delimiter('(a\\)b)', 0, '(', ')'), 5)
        self.assertEqual(find_closing_delimiter('(a', 0, '(', ')'), None)
        self.assertEqual(find_closing_delimiter('a)', 0, '(', ')'), None)

    def test_parse_arguments(self):
        self.assertEqual(parse_arguments('%run(echo hi) rest', 4), ('echo hi', 13))
        self.assertEqual(parse_arguments('%run(a(b)c)', 4), ('a(b)c', 11))
        self.assertEqual(parse_arguments('%run echo', 4), None)
        self.assertEqual(parse_arguments('%run(echo', 4), None)
        self.assertEqual(parse_arguments('%run', 4), None)

    def test_find_block_end(self):
        self.assertEqual(find_block_end('body%)', 0), 4)
        self.assertEqual(find_block_end('a%(b%)c%)', 0), 7)
        self.assertEqual(find_block_end('no end', 0), None)

    def test_split_shell_words(self):
        self.assertEqual(split_shell_words(''), [])
        self.assertEqual(split_shell_words('  echo   a b  '), ['echo', 'a', 'b'])
        self.assertEqual(split_shell_words('echo a\\ b'), ['echo', 'a b'])
        self.assertEqual(split_shell_words('echo "a  b" c'), ['echo', 'a  b', 'c'])
        self.assertEqual(split_shell_words('echo x"a b"y'), ['echo', 'xa by'])
        self.assertEqual(split_shell_words('echo "a\\nb"'), ['echo', 'a\\nb'])
        self.assertEqual(split_shell_words('echo "a\\"b"'), ['echo', 'a\\"b'])
        self.assertEqual(split_shell_words('echo ""'), ['echo', ''])

    def test_split_alternatives(self):
        self.assertEqual(split_alternatives(''), [''])
        self.assertEqual(split_alternatives('a:b'), ['a', 'b'])
        self.assertEqual(split_alternatives(':"":foo'), ['', '', 'foo'])
        self.assertEqual(split_alternatives('"a:b":c'), ['a:b', 'c'])
        self.assertEqual(split_alternatives('a\\:b:c'), ['a:b', 'c'])

    def test_matches_pattern(self):
        self.assertTrue(matches_pattern('index.html', 'index.html'))
        self.assertTrue(matches_pattern('post.baml', '*.baml'))
        self.assertTrue(matches_pattern('post.baml', 'p*'))
        self.assertTrue(matches_pattern('post.baml', '*'))
        self.assertFalse(matches_pattern('post.baml.bak', '*.baml'))
        self.assertFalse(matches_pattern('xpost.baml', 'post*'))
        self.assertFalse(matches_pattern('postxbaml', 'post.baml'))

    def test_evaluate_setext(self):
        self.assertEqual(evaluate_setext('html:posts/a.baml'), 'posts/a.html')
        self.assertEqual(evaluate_setext('html:a'), 'a.html')
        self.assertEqual(evaluate_setext(':a.baml'), 'a')
        self.assertRaises(MacroException, evaluate_setext, 'html')
        self.assertRaises(MacroException, evaluate_setext, 'html:')

    def test_evaluate_alt(self):
        self.assertEqual(evaluate_alt(':"":foo:bar'), 'foo')
        self.assertEqual(evaluate_alt('first:second'), 'first')
        self.assertEqual(evaluate_alt('::'), '')
        self.assertEqual(evaluate_alt(''), '')


if __name__ == '__main__':
    unittest.main()
