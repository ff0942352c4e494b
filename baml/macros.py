"""
# BAML: macros.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Scanning and evaluation helpers for template macros.
"""

import os
import re
from typing import Optional

from baml.exceptions import MacroException
from baml.utilities import enumerate_escapes, restore_escapes, scan_escapes

BLOCK_OPENING_DELIMITER = '%('
BLOCK_CLOSING_DELIMITER = '%)'


def find_closing_delimiter(text: str, opening_index: int, opening_delimiter: str, closing_delimiter: str,
                           ) -> Optional[int]:
    """
    Find the index of the closing delimiter matching the opening delimiter at `opening_index`.

    Nested (unescaped) delimiter pairs are counted; escaped delimiters are ignored.
    Returns None if there is no opening delimiter at `opening_index`, or if it is never closed.
    """
    if not text.startswith(opening_delimiter, opening_index):
        return None

    depth = 0
    for index, was_escaped, character in enumerate_escapes(text[opening_index:]):
        if was_escaped:
            continue

        if character == opening_delimiter:
            depth += 1
        elif character == closing_delimiter:
            depth -= 1
            if depth == 0:
                return opening_index + index

    return None


def parse_arguments(text: str, opening_index: int) -> Optional[tuple[str, int]]:
    """
    Parse the parenthesised arguments of a macro, `(«arguments»)`, starting at `opening_index`.

    Returns the arguments (escapes kept) and the index just past the closing parenthesis,
    or None if the arguments are missing or incomplete.
    """
    closing_index = find_closing_delimiter(text, opening_index, '(', ')')
    if closing_index is None:
        return None

    return text[opening_index + 1:closing_index], closing_index + 1


def find_block_end(text: str, body_start: int) -> Optional[int]:
    """
    Find the index of the `%)` ending a block body which starts at `body_start`.

    Nested `%(` and `%)` pairs are counted.
    """
    depth = 0
    index = body_start
    while index < len(text):
        if text.startswith(BLOCK_OPENING_DELIMITER, index):
            depth += 1
            index += len(BLOCK_OPENING_DELIMITER)
        elif text.startswith(BLOCK_CLOSING_DELIMITER, index):
            if depth == 0:
                return index
            depth -= 1
            index += len(BLOCK_CLOSING_DELIMITER)
        else:
            index += 1

    return None


def split_shell_words(text: str) -> list[str]:
    """
    Split text into words, shell-style.

    Words are separated by unescaped whitespace.
    Outside of double quotes, a backslash escapes the following character.
    Inside of double quotes, whitespace is kept, and so are backslashes
    (though `\\"` does not end the quoted segment).
    """
    words: list[str] = []
    word: Optional[str] = None

    scanned_characters = scan_escapes(text)
    for was_escaped, character in scanned_characters:
        if not was_escaped and character == '"':
            quoted_characters = []
            for quoted_was_escaped, quoted_character in scanned_characters:
                if not quoted_was_escaped and quoted_character == '"':
                    break
                quoted_characters.append((quoted_was_escaped, quoted_character))

            word = (word or '') + restore_escapes(quoted_characters)

        elif not was_escaped and character.isspace():
            if word is not None:
                words.append(word)
                word = None

        else:
            word = (word or '') + character

    if word is not None:
        words.append(word)

    return words


def split_alternatives(text: str) -> list[str]:
    """
    Split `%alt` arguments at unescaped colons outside of double quotes.

    An alternative wholly enclosed in double quotes stands for the quoted content,
    so that `""` is an empty alternative.
    """
    alternatives: list[list[tuple[bool, str]]] = [[]]
    in_quotes = False

    for was_escaped, character in scan_escapes(text):
        if not was_escaped and character == '"':
            in_quotes = not in_quotes
        elif not was_escaped and character == ':' and not in_quotes:
            alternatives.append([])
            continue

        alternatives[-1].append((was_escaped, character))

    unquoted_alternatives: list[str] = []
    for alternative in alternatives:
        if len(alternative) >= 2 and alternative[0] == (False, '"') and alternative[-1] == (False, '"'):
            alternative = alternative[1:-1]
        unquoted_alternatives.append(''.join(character for _, character in alternative))

    return unquoted_alternatives


def compile_name_pattern(pattern: str) -> re.Pattern:
    """
    Compile a file name pattern, in which `*` matches any run of characters.

    Patterns are anchored at both ends.
    """
    return re.compile(
        pattern='.*'.join(re.escape(literal_part) for literal_part in pattern.split('*')),
        flags=re.DOTALL,
    )


def matches_pattern(name: str, pattern: str) -> bool:
    return compile_name_pattern(pattern).fullmatch(name) is not None


def evaluate_setext(arguments: str) -> str:
    """
    Evaluate `%setext(«extension»:«path»)`, replacing the extension of «path».

    An empty «extension» removes the extension.
    """
    extension, colon, path = arguments.partition(':')
    if colon == '':
        raise MacroException('incomplete arguments (expected `«extension»:«path»`)')
    if path == '':
        raise MacroException('empty path')

    root, _ = os.path.splitext(path)
    if extension == '':
        return root

    return f'{root}.{extension}'


def evaluate_alt(arguments: str) -> str:
    """
    Evaluate `%alt(«alternative»:«alternative»:[...])`, taking the first non-empty alternative.
    """
    for alternative in split_alternatives(arguments):
        if alternative != '':
            return alternative

    return ''
