"""
# BAML: utilities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Common utility functions.
"""

import re
from typing import Callable, Iterable, Iterator, Optional

from baml.constants import ESCAPE_CHARACTER


def is_backslash(character: str) -> bool:
    return character == ESCAPE_CHARACTER


def scan_escapes(characters: Iterable[str],
                 is_escape_indicator: Callable[[str], bool] = is_backslash,
                 ) -> Iterator[tuple[bool, str]]:
    """
    Pair each character with whether it was escaped.

    An escape indicator is consumed together with the character following it,
    which is yielded as `(True, «character»)`.
    An escape indicator at the very end is yielded as an ordinary character.
    """
    iterator = iter(characters)
    for character in iterator:
        if is_escape_indicator(character):
            escaped_character = next(iterator, None)
            if escaped_character is None:
                yield False, character
            else:
                yield True, escaped_character
        else:
            yield False, character


def enumerate_escapes(string: str) -> Iterator[tuple[int, bool, str]]:
    """
    Like `scan_escapes`, but also yield the index at which each (possibly escaped) character starts.
    """
    index = 0
    length = len(string)
    while index < length:
        character = string[index]
        if is_backslash(character) and index + 1 < length:
            yield index, True, string[index + 1]
            index += 2
        else:
            yield index, False, character
            index += 1


def restore_escapes(scanned_characters: Iterable[tuple[bool, str]]) -> str:
    return ''.join(
        f'{ESCAPE_CHARACTER}{character}' if was_escaped else character
        for was_escaped, character in scanned_characters
    )


def unescape(string: str) -> str:
    return ''.join(character for _, character in scan_escapes(string))


def remove_escaped_spaces(string: str) -> str:
    return ''.join(
        f'{ESCAPE_CHARACTER}{character}' if was_escaped else character
        for was_escaped, character in scan_escapes(string)
        if not (was_escaped and character == ' ')
    )


def split_items(items: Iterable, is_separator: Callable[[object], bool],
                max_splits: Optional[int] = None, keep_separator: bool = False) -> list[list]:
    """
    Split a sequence of items at every separator item.

    After `max_splits` cuts, the remainder is appended unsplit.
    If `keep_separator` is set, each separator is emitted as a singleton sub-sequence
    immediately after the segment preceding it.
    An empty sequence gives no sub-sequences,
    and a separator at the very end does not give a trailing empty segment.
    """
    segments: list[list] = []
    segment: list = []
    split_count = 0

    for item in items:
        if (max_splits is None or split_count < max_splits) and is_separator(item):
            segments.append(segment)
            if keep_separator:
                segments.append([item])
            segment = []
            split_count += 1
        else:
            segment.append(item)

    if len(segment) > 0:
        segments.append(segment)

    return segments


def split_not_escaped(string: str, separator: str,
                      max_splits: Optional[int] = None, keep_separator: bool = False) -> list[str]:
    """
    Split a string at unescaped occurrences of a separator character.

    Escapes are kept in the resulting pieces.
    """
    segments = split_items(
        scan_escapes(string),
        lambda scanned_character: scanned_character == (False, separator),
        max_splits=max_splits,
        keep_separator=keep_separator,
    )

    return [restore_escapes(segment) for segment in segments]


def partition_not_escaped(string: str, is_separator: Callable[[str], bool]) -> tuple[str, str, str]:
    """
    Cut a string at the first unescaped character satisfying `is_separator`.

    Returns («before», «separator», «after»), where «separator» is empty if there is no such character.
    """
    for index, was_escaped, character in enumerate_escapes(string):
        if not was_escaped and is_separator(character):
            return string[:index], character, string[index + 1:]

    return string, '', ''


def rpartition_not_escaped(string: str, separator: str) -> tuple[str, str, str]:
    """
    Cut a string at the last unescaped occurrence of a separator character.

    Returns («before», «separator», «after»), where «separator» is empty (and «after» is the whole string)
    if there is no such occurrence.
    """
    last_index = None
    for index, was_escaped, character in enumerate_escapes(string):
        if not was_escaped and character == separator:
            last_index = index

    if last_index is None:
        return '', '', string

    return string[:last_index], separator, string[last_index + 1:]


def escape_attribute_value_html(value: str) -> str:
    """
    Escape an attribute value that will be delimited by double quotes.

    For speed, we make the following assumptions:
    - Entity names are any run of up to 31 letters. At the time of writing (2022-04-18), the longest entity name is
      `CounterClockwiseContourIntegral` according to <https://html.spec.whatwg.org/entities.json>.
      Actually checking is slow for very little return.
    - Decimal code points are any run of up to 7 digits.
    - Hexadecimal code points are any run of up to 6 digits.
    """
    value = re.sub(
        pattern='''
            [&]
            (?!
                (?:
                    [a-zA-Z]{1,31}
                        |
                    [#] (?: [0-9]{1,7} | [xX] [0-9a-fA-F]{1,6} )
                )
                [;]
            )
        ''',
        repl='&amp;',
        string=value,
        flags=re.VERBOSE,
    )
    value = re.sub(pattern='<', repl='&lt;', string=value)
    value = re.sub(pattern='>', repl='&gt;', string=value)
    value = re.sub(pattern='"', repl='&quot;', string=value)

    return value


def is_valid_attribute_name_html(name: str) -> bool:
    """
    Whether a string may be written as an HTML attribute name.

    Names must be non-empty and free of whitespace, control characters, quotes, `<`, `>`, `/` and `=`.
    """
    return re.fullmatch(pattern=r'''[^\s\x00-\x1f\x7f"'<>/=]+''', string=name) is not None
