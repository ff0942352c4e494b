"""
# BAML: preprocessing.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Line-based passes applied before parsing:
- deletion of escaped line feeds (line continuation);
- extraction of metadata lines `!«key» «value»`;
- removal of comments `# [...]`;
- desugaring of single-line command calls `.«cmd» «args»`.
"""

import re
from typing import Optional

from baml.constants import (
    COMMAND_CLOSING_DELIMITER,
    COMMAND_OPENING_DELIMITER,
    COMMENT_INDICATOR,
    ESCAPE_CHARACTER,
    METADATA_INDICATOR,
    SINGLE_LINE_CALL_INDICATOR,
)
from baml.exceptions import MalformedMetadataLineException


def compute_metadata_line_match(line: str) -> Optional[re.Match]:
    return re.fullmatch(
        pattern=rf'''
            {re.escape(METADATA_INDICATOR)} [^\S\n]*
            (?P<key> [\S]+ )
            [^\S\n]+
            (?P<value> [\S] [^\n]* )
        ''',
        string=line,
        flags=re.VERBOSE,
    )


def is_escaped_at_end(string: str) -> bool:
    """
    Whether a character appended to `string` would be escaped (odd run of trailing backslashes).
    """
    trailing_escape_count = len(string) - len(string.rstrip(ESCAPE_CHARACTER))
    return trailing_escape_count % 2 == 1


def strip_comment(line: str) -> str:
    """
    Truncate a line at its first unescaped comment indicator.

    Escaped comment indicators (`\\#`) are kept as they are.
    """
    segments = line.split(COMMENT_INDICATOR)

    kept_segments = [segments[0]]
    for segment in segments[1:]:
        if not is_escaped_at_end(kept_segments[-1]):
            break
        kept_segments.append(segment)

    return COMMENT_INDICATOR.join(kept_segments)


def preprocess(text: str) -> tuple[dict[str, str], str]:
    """
    Extract metadata and remove comments and escaped line feeds.

    Returns the metadata and the remaining body.
    Lines emptied by the removal of a comment are dropped altogether.
    """
    metadata: dict[str, str] = {}
    body_lines: list[str] = []

    text = text.replace(f'{ESCAPE_CHARACTER}\n', '')

    for line_number, line in enumerate(text.split('\n'), start=1):
        if line.startswith(METADATA_INDICATOR):
            metadata_line_match = compute_metadata_line_match(line)
            if metadata_line_match is None:
                raise MalformedMetadataLineException(line_number, line)

            metadata[metadata_line_match.group('key')] = metadata_line_match.group('value')

        elif COMMENT_INDICATOR in line:
            stripped_line = strip_comment(line)
            if stripped_line != '':
                body_lines.append(stripped_line)

        else:
            body_lines.append(line)

    return metadata, '\n'.join(body_lines)


def desugar_single_line_calls(text: str) -> str:
    """
    Rewrite each line `.«cmd» «args»` as `[«cmd» «args»]`.
    """
    return '\n'.join(
        f'{COMMAND_OPENING_DELIMITER}{line[len(SINGLE_LINE_CALL_INDICATOR):]}{COMMAND_CLOSING_DELIMITER}'
        if line.startswith(SINGLE_LINE_CALL_INDICATOR) else line
        for line in text.split('\n')
    )
