"""
# BAML: parser.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Parsing of BAML documents.

A document is parsed in four steps:
1. `preprocess` extracts metadata and removes comments and escaped line feeds;
2. `desugar_single_line_calls` turns `.«cmd» «args»` lines into `[«cmd» «args»]`;
3. `containerize_text` groups the text by (unescaped) square brackets;
4. `parse_node_list` turns free runs into Text nodes and contained runs into command calls,
   recursing into command arguments by handing itself to `PendingCommand.build`.
"""

import os

from baml.commands import parse_command
from baml.constants import COMMAND_CLOSING_DELIMITER, COMMAND_OPENING_DELIMITER, METADATA_VARIABLE_PREFIX
from baml.containers import Containerized, Free, containerize, map_free
from baml.exceptions import MalformedMetadataLineException
from baml.nodes import CommandCall, Document, Node, Text
from baml.preprocessing import desugar_single_line_calls, preprocess
from baml.utilities import restore_escapes, scan_escapes, unescape


def containerize_text(text: str) -> list['Containerized']:
    """
    Containerize text by unescaped square brackets.

    Free runs are strings in which escaped characters are written back as `\\«character»`.
    """
    containerized_list = containerize(
        scan_escapes(text),
        is_open=lambda scanned_character: scanned_character == (False, COMMAND_OPENING_DELIMITER),
        is_close=lambda scanned_character: scanned_character == (False, COMMAND_CLOSING_DELIMITER),
    )

    return [map_free(containerized, restore_escapes) for containerized in containerized_list]


def parse_node_list(containerized_list: list['Containerized']) -> list['Node']:
    nodes: list['Node'] = []

    for containerized in containerized_list:
        if isinstance(containerized, Free):
            text = unescape(containerized.content)
            if text != '':
                nodes.append(Text(text))
        else:
            pending_command = parse_command(containerized.children)
            nodes.append(CommandCall(pending_command.build(parse_node_list)))

    return nodes


def parse(text: str) -> 'Document':
    """
    Parse a BAML document.

    Raises a ParseException (subclass) on structural errors.
    """
    metadata, body = preprocess(text)
    desugared_body = desugar_single_line_calls(body)
    nodes = parse_node_list(containerize_text(desugared_body))

    return Document(metadata, nodes)


def get_metadata(text: str) -> dict[str, str]:
    metadata, _ = preprocess(text)
    return metadata


def read_file_variables(path: str) -> dict[str, str]:
    """
    Read the metadata of the BAML file at `path` as template variables, with keys prefixed `!`.

    A path which is not a file, a file which is not UTF-8, or a file with a malformed metadata line, has no variables.
    An OSError from reading the file is propagated.
    """
    if not os.path.isfile(path):
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as baml_file:
            text = baml_file.read()
    except UnicodeDecodeError:
        return {}

    try:
        metadata = get_metadata(text)
    except MalformedMetadataLineException:
        return {}

    return {f'{METADATA_VARIABLE_PREFIX}{key}': value for key, value in metadata.items()}
