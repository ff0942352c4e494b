"""
# BAML: commands.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Parsing of a single command call.

The body of a command call (everything between `[` and `]`) arrives containerized,
with free runs being strings in which escaped characters are still written as `\\«character»`.
It is parsed as
````
«backend»@«name»{«key»=«value»; [...]} «argument»; «argument»; [...]
````
where `«backend»@` and `{[...]}` are optional.

Parsing happens in two phases: `parse_command` parses the header and splits the arguments,
returning a PendingCommand; `PendingCommand.build` then parses each argument
with the node-list parsing function it is given.
"""

from typing import Callable, Optional

from baml.constants import (
    ARGUMENT_SEPARATOR,
    ATTRIBUTES_CLOSING_DELIMITER,
    ATTRIBUTES_OPENING_DELIMITER,
    BACKEND_SEPARATOR,
    COMMAND_CLOSING_DELIMITER,
    COMMAND_OPENING_DELIMITER,
)
from baml.containers import Containerized, Contained, Free, coalesce_free, join
from baml.exceptions import CommandIsNotIdentifierException, EmptyBodyException
from baml.nodes import Command, Node
from baml.utilities import (
    enumerate_escapes,
    partition_not_escaped,
    remove_escaped_spaces,
    rpartition_not_escaped,
    split_items,
    split_not_escaped,
    unescape,
)


class PendingCommand:
    """
    A command call whose header has been parsed, but whose arguments have not.
    """
    _backend: Optional[str]
    _name: str
    _attributes: list[tuple[str, str]]
    _argument_segments: list[list['Containerized']]

    def __init__(self, backend: Optional[str], name: str, attributes: list[tuple[str, str]],
                 argument_segments: list[list['Containerized']]):
        self._backend = backend
        self._name = name
        self._attributes = attributes
        self._argument_segments = argument_segments

    @property
    def backend(self) -> Optional[str]:
        return self._backend

    @property
    def name(self) -> str:
        return self._name

    @property
    def attributes(self) -> list[tuple[str, str]]:
        return self._attributes

    @property
    def argument_segments(self) -> list[list['Containerized']]:
        return self._argument_segments

    def build(self, parse_node_list: Callable[[list['Containerized']], list['Node']]) -> 'Command':
        arguments: list['Node'] = []
        for segment in self._argument_segments:
            arguments.extend(parse_node_list(segment))

        return Command(self._backend, self._name, list(self._attributes), arguments)


def is_whitespace_only(containerized: 'Containerized') -> bool:
    return isinstance(containerized, Free) and containerized.content.strip() == ''


def parse_attributes(attribute_text: str) -> list[tuple[str, str]]:
    """
    Parse `«key»=«value»; [...]` into a list of (key, value) pairs.

    Entries without `=` are dropped. Keys and values are stripped of surrounding whitespace.
    """
    attributes: list[tuple[str, str]] = []

    for entry in split_not_escaped(attribute_text, ARGUMENT_SEPARATOR):
        key, equals_sign, value = partition_not_escaped(entry, lambda character: character == '=')
        if equals_sign == '':
            continue

        attributes.append((unescape(key.strip()), unescape(value.strip())))

    return attributes


def take_attribute_block(items: list['Containerized']) -> tuple[str, list['Containerized']]:
    """
    Take the attribute block from the front of `items`, which begins with Free(`{`).

    Returns the attribute text (without the surrounding braces) and the items following the block.
    Anything after the matching `}` in the same free run is put back in front of the following items.
    An unclosed block takes all of the items.
    """
    attribute_text_parts: list[str] = []
    depth = 0

    for position, item in enumerate(items):
        if isinstance(item, Contained):
            attribute_text_parts.append(''.join(join(item, COMMAND_OPENING_DELIMITER, COMMAND_CLOSING_DELIMITER)))
            continue

        string = item.content
        for index, was_escaped, character in enumerate_escapes(string):
            if was_escaped:
                continue

            if character == ATTRIBUTES_OPENING_DELIMITER:
                depth += 1
            elif character == ATTRIBUTES_CLOSING_DELIMITER:
                depth -= 1
                if depth == 0:
                    attribute_text_parts.append(string[:index])
                    remainder = string[index + 1:]
                    following_items = items[position + 1:]
                    if remainder != '':
                        following_items.insert(0, Free(remainder))

                    return ''.join(attribute_text_parts)[1:], following_items

        attribute_text_parts.append(string)

    return ''.join(attribute_text_parts)[1:], []


def split_arguments(items: list['Containerized']) -> list[list['Containerized']]:
    marked_items: list['Containerized'] = []
    for item in items:
        if isinstance(item, Free):
            marked_items.extend(
                Free(piece)
                for piece in split_not_escaped(item.content, ARGUMENT_SEPARATOR, keep_separator=True)
                if piece != ''
            )
        else:
            marked_items.append(item)

    segments = split_items(marked_items, lambda item: item == Free(ARGUMENT_SEPARATOR))

    normalised_segments: list[list['Containerized']] = []
    for segment in segments:
        segment = coalesce_free(segment)
        if len(segment) > 0 and isinstance(segment[0], Free):
            # `\ ` lets an argument keep whitespace that the left-trim would otherwise remove
            segment[0] = Free(remove_escaped_spaces(segment[0].content.lstrip()))
        normalised_segments.append(segment)

    return normalised_segments


def parse_command(items: list['Containerized']) -> 'PendingCommand':
    """
    Parse the header of a command call and split its arguments.
    """
    items = list(items)

    if all(is_whitespace_only(item) for item in items):
        raise EmptyBodyException('error: empty command call')

    first_item = items.pop(0)
    if isinstance(first_item, Contained):
        raise CommandIsNotIdentifierException('error: command call begins with a nested command call')

    header = first_item.content.lstrip()

    head, opening_brace, attribute_rest = partition_not_escaped(
        header,
        lambda character: character == ATTRIBUTES_OPENING_DELIMITER,
    )
    if opening_brace != '':
        if attribute_rest != '':
            items.insert(0, Free(attribute_rest))
        items.insert(0, Free(ATTRIBUTES_OPENING_DELIMITER))

    head, whitespace, argument_rest = partition_not_escaped(head, str.isspace)
    if whitespace != '':
        items.insert(0, Free(argument_rest))

    backend, backend_separator, name = rpartition_not_escaped(head, BACKEND_SEPARATOR)
    if name == '':
        raise CommandIsNotIdentifierException(f'error: command call `{header}` has no command name')

    attributes: list[tuple[str, str]] = []
    attributes_attached = whitespace == '' and opening_brace != ''
    if attributes_attached:
        attribute_text, items = take_attribute_block(items)
        attributes = parse_attributes(attribute_text)

    return PendingCommand(
        backend=unescape(backend) if backend_separator != '' else None,
        name=unescape(name),
        attributes=attributes,
        argument_segments=split_arguments(items),
    )
