"""
# BAML: containers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Containerization of a stream into free runs and delimited (contained) runs.

For delimiters `[` and `]`, the stream `ab[c[d]]e` is containerized as
````
Free(ab) Contained(Free(c) Contained(Free(d))) Free(e)
````
with one level of nesting per matched delimiter pair.
"""

from typing import Callable, Iterable, Union

from baml.exceptions import UnmatchedCloseDelimiterException, UnmatchedOpenDelimiterException


class Free:
    """
    A run of items outside of any delimiters (at the current level).
    """
    _content: object

    def __init__(self, content: object):
        self._content = content

    @property
    def content(self) -> object:
        return self._content

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Free) and self._content == other._content

    def __repr__(self) -> str:
        return f'Free({self._content!r})'


class Contained:
    """
    The containerized items between a matched pair of delimiters.
    """
    _children: list['Containerized']

    def __init__(self, children: list['Containerized']):
        self._children = children

    @property
    def children(self) -> list['Containerized']:
        return self._children

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Contained) and self._children == other._children

    def __repr__(self) -> str:
        return f'Contained({self._children!r})'


Containerized = Union[Free, Contained]


def containerize(items: Iterable, is_open: Callable[[object], bool],
                 is_close: Callable[[object], bool]) -> list['Containerized']:
    """
    Group a stream into a list of top-level Free and Contained runs.

    Consecutive free items are coalesced into a single Free (holding a list).
    """
    stack: list[list['Containerized']] = [[]]

    for item in items:
        if is_open(item):
            stack.append([])
        elif is_close(item):
            if len(stack) == 1:
                raise UnmatchedCloseDelimiterException('error: closing delimiter without an opening delimiter')

            children = stack.pop()
            stack[-1].append(Contained(children))
        else:
            frame = stack[-1]
            if len(frame) > 0 and isinstance(frame[-1], Free):
                frame[-1].content.append(item)
            else:
                frame.append(Free([item]))

    if len(stack) > 1:
        raise UnmatchedOpenDelimiterException(
            f'error: {len(stack) - 1} opening delimiter(s) without a closing delimiter'
        )

    return stack[0]


def join(containerized: 'Containerized', left: object, right: object) -> list:
    """
    Flatten a containerized run back into a list, re-inserting the delimiters.

    Free content is treated as a single item.
    """
    if isinstance(containerized, Free):
        return [containerized.content]

    joined = [left]
    for child in containerized.children:
        joined.extend(join(child, left, right))
    joined.append(right)

    return joined


def coalesce_free(containerized_list: list['Containerized']) -> list['Containerized']:
    """
    Merge adjacent Free runs (whose contents support `+`).
    """
    coalesced: list['Containerized'] = []
    for containerized in containerized_list:
        if isinstance(containerized, Free) and len(coalesced) > 0 and isinstance(coalesced[-1], Free):
            coalesced[-1] = Free(coalesced[-1].content + containerized.content)
        else:
            coalesced.append(containerized)

    return coalesced


def map_free(containerized: 'Containerized', function: Callable[[object], object]) -> 'Containerized':
    if isinstance(containerized, Free):
        return Free(function(containerized.content))

    return Contained([map_free(child, function) for child in containerized.children])
