"""
# BAML: nodes.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Document tree produced by the parser.
"""

from typing import NamedTuple, Optional, Union


class Text(NamedTuple):
    """
    Literal text destined for output (escapes already resolved).
    """
    text: str


class Command(NamedTuple):
    """
    A parsed command call `[«backend»@«name»{«attributes»} «arguments»]`.

    A `backend` of None means the command is intended for all backends.
    Attribute keys need not be unique; they are kept in order of appearance.
    """
    backend: Optional[str]
    name: str
    attributes: list[tuple[str, str]]
    arguments: list['Node']


class CommandCall(NamedTuple):
    command: Command


Node = Union[Text, CommandCall]


class Document(NamedTuple):
    metadata: dict[str, str]
    nodes: list['Node']
