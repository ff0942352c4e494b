"""
# BAML: backends.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Base class for output backends.
"""

import abc
from typing import Any, Optional

from baml.nodes import Command, CommandCall, Document, Node, Text


class Backend(abc.ABC):
    """
    Base class for a backend, which compiles a parsed Document to some output.

    Text nodes are handed to `emit_text`, command calls to `run_command`.
    A command call restricted to another backend (`[«other_backend»@«name» ...]`) is dropped.
    """

    @property
    @abc.abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abc.abstractmethod
    def emit_text(self, text: str) -> Any:
        raise NotImplementedError

    @abc.abstractmethod
    def run_command(self, command: 'Command') -> Optional[Any]:
        raise NotImplementedError

    @abc.abstractmethod
    def compile_document(self, document: 'Document') -> Any:
        raise NotImplementedError

    def handle_node(self, node: 'Node') -> Optional[Any]:
        if isinstance(node, Text):
            return self.emit_text(node.text)

        if isinstance(node, CommandCall):
            command = node.command
            if command.backend is not None and command.backend != self.backend_id:
                return None
            return self.run_command(command)

        raise TypeError(f'error: cannot handle node `{node!r}`')
