"""
# BAML: renderers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

HTML backend.

- Text is emitted as is, except that line feeds become `<br />` followed by a line feed.
- `[«name»{«key»=«value»; [...]} «argument»; [...]]` becomes `<«name» «key»="«value»" [...]>«arguments»</«name»>`.
- `[html@tag.«name» ...]` is the same, for tag names that would not parse as command names.
- Any other command restricted to a backend is dropped.
"""

from typing import Optional, Union

from baml.backends import Backend
from baml.constants import CONTENT_VARIABLE_NAME, METADATA_VARIABLE_PREFIX
from baml.diagnostics import DiagnosticCollector, emit_diagnostic
from baml.nodes import Command, Document
from baml.parser import read_file_variables
from baml.templates import TemplateEngine
from baml.utilities import escape_attribute_value_html, is_valid_attribute_name_html

HTML_BACKEND_ID = 'html'
LITERAL_TAG_PREFIX = 'tag.'


class HtmlText:
    _text: str

    def __init__(self, text: str):
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def __eq__(self, other) -> bool:
        return isinstance(other, HtmlText) and self._text == other._text

    def __repr__(self) -> str:
        return f'HtmlText({self._text!r})'

    def render(self) -> str:
        return self._text


class HtmlTag:
    """
    An HTML element with attributes (in order of appearance) and child nodes.

    Attributes whose names are not valid HTML attribute names are not rendered.
    """
    _tag_name: str
    _attributes: list[tuple[str, str]]
    _children: list['HtmlNode']

    def __init__(self, tag_name: str, attributes: list[tuple[str, str]], children: list['HtmlNode']):
        self._tag_name = tag_name
        self._attributes = attributes
        self._children = children

    @property
    def tag_name(self) -> str:
        return self._tag_name

    @property
    def attributes(self) -> list[tuple[str, str]]:
        return self._attributes

    @property
    def children(self) -> list['HtmlNode']:
        return self._children

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, HtmlTag)
            and self._tag_name == other._tag_name
            and self._attributes == other._attributes
            and self._children == other._children
        )

    def __repr__(self) -> str:
        return f'HtmlTag({self._tag_name!r}, {self._attributes!r}, {self._children!r})'

    def render(self) -> str:
        attribute_sequence = ''.join(
            f' {key}="{escape_attribute_value_html(value)}"'
            for key, value in self._attributes
            if is_valid_attribute_name_html(key)
        )
        content = ''.join(child.render() for child in self._children)

        return f'<{self._tag_name}{attribute_sequence}>{content}</{self._tag_name}>'


HtmlNode = Union[HtmlText, HtmlTag]


class HtmlBackend(Backend):
    """
    Backend compiling a Document to an HTML page.

    The rendered nodes are bound to the template variable `content`,
    and each metadata entry `!«key» «value»` to the template variable `!«key»`.
    These bindings last for one `compile_document` call,
    after which the template engine has its variables as at construction.
    """
    _template_engine: 'TemplateEngine'
    _base_variables: dict[str, str]
    _diagnostics: Optional['DiagnosticCollector']

    def __init__(self, template_engine: 'TemplateEngine', diagnostics: Optional['DiagnosticCollector'] = None):
        self._template_engine = template_engine
        self._base_variables = dict(template_engine.variables)
        self._diagnostics = diagnostics

    @property
    def backend_id(self) -> str:
        return HTML_BACKEND_ID

    @property
    def template_engine(self) -> 'TemplateEngine':
        return self._template_engine

    @property
    def diagnostics(self) -> Optional['DiagnosticCollector']:
        return self._diagnostics

    def emit_text(self, text: str) -> 'HtmlText':
        return HtmlText(text.replace('\n', '<br />\n'))

    def run_command(self, command: 'Command') -> Optional['HtmlTag']:
        if command.backend is None:
            return self.build_tag(command.name, command)

        if command.name.startswith(LITERAL_TAG_PREFIX):
            return self.build_tag(command.name[len(LITERAL_TAG_PREFIX):], command)

        return None

    def build_tag(self, tag_name: str, command: 'Command') -> 'HtmlTag':
        children = [
            html_node
            for html_node in (self.handle_node(argument) for argument in command.arguments)
            if html_node is not None
        ]
        attributes = []
        for key, value in command.attributes:
            if is_valid_attribute_name_html(key):
                attributes.append((key, value))
            else:
                emit_diagnostic(self._diagnostics, f'invalid attribute name `{key}` dropped from `{tag_name}`')

        return HtmlTag(tag_name, attributes, children)

    def render_nodes(self, document: 'Document') -> str:
        html_nodes = [
            html_node
            for html_node in (self.handle_node(node) for node in document.nodes)
            if html_node is not None
        ]
        return ''.join(html_node.render() for html_node in html_nodes)

    def compile_document(self, document: 'Document') -> str:
        content = self.render_nodes(document)

        variables = dict(self._base_variables)
        for key, value in document.metadata.items():
            variables[f'{METADATA_VARIABLE_PREFIX}{key}'] = value
        variables[CONTENT_VARIABLE_NAME] = content

        self._template_engine.variables = variables
        try:
            return self._template_engine.run(read_file_variables, self._diagnostics)
        finally:
            self._template_engine.variables = dict(self._base_variables)
