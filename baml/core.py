"""
# BAML: core.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Core conversion logic.

A BAML file is parsed to a Document, which is rendered to HTML by the HTML backend.
The rendered HTML is then wrapped in a page template by the template engine.
"""

from typing import Optional

from baml.diagnostics import DiagnosticCollector
from baml.nodes import Document
from baml.parser import parse, read_file_variables
from baml.renderers import HtmlBackend
from baml.templates import TemplateEngine

__all__ = ['baml_to_html', 'compile_empty_document', 'read_file_variables']


def baml_to_html(baml: str, template_engine: 'TemplateEngine',
                 diagnostics: Optional['DiagnosticCollector'] = None) -> str:
    """
    Convert BAML to HTML, wrapped in the template of `template_engine`.

    Raises a ParseException (subclass) if `baml` does not parse.
    """
    document = parse(baml)
    return HtmlBackend(template_engine, diagnostics).compile_document(document)


def compile_empty_document(template_engine: 'TemplateEngine',
                           diagnostics: Optional['DiagnosticCollector'] = None) -> str:
    return HtmlBackend(template_engine, diagnostics).compile_document(Document({}, []))
