"""
# BAML: diagnostics.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Diagnostics for problems recovered from during template expansion.

Template expansion never fails: an offending reference is replaced with an empty string
(or left as is, if malformed) and a diagnostic is sent to a sink.
The sink is a DiagnosticCollector when the caller provides one,
otherwise each diagnostic is issued as a TemplateWarning via `warnings.warn`.
"""

import warnings
from typing import Iterator, NamedTuple, Optional


class TemplateWarning(UserWarning):
    pass


class Diagnostic(NamedTuple):
    message: str

    def __str__(self) -> str:
        return f'warning: {self.message}'


class DiagnosticCollector:
    """
    Object collecting diagnostics in order of emission.
    """
    _diagnostics: list['Diagnostic']

    def __init__(self):
        self._diagnostics = []

    @property
    def diagnostics(self) -> list['Diagnostic']:
        return self._diagnostics

    def warn(self, message: str):
        self._diagnostics.append(Diagnostic(message))

    def clear(self):
        self._diagnostics.clear()

    def __iter__(self) -> Iterator['Diagnostic']:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


def emit_diagnostic(diagnostics: Optional['DiagnosticCollector'], message: str):
    if diagnostics is None:
        warnings.warn(str(Diagnostic(message)), category=TemplateWarning, stacklevel=3)
    else:
        diagnostics.warn(message)
