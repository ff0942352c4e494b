"""
# BAML: test_diagnostics.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `diagnostics.py`.
"""

import unittest

from baml.diagnostics import Diagnostic, DiagnosticCollector, TemplateWarning, emit_diagnostic


class TestDiagnostics(unittest.TestCase):
    def test_diagnostic_collector(self):
        diagnostics = DiagnosticCollector()
        self.assertEqual(len(diagnostics), 0)

        diagnostics.warn('first')
        emit_diagnostic(diagnostics, 'second')
        self.assertEqual(list(diagnostics), [Diagnostic('first'), Diagnostic('second')])
        self.assertEqual(str(diagnostics.diagnostics[0]), 'warning: first')

        diagnostics.clear()
        self.assertEqual(len(diagnostics), 0)

    def test_emit_diagnostic_without_collector(self):
        with self.assertWarns(TemplateWarning) as context:
            emit_diagnostic(None, 'lost')
        self.assertEqual(str(context.warning), 'warning: lost')


if __name__ == '__main__':
    unittest.main()
