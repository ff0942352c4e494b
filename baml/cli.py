"""
# BAML: cli.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Command-line interface.
"""

import argparse
import os
import sys
from typing import Optional

from baml._version import __version__
from baml.constants import (
    BAML_FILE_EXTENSION,
    BAML_SYNTAX_HELP,
    COMMAND_LINE_ERROR_EXIT_CODE,
    DEFAULT_OUTPUT_DIRECTORY,
    DEFAULT_TEMPLATE_FILE_NAME,
    FALLBACK_TEMPLATE,
    GENERIC_ERROR_EXIT_CODE,
    HTML_FILE_EXTENSION,
)
from baml.core import baml_to_html, compile_empty_document
from baml.diagnostics import DiagnosticCollector
from baml.exceptions import ParseException
from baml.templates import TemplateEngine

DESCRIPTION = '''
    Convert BAML to HTML, wrapped in a page template.
'''
BAML_FILE_NAME_HELP = '''
    name of BAML file to be converted
'''
ALL_MODE_HELP = '''
    convert all BAML files under the working directory
'''
VERBOSE_MODE_HELP = '''
    run in verbose mode (prints the template before and after each expansion pass)
'''
TEMPLATE_HELP = f'''
    template used for formatting the output (default `{DEFAULT_TEMPLATE_FILE_NAME}`)
'''
OUTPUT_DIRECTORY_HELP = f'''
    directory to place the converted files in (default `{DEFAULT_OUTPUT_DIRECTORY}`)
'''
DRY_RUN_HELP = '''
    expand the template once, for an empty document, and write it to NAME (with extension `.html`)
'''


def is_baml_file(file_name: str) -> bool:
    return file_name.endswith(BAML_FILE_EXTENSION)


def extract_html_file_name(baml_file_name: str, output_directory: str) -> str:
    """
    Compute the output file name for a BAML file name.

    `«directory»/«name».«extension»` is written to `«output_directory»/«name».html`.
    """
    name, _ = os.path.splitext(os.path.basename(os.path.normpath(baml_file_name)))
    return os.path.join(output_directory, f'{name}{HTML_FILE_EXTENSION}')


def parse_command_line_arguments(arguments: Optional[list[str]] = None) -> argparse.Namespace:
    argument_parser = argparse.ArgumentParser(
        description=DESCRIPTION,
        epilog=BAML_SYNTAX_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    argument_parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'{argument_parser.prog} version {__version__}',
    )
    argument_parser.add_argument(
        '-a', '--all',
        dest='all_mode_enabled',
        action='store_true',
        help=ALL_MODE_HELP,
    )
    argument_parser.add_argument(
        '-x', '--verbose',
        dest='verbose_mode_enabled',
        action='store_true',
        help=VERBOSE_MODE_HELP,
    )
    argument_parser.add_argument(
        '-t', '--template',
        dest='template_file_name',
        default=DEFAULT_TEMPLATE_FILE_NAME,
        help=TEMPLATE_HELP,
    )
    argument_parser.add_argument(
        '-o', '--output-dir',
        dest='output_directory',
        default=DEFAULT_OUTPUT_DIRECTORY,
        help=OUTPUT_DIRECTORY_HELP,
    )
    argument_parser.add_argument(
        '--dry-run',
        dest='dry_run_name',
        default=None,
        help=DRY_RUN_HELP,
        metavar='NAME',
    )
    argument_parser.add_argument(
        'baml_file_names',
        default=[],
        help=BAML_FILE_NAME_HELP,
        metavar='file.baml',
        nargs='*',
    )

    return argument_parser.parse_args(arguments)


def load_template_engine(template_file_name: str, verbose_mode_enabled: bool) -> 'TemplateEngine':
    try:
        return TemplateEngine.from_file(template_file_name, verbose_mode_enabled=verbose_mode_enabled)
    except (OSError, UnicodeDecodeError):
        print(
            f'warning: cannot read template `{template_file_name}`, using `{FALLBACK_TEMPLATE}`',
            file=sys.stderr,
        )
        return TemplateEngine(
            FALLBACK_TEMPLATE,
            os.path.dirname(template_file_name),
            verbose_mode_enabled=verbose_mode_enabled,
        )


def print_diagnostics(diagnostics: 'DiagnosticCollector'):
    for diagnostic in diagnostics:
        print(diagnostic, file=sys.stderr)


def write_html_file(html_file_name: str, html: str) -> bool:
    try:
        with open(html_file_name, 'w', encoding='utf-8') as html_file:
            html_file.write(html)
    except OSError:
        print(f'error: cannot write to `{html_file_name}`', file=sys.stderr)
        return False

    print(f'success: wrote to `{html_file_name}`')
    return True


def generate_html_file(baml_file_name: str, output_directory: str, template_engine: 'TemplateEngine') -> bool:
    try:
        with open(baml_file_name, 'r', encoding='utf-8') as baml_file:
            baml = baml_file.read()
    except (OSError, UnicodeDecodeError) as read_error:
        print(f'error: skipping `{baml_file_name}` (cannot read: {read_error})', file=sys.stderr)
        return False

    diagnostics = DiagnosticCollector()
    try:
        html = baml_to_html(baml, template_engine, diagnostics)
    except ParseException as parse_exception:
        print(f'error: skipping `{baml_file_name}` (cannot parse: {parse_exception})', file=sys.stderr)
        return False
    finally:
        print_diagnostics(diagnostics)

    return write_html_file(extract_html_file_name(baml_file_name, output_directory), html)


def generate_dry_run_file(dry_run_name: str, output_directory: str, template_engine: 'TemplateEngine') -> bool:
    diagnostics = DiagnosticCollector()
    html = compile_empty_document(template_engine, diagnostics)
    print_diagnostics(diagnostics)

    return write_html_file(extract_html_file_name(dry_run_name, output_directory), html)


def main(arguments: Optional[list[str]] = None):
    parsed_arguments = parse_command_line_arguments(arguments)
    baml_file_names = parsed_arguments.baml_file_names
    all_mode_enabled = parsed_arguments.all_mode_enabled
    verbose_mode_enabled = parsed_arguments.verbose_mode_enabled
    output_directory = parsed_arguments.output_directory
    dry_run_name = parsed_arguments.dry_run_name

    if all_mode_enabled and len(baml_file_names) > 0:
        print('error: option -a (or --all) cannot be used with positional argument', file=sys.stderr)
        sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)

    if dry_run_name is not None and (all_mode_enabled or len(baml_file_names) > 0):
        print('error: option --dry-run cannot be used with -a (or --all) or positional argument', file=sys.stderr)
        sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)

    if dry_run_name is None and not all_mode_enabled and len(baml_file_names) == 0:
        print('error: no BAML files given (use -a (or --all) to convert all BAML files)', file=sys.stderr)
        sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)

    try:
        os.makedirs(output_directory, exist_ok=True)
    except OSError:
        print(f'error: cannot create output directory `{output_directory}`', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)

    template_engine = load_template_engine(parsed_arguments.template_file_name, verbose_mode_enabled)

    if dry_run_name is not None:
        if not generate_dry_run_file(dry_run_name, output_directory, template_engine):
            sys.exit(GENERIC_ERROR_EXIT_CODE)
        return

    if all_mode_enabled:
        baml_file_names = sorted(
            os.path.join(path, file_name)
            for path, _, file_names in os.walk(os.curdir)
            for file_name in file_names
            if is_baml_file(file_name)
        )

    all_succeeded = True
    for baml_file_name in baml_file_names:
        if not generate_html_file(baml_file_name, output_directory, template_engine):
            all_succeeded = False

    if not all_succeeded:
        sys.exit(GENERIC_ERROR_EXIT_CODE)


if __name__ == '__main__':
    main()
