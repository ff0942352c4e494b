"""
# BAML: templates.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Template engine for wrapping rendered output in a page template.

Template syntax (passes applied in this order):
- `%forfiles(«verb» «object»:[...])%( «body» %)` loops over the files in a directory
- `%{«name»}` is replaced by the value of variable «name»
- `%run(«cmd» «args»)` is replaced by the standard output of a command
- `%setext(«extension»:«path»)` is replaced by «path» with its extension replaced
- `%alt(«alternative»:[...])` is replaced by the first non-empty alternative
- `%perc` is replaced by `%`

Recognised `%forfiles` verbs:
- `with «name»`: the variable bound to each file name
- `in «path»`: the directory (relative to the template directory), mandatory
- `sort_key «template»`: sort by «template», evaluated with each file's variables
- `sort_order «order»`: `+` (default) or `-`
- `exclude_name «pattern» [...]`: skip files whose names match any of the patterns
- `include_name «pattern» [...]`: skip files whose names match none of the patterns
"""

import os
import subprocess
from typing import Callable, Optional

from baml.constants import (
    ASCENDING_SORT_ORDERS,
    DESCENDING_SORT_ORDERS,
    VERBOSE_MODE_DIVIDER_SYMBOL_COUNT,
)
from baml.diagnostics import DiagnosticCollector, emit_diagnostic
from baml.exceptions import MacroException
from baml.macros import (
    BLOCK_CLOSING_DELIMITER,
    BLOCK_OPENING_DELIMITER,
    evaluate_alt,
    evaluate_setext,
    find_block_end,
    find_closing_delimiter,
    matches_pattern,
    parse_arguments,
    split_shell_words,
)
from baml.utilities import partition_not_escaped, split_not_escaped, unescape

FileVariablesGetter = Callable[[str], dict[str, str]]


def no_file_variables(path: str) -> dict[str, str]:
    return {}


def replace_variables(text: str, variables: dict[str, str],
                      diagnostics: Optional['DiagnosticCollector']) -> str:
    """
    Replace every `%{«name»}` with the value of variable «name».

    Unknown variables are replaced with the empty string.
    """
    search_start = 0
    while True:
        index = text.find('%{', search_start)
        if index < 0:
            break

        closing_index = find_closing_delimiter(text, index + 1, '{', '}')
        if closing_index is None:
            emit_diagnostic(diagnostics, 'incomplete variable insertion `%{` ignored (expected `}`)')
            search_start = index + 2
            continue

        name = unescape(text[index + 2:closing_index])
        try:
            value = variables[name]
        except KeyError:
            emit_diagnostic(diagnostics, f'`%{{{name}}}` failed to evaluate: unknown variable')
            value = ''

        text = text[:index] + value + text[closing_index + 1:]
        search_start = index + len(value)

    return text


def replace_inline_macros(text: str, trigger: str, evaluate: Callable[[str], str],
                          diagnostics: Optional['DiagnosticCollector']) -> str:
    """
    Replace every `«trigger»(«arguments»)` with `evaluate(«arguments»)`.

    An evaluation raising MacroException is replaced with the empty string.
    A malformed macro is left as is.
    """
    search_start = 0
    while True:
        index = text.find(trigger, search_start)
        if index < 0:
            break

        parsed_arguments = parse_arguments(text, index + len(trigger))
        if parsed_arguments is None:
            emit_diagnostic(diagnostics, f'incomplete macro `{trigger}` ignored (expected `{trigger}(...)`)')
            search_start = index + len(trigger)
            continue

        arguments, end_index = parsed_arguments
        try:
            replacement = evaluate(arguments)
        except MacroException as macro_exception:
            emit_diagnostic(diagnostics, f'`{trigger}({arguments})` failed to evaluate: {macro_exception}')
            replacement = ''

        text = text[:index] + replacement + text[end_index:]
        search_start = index + len(replacement)

    return text


def replace_block_macros(text: str, trigger: str, evaluate: Callable[[str, str], str],
                         diagnostics: Optional['DiagnosticCollector']) -> str:
    """
    Replace every `«trigger»(«arguments»)%( «body» %)` with `evaluate(«arguments», «body»)`.

    An evaluation raising MacroException is replaced with the empty string.
    A malformed macro is left as is.
    """
    search_start = 0
    while True:
        index = text.find(trigger, search_start)
        if index < 0:
            break

        search_start = index + len(trigger)

        parsed_arguments = parse_arguments(text, index + len(trigger))
        if parsed_arguments is None:
            emit_diagnostic(diagnostics, f'incomplete block macro `{trigger}` ignored (expected `{trigger}(...)`)')
            continue

        arguments, arguments_end_index = parsed_arguments

        body_opening_index = arguments_end_index
        while body_opening_index < len(text) and text[body_opening_index].isspace():
            body_opening_index += 1

        if not text.startswith(BLOCK_OPENING_DELIMITER, body_opening_index):
            emit_diagnostic(
                diagnostics,
                f'invalid block macro `{trigger}({arguments})` ignored (expected `{BLOCK_OPENING_DELIMITER}`)',
            )
            continue

        body_start = body_opening_index + len(BLOCK_OPENING_DELIMITER)
        body_end = find_block_end(text, body_start)
        if body_end is None:
            emit_diagnostic(
                diagnostics,
                f'incomplete block macro `{trigger}({arguments})` ignored '
                f'(expected `{BLOCK_CLOSING_DELIMITER}`, found end of text)',
            )
            continue

        body = text[body_start:body_end]
        try:
            replacement = evaluate(arguments, body)
        except MacroException as macro_exception:
            emit_diagnostic(
                diagnostics,
                f'`{trigger}({arguments}){BLOCK_OPENING_DELIMITER} ... {BLOCK_CLOSING_DELIMITER}` '
                f'failed to evaluate: {macro_exception}',
            )
            replacement = ''

        text = text[:index] + replacement + text[body_end + len(BLOCK_CLOSING_DELIMITER):]
        search_start = index + len(replacement)

    return text


class TemplateEngine:
    """
    Object expanding a template.

    `variables` may be changed freely between runs (e.g. to bind `content`).
    Relative paths in `%forfiles` and the working directory of `%run` are resolved against `base_directory`.
    """
    variables: dict[str, str]
    _template_text: str
    _base_directory: str
    _verbose_mode_enabled: bool

    def __init__(self, template_text: str, base_directory: str,
                 variables: Optional[dict[str, str]] = None, verbose_mode_enabled: bool = False):
        self.variables = dict(variables) if variables is not None else {}
        self._template_text = template_text
        self._base_directory = base_directory if base_directory != '' else os.curdir
        self._verbose_mode_enabled = verbose_mode_enabled

    @classmethod
    def from_file(cls, template_file_name: str, variables: Optional[dict[str, str]] = None,
                  verbose_mode_enabled: bool = False) -> 'TemplateEngine':
        with open(template_file_name, 'r', encoding='utf-8') as template_file:
            template_text = template_file.read()

        return cls(template_text, os.path.dirname(template_file_name), variables, verbose_mode_enabled)

    @property
    def template_text(self) -> str:
        return self._template_text

    @property
    def base_directory(self) -> str:
        return self._base_directory

    @property
    def verbose_mode_enabled(self) -> bool:
        return self._verbose_mode_enabled

    def run(self, get_file_variables: Optional['FileVariablesGetter'] = None,
            diagnostics: Optional['DiagnosticCollector'] = None) -> str:
        return self.expand(self._template_text, get_file_variables, diagnostics)

    def expand(self, text: str, get_file_variables: Optional['FileVariablesGetter'] = None,
               diagnostics: Optional['DiagnosticCollector'] = None) -> str:
        if get_file_variables is None:
            get_file_variables = no_file_variables

        text = self._apply_pass(
            '%forfiles', text,
            lambda string: replace_block_macros(
                string, '%forfiles',
                lambda arguments, body: self._evaluate_forfiles(arguments, body, get_file_variables, diagnostics),
                diagnostics,
            ),
        )
        text = self._apply_pass(
            '%{...}', text,
            lambda string: replace_variables(string, self.variables, diagnostics),
        )
        text = self._apply_pass(
            '%run', text,
            lambda string: replace_inline_macros(
                string, '%run',
                lambda arguments: self._evaluate_run(arguments, get_file_variables, diagnostics),
                diagnostics,
            ),
        )
        text = self._apply_pass(
            '%setext', text,
            lambda string: replace_inline_macros(string, '%setext', evaluate_setext, diagnostics),
        )
        text = self._apply_pass(
            '%alt', text,
            lambda string: replace_inline_macros(string, '%alt', evaluate_alt, diagnostics),
        )
        text = self._apply_pass(
            '%perc', text,
            lambda string: string.replace('%perc', '%'),
        )

        return text

    def _apply_pass(self, pass_name: str, text: str, replace: Callable[[str], str]) -> str:
        text_before = text
        text_after = replace(text)

        if self._verbose_mode_enabled:
            if text_before == text_after:
                no_change_indicator = ' (no change)'
            else:
                no_change_indicator = ''

            print('<' * VERBOSE_MODE_DIVIDER_SYMBOL_COUNT + f' BEFORE {pass_name}')
            print(text_before)
            print('=' * VERBOSE_MODE_DIVIDER_SYMBOL_COUNT + no_change_indicator)
            print(text_after)
            print('>' * VERBOSE_MODE_DIVIDER_SYMBOL_COUNT + f' AFTER {pass_name}')
            print('\n\n\n\n')

        return text_after

    def _evaluate_forfiles(self, arguments: str, body: str, get_file_variables: 'FileVariablesGetter',
                           diagnostics: Optional['DiagnosticCollector']) -> str:
        loop_variable_name = None
        directory = None
        sort_key = None
        sort_descending = False
        excluded_name_patterns: list[str] = []
        included_name_patterns: list[str] = []

        for argument in split_not_escaped(arguments, ':'):
            verb, _, object_ = partition_not_escaped(argument.strip(), str.isspace)
            object_ = object_.lstrip()
            if object_ == '':
                emit_diagnostic(diagnostics, f'ignoring verb `{verb}` without an object')
                continue

            if verb == 'with':
                loop_variable_name = unescape(object_)
            elif verb == 'in':
                directory = unescape(object_)
            elif verb == 'sort_key':
                sort_key = object_
            elif verb == 'sort_order':
                if object_ in DESCENDING_SORT_ORDERS:
                    sort_descending = True
                elif object_ not in ASCENDING_SORT_ORDERS:
                    emit_diagnostic(diagnostics, f'unknown sort_order `{object_}` (try `+` or `-`)')
            elif verb == 'exclude_name':
                excluded_name_patterns.extend(
                    unescape(pattern) for pattern in split_not_escaped(object_, ' ') if pattern != ''
                )
            elif verb == 'include_name':
                included_name_patterns.extend(
                    unescape(pattern) for pattern in split_not_escaped(object_, ' ') if pattern != ''
                )
            else:
                emit_diagnostic(diagnostics, f'ignoring unrecognised verb `{verb}`')

        if directory is None:
            raise MacroException('no path given (expected `in «path»`)')

        directory_path = os.path.join(self._base_directory, directory)
        try:
            with os.scandir(directory_path) as directory_entries:
                entries = sorted(directory_entries, key=lambda entry: entry.name)
        except OSError as os_error:
            raise MacroException(f'cannot read directory `{directory_path}` ({os_error})') from os_error

        expansions: list[tuple[dict[str, str], str]] = []
        for entry in entries:
            file_name = entry.name

            if any(matches_pattern(file_name, pattern) for pattern in excluded_name_patterns):
                continue
            if len(included_name_patterns) > 0 and not any(
                matches_pattern(file_name, pattern) for pattern in included_name_patterns
            ):
                continue

            try:
                file_variables = get_file_variables(entry.path)
            except OSError as os_error:
                emit_diagnostic(diagnostics, f'skipping `{entry.path}` in `%forfiles` ({os_error})')
                continue

            loop_variables = dict(self.variables)
            loop_variables.update(file_variables)
            if loop_variable_name is not None:
                loop_variables[loop_variable_name] = file_name

            expansions.append((loop_variables, replace_variables(body, loop_variables, diagnostics)))

        if sort_key is not None:
            expansions.sort(
                key=lambda expansion: replace_variables(sort_key, expansion[0], diagnostics),
                reverse=sort_descending,
            )

        return ''.join(expanded_body for _, expanded_body in expansions)

    def _evaluate_run(self, arguments: str, get_file_variables: 'FileVariablesGetter',
                      diagnostics: Optional['DiagnosticCollector']) -> str:
        words = split_shell_words(arguments)
        if len(words) == 0:
            raise MacroException('empty command')

        command = [self.expand(word, get_file_variables, diagnostics) for word in words]

        try:
            completed_process = subprocess.run(command, cwd=self._base_directory, stdout=subprocess.PIPE)
        except (OSError, ValueError) as run_error:
            raise MacroException(f'cannot run `{command[0]}` ({run_error})') from run_error

        if completed_process.returncode != 0:
            emit_diagnostic(diagnostics, f'`%run({arguments})` exited with status {completed_process.returncode}')

        return completed_process.stdout.decode('utf-8', errors='replace')
