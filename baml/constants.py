"""
# BAML: constants.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Constants.
"""

GENERIC_ERROR_EXIT_CODE = 1
COMMAND_LINE_ERROR_EXIT_CODE = 2
VERBOSE_MODE_DIVIDER_SYMBOL_COUNT = 48

ESCAPE_CHARACTER = '\\'
COMMAND_OPENING_DELIMITER = '['
COMMAND_CLOSING_DELIMITER = ']'
ATTRIBUTES_OPENING_DELIMITER = '{'
ATTRIBUTES_CLOSING_DELIMITER = '}'
ARGUMENT_SEPARATOR = ';'
BACKEND_SEPARATOR = '@'
METADATA_INDICATOR = '!'
COMMENT_INDICATOR = '#'
SINGLE_LINE_CALL_INDICATOR = '.'

BAML_FILE_EXTENSION = '.baml'
HTML_FILE_EXTENSION = '.html'
DEFAULT_TEMPLATE_FILE_NAME = 'template.html'
DEFAULT_OUTPUT_DIRECTORY = 'out'
FALLBACK_TEMPLATE = '%{content}'

CONTENT_VARIABLE_NAME = 'content'
METADATA_VARIABLE_PREFIX = '!'

DESCENDING_SORT_ORDERS = ('-', 'desc', 'descending', 'decreasing', 'dec')
ASCENDING_SORT_ORDERS = ('+', 'asc', 'ascending', 'increasing', 'inc')

BAML_SYNTAX_HELP = '''\
In BAML, text is displayed as is, except for the following:
(1) `[«cmd» «arg»; «arg»; [...]]` is a command call;
(2) `[«cmd»{«key»=«value»; [...]} «args»]` gives the command attributes;
(3) `[«backend»@«cmd» «args»]` restricts a command call to one backend;
(4) `.«cmd» «args»` at the start of a line is a single-line command call;
(5) `!«key» «value»` at the start of a line sets metadata;
(6) `#` starts a comment running to the end of the line;
(7) a backslash escapes the following character (`\\[`, `\\;`, `\\#`, ...),
    and a backslash at the end of a line joins it with the next line.
- Note for (1): leading whitespace of an argument is removed;
  a `\\ ` in front of the whitespace stops the removal (and is itself removed).
'''
