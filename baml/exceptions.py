"""
# BAML: exceptions.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Exception classes.
"""


class ParseException(Exception):
    pass


class EmptyBodyException(ParseException):
    pass


class CommandIsNotIdentifierException(ParseException):
    pass


class UnmatchedOpenDelimiterException(ParseException):
    pass


class UnmatchedCloseDelimiterException(ParseException):
    pass


class MalformedMetadataLineException(ParseException):
    _line_number: int
    _line: str

    def __init__(self, line_number: int, line: str):
        super().__init__(f'error: line {line_number}: metadata line `{line}` has no value')
        self._line_number = line_number
        self._line = line

    @property
    def line_number(self) -> int:
        return self._line_number

    @property
    def line(self) -> str:
        return self._line


class MacroException(Exception):
    pass
