## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class ImgOpsError(Exception):
    def __init__(self, message: str = "", *, token=None, position=None, argument=None):
        """Base class for all imgops-raised errors."""
        super().__init__(message)
        self.token: str = token
        self.position: int = position
        self.argument: int = argument

class ImgOpsParseError(ImgOpsError):
    """Any failure to turn a token stream into a program."""
    pass


class UnknownOperationError(ImgOpsParseError, NameError):
    pass

class ArgumentCountMismatch(ImgOpsParseError):
    def __init__(self, message, *, operation=None, expected=None, found=None, token=None, position=None):
        super().__init__(message, token=token, position=position, argument=None if found is None else found + 1)
        self.operation = operation
        self.expected = expected
        self.found = found


class NumericParseError(ImgOpsParseError, ValueError):
    kind = 'number'

    def __init__(self, message, *, operation=None, token=None, position=None, argument=None):
        super().__init__(message, token=token, position=position, argument=argument)
        self.operation = operation

class FloatParseError(NumericParseError):
    kind = 'float'

class IntParseError(NumericParseError):
    kind = 'int'

class UIntParseError(NumericParseError):
    kind = 'uint'


class InvalidNamedValueError(ImgOpsParseError, ValueError):
    """Structured literal such as `coord(0, 1)` was malformed or had the wrong name."""
    pass


class InvalidModifierSyntax(ImgOpsParseError):
    pass

class UnrecognizedSamplingFilterName(InvalidModifierSyntax):
    pass

class InvalidOperationForModifier(ImgOpsParseError):
    pass

class ModifierArgumentExpected(ImgOpsParseError):
    pass

class UnboundModifierError(ImgOpsParseError):
    """A `set <operation> ...` declaration with no later occurrence of that operation."""
    pass


class UnexpectedTokenError(ImgOpsParseError):
    pass

class ScriptSyntaxError(UnexpectedTokenError, lark.exceptions.LexError):
    def __init__(self, message, *, line=None, column=None, token=None, position=None):
        super().__init__(message, token=token, position=position)
        self.line = line
        self.column = column


class EngineError(ImgOpsError, RuntimeError):
    """Raised by image engines; passed through untouched by the parser."""
    pass
