""" Exceptions raised to callers of the compiler. """


class CompilerError(ValueError):
    """ Base class for all compiler errors. """


class InputTooLargeError(CompilerError):
    def __init__(self, name: str, line_count: int, max_lines: int):
        super().__init__(f"{name} has {line_count} lines, limit is {max_lines}")
        self.name = name
        self.line_count = line_count
        self.max_lines = max_lines


class DefinitionValidationError(CompilerError):
    """ A compiled workflow definition breaks a structural invariant. """
