from typing import Optional


class BareBonesError(Exception):
    """Exception type used to propagate BareBones runtime errors."""
    def __init__(self, variable: str, message: str):
        super().__init__(message)
        self.variable = variable
        self.message = message


class UninitializedVariable(BareBonesError):
    def __init__(self, variable: str):
        super().__init__(variable, f"Variable {variable} is uninitialised.")


class Overflow(BareBonesError):
    def __init__(self, variable: str):
        super().__init__(variable, f"Variable {variable} has overflowed!")


class NegativeValue(BareBonesError):
    def __init__(self, variable: str):
        super().__init__(variable, f"Variable {variable} cannot be negative.")


class CallDepthExceeded(BareBonesError):
    def __init__(self, procedure: str):
        super().__init__(procedure, f"Procedure {procedure} exceeded the maximum call depth.")


class ParseError(Exception):
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        if line is not None:
            message = f"{message} at {line}:{column}" if column is not None else f"{message} at line {line}"
        super().__init__(message)
        self.line = line
        self.column = column


class EmitError(Exception):
    """An output artifact could not be written."""
    def __init__(self, backend: str, path: str, reason: str):
        super().__init__(f"could not write {backend} output to {path}: {reason}")
        self.backend = backend
        self.path = path
        self.reason = reason
