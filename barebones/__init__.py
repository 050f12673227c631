# BareBones language package
# This package provides an interpreter, an interactive debugger and source emitters for BareBones.
from .errors import BareBonesError, CallDepthExceeded, EmitError, ParseError
from .interpreter import Interpreter, MAX_INT, run_program
from .debugger import Debugger
from .parser import parse_program, parse_file

__all__ = [
    'run_program',
    'parse_program',
    'parse_file',
    'Interpreter',
    'Debugger',
    'MAX_INT',
    'BareBonesError',
    'CallDepthExceeded',
    'ParseError',
    'EmitError',
]
