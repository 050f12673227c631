"""Interactive breakpoint console for the BareBones interpreter.

A `Debugger` is handed to the `Interpreter`; the interpreter calls `check`
before every command it is about to run. When the command's line carries an
active breakpoint, execution is suspended and commands are read line by line
from `stdin` until the user resumes:

    p            show every initialised variable visible from the current scope
    p NAME       show a single variable
    b LINE       activate a breakpoint
    r LINE       deactivate a breakpoint
    c / s        resume execution

Any other input is ignored. End of input resumes execution as well.
"""

import sys
from typing import Dict, Optional, TextIO

from .ast import Block, Command


BANNER = (
    "Broke at line {line}. Would you like to set a new breakpoint (b Number) or remove a breakpoint "
    "(r Number) or see a named variable (p Name) or even see all variables (p) or continue (c) or skip (s)?"
)


class Debugger:
    def __init__(self, breakpoints: Optional[Dict[int, bool]] = None,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.breakpoints: Dict[int, bool] = dict(breakpoints) if breakpoints else {}
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def set_breakpoint(self, line: int) -> None:
        self.breakpoints[line] = True

    def clear_breakpoint(self, line: int) -> None:
        self.breakpoints[line] = False

    def is_active(self, line: int) -> bool:
        return self.breakpoints.get(line, False)

    def write(self, msg: str) -> None:
        self.stdout.write(msg + '\n')
        self.stdout.flush()

    def check(self, node: Command, scope: Block) -> None:
        line = getattr(node, 'line', None)
        if line is None or not self.is_active(line):
            return
        self.write(BANNER.format(line=line))
        self.session(scope)

    def session(self, scope: Block) -> None:
        while True:
            raw = self.stdin.readline()
            if raw == '':
                return
            parts = raw.split()
            if not parts:
                continue
            command, args = parts[0], parts[1:]
            if command == 'p' and not args:
                self.print_all(scope)
            elif command == 'p':
                self.print_one(scope, args[0])
            elif command == 'b' and args:
                line = self.parse_line(args[0])
                if line is not None:
                    self.set_breakpoint(line)
                    self.write("Set breakpoint!")
            elif command == 'r' and args:
                line = self.parse_line(args[0])
                if line is not None:
                    self.clear_breakpoint(line)
                    self.write("Unset breakpoint!")
            elif command in ('c', 's'):
                # TODO: `s` should stop again at the next statement instead of the next breakpoint
                return

    @staticmethod
    def parse_line(text: str) -> Optional[int]:
        try:
            return int(text)
        except ValueError:
            return None

    def print_all(self, scope: Block) -> None:
        for variable in scope.visible_variables():
            if variable.value is not None:
                self.write(f"{variable.name} is equal to: {variable.value}")

    def print_one(self, scope: Block, name: str) -> None:
        # innermost scope wins
        for variable in reversed(scope.visible_variables()):
            if variable.name == name:
                if variable.value is None:
                    self.write(f"{variable.name} is currently uninitialised.")
                else:
                    self.write(f"{variable.name} is equal to: {variable.value}")
                return
