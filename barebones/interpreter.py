"""Tree-walking interpreter for the BareBones language.

The interpreter executes the command AST built by `barebones.parser`
directly. Variables live in the AST itself, so running a program mutates the
`Variable` cells shared by its commands. When a `Debugger` is supplied it is
consulted before every command and may suspend execution for interactive
inspection; without one the program runs headless.
"""

from __future__ import annotations

from typing import Optional, Union

from .ast import Block, Clear, Command, Decr, Func, FuncBlock, Incr, Variable, WhileBlock
from .debugger import Debugger
from .errors import CallDepthExceeded, NegativeValue, Overflow, UninitializedVariable
from .parser import ParsedProgram, parse_program


# Width of the int/i32 types the transpilers declare variables with.
MAX_INT = 2 ** 31 - 1


class Interpreter:
    """Core interpreter that executes a BareBones AST."""
    def __init__(self, debugger: Optional[Debugger] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt', max_int: int = MAX_INT):
        self.debugger = debugger
        self.max_int = max_int
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, program: Union[ParsedProgram, Block]) -> Block:
        root = program.root if isinstance(program, ParsedProgram) else program
        try:
            self.debug(f"run start ({len(root.commands)} top-level commands)")
            self.execute_block(root, root)
            self.debug("run finished")
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None
        return root

    def execute_block(self, block: Block, scope: Block) -> None:
        for command in block.commands:
            self.execute(command, scope)

    def execute(self, node: Command, scope: Block) -> None:
        # procedure definitions only run through a call site
        if isinstance(node, FuncBlock):
            return
        if isinstance(node, WhileBlock):
            self.execute_while(node)
            return
        if isinstance(node, Func):
            self.call(node, scope)
            return
        if self.debugger is not None:
            self.debugger.check(node, scope)
        if isinstance(node, Incr):
            value = self.read(node.variable)
            if value >= self.max_int:
                raise Overflow(node.variable.name)
            node.variable.value = value + 1
            if self.debug_level >= 2:
                self.debug(f"line {node.line}: incr {node.variable.name} -> {node.variable.value}")
            return
        if isinstance(node, Decr):
            value = self.read(node.variable)
            if value == 0:
                raise NegativeValue(node.variable.name)
            node.variable.value = value - 1
            if self.debug_level >= 2:
                self.debug(f"line {node.line}: decr {node.variable.name} -> {node.variable.value}")
            return
        if isinstance(node, Clear):
            node.variable.value = 0
            if self.debug_level >= 2:
                self.debug(f"line {node.line}: clear {node.variable.name}")
            return
        if isinstance(node, Block):
            self.execute_block(node, node)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_while(self, node: WhileBlock) -> None:
        while True:
            guard = self.read(node.guard)
            if self.debug_level >= 3:
                self.debug(f"line {node.line}: while {node.guard.name} = {guard}")
            if guard == 0:
                break
            # the breakpoint on a loop is checked once per iteration
            if self.debugger is not None:
                self.debugger.check(node, node)
            self.execute_block(node, node)

    def call(self, node: Func, scope: Block) -> None:
        target = node.target
        for i, actual in enumerate(node.actual_args):
            target.param(i).value = actual.value
        if self.debug_level >= 1:
            args = ', '.join(f"{a.name}={a.value}" for a in node.actual_args)
            self.debug(f"line {node.line}: call {target.name}({args})")
        if self.debugger is not None:
            self.debugger.check(node, scope)
            self.debugger.check(target, target)
        try:
            self.execute_block(target, target)
        except RecursionError:
            # raised again by an outer call if this frame is too deep to build the error
            raise CallDepthExceeded(target.name) from None
        for i, actual in enumerate(node.actual_args):
            if node.by_ref[i]:
                actual.value = target.param(i).value
        if self.debug_level >= 1:
            self.debug(f"line {node.line}: return from {target.name}")

    @staticmethod
    def read(variable: Variable) -> int:
        if variable.value is None:
            raise UninitializedVariable(variable.name)
        return variable.value


def run_program(source: str, debugger: Optional[Debugger] = None, debug_level: int = 0) -> Block:
    """Parse and execute BareBones source, returning the root block."""
    program = parse_program(source)
    interpreter = Interpreter(debugger=debugger, debug_level=debug_level)
    return interpreter.run(program)
