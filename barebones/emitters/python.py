import keyword

from ..ast import Block, Clear, Command, Decr, Func, FuncBlock, Incr, WhileBlock
from .base import Emitter, tuple_of


class PythonEmitter(Emitter):
    """Transpiles a program into a Python script.

    Procedures return every parameter as a tuple; a call site unpacks the
    by-reference positions into the caller's variables and discards the rest.
    """
    name = 'python'
    filename = 'main.py'
    comment_prefix = '  #'
    # `_` is the discard target at call sites
    reserved = frozenset(keyword.kwlist) | {'_'}

    def emit_program(self, root: Block) -> None:
        for func in self.functions(root):
            self.emit_function(func)
            self.blank()
            self.blank()
        statements = self.statements(root)
        if not statements:
            self.line(0, 'pass')
        for command in statements:
            self.emit_command(command, 0)

    def emit_function(self, func: FuncBlock) -> None:
        params = self.params(func)
        self.line(0, f"def {self.ident(func.name)}({', '.join(params)}):", func.line)
        self.emit_block(func, 1)
        self.line(1, f"return {tuple_of(params)}", func.end_line)

    def emit_block(self, block: Block, depth: int) -> None:
        for command in self.statements(block):
            self.emit_command(command, depth)

    def emit_command(self, node: Command, depth: int) -> None:
        if isinstance(node, Incr):
            self.line(depth, f"{self.ident(node.variable.name)} += 1", node.line)
        elif isinstance(node, Decr):
            self.line(depth, f"{self.ident(node.variable.name)} -= 1", node.line)
        elif isinstance(node, Clear):
            self.line(depth, f"{self.ident(node.variable.name)} = 0", node.line)
        elif isinstance(node, WhileBlock):
            self.line(depth, f"while {self.ident(node.guard.name)} != 0:", node.line)
            if not node.commands:
                self.line(depth + 1, 'pass')
            self.emit_block(node, depth + 1)
            # python has no closing syntax to carry the comment on `end;`
            comment = self.comment_for(node.end_line)
            if comment:
                self.line(depth + 1, comment.lstrip())
        elif isinstance(node, Func):
            args = self.args(node)
            call = f"{self.ident(node.name)}({', '.join(args)})"
            if any(node.by_ref):
                targets = [arg if ref else '_' for arg, ref in zip(args, node.by_ref)]
                self.line(depth, f"{tuple_of(targets)} = {call}", node.line)
            else:
                self.line(depth, call, node.line)
        else:
            raise NotImplementedError(f"python: unexpected node type {type(node)}")
