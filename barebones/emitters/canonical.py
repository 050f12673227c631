from ..ast import Block, Clear, Command, Decr, Func, FuncBlock, Incr, WhileBlock
from .base import Emitter


class FormatEmitter(Emitter):
    """Pretty-prints a program back into canonical BareBones source."""
    name = 'format'
    filename = 'format.bb'

    def emit_program(self, root: Block) -> None:
        self.emit_block(root, 0)

    def emit_block(self, block: Block, depth: int) -> None:
        for command in block.commands:
            self.emit_command(command, depth)

    def emit_command(self, node: Command, depth: int) -> None:
        if isinstance(node, Incr):
            self.line(depth, f"incr {node.variable.name};", node.line)
        elif isinstance(node, Decr):
            self.line(depth, f"decr {node.variable.name};", node.line)
        elif isinstance(node, Clear):
            self.line(depth, f"clear {node.variable.name};", node.line)
        elif isinstance(node, WhileBlock):
            # the header and `end;` sit one level above the loop body
            self.line(depth, f"while {node.guard.name} not 0 do;", node.line)
            self.emit_block(node, depth + 1)
            self.line(depth, "end;", node.end_line)
        elif isinstance(node, FuncBlock):
            self.line(depth, f"func {node.name}({', '.join(node.formal_params)});", node.line)
            self.emit_block(node, depth + 1)
            self.line(depth, "end;", node.end_line)
        elif isinstance(node, Func):
            args = ', '.join(('&' if ref else '') + arg.name for arg, ref in zip(node.actual_args, node.by_ref))
            self.line(depth, f"{node.name}({args});", node.line)
        else:
            raise NotImplementedError(f"format: unexpected node type {type(node)}")
