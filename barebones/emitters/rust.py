from ..ast import Block, Func, FuncBlock
from .base import BraceEmitter, tuple_of


RUST_KEYWORDS = frozenset("""
    as async await break const continue crate dyn else enum extern false fn for if impl in let
    loop match mod move mut pub ref return self Self static struct super trait true type unsafe
    use where while abstract become box do final gen macro override priv try typeof unsized
    virtual yield _
""".split())


class RustEmitter(BraceEmitter):
    """Transpiles a program into Rust.

    Every procedure returns all of its parameters as a tuple. A call site uses
    a destructuring assignment: by-reference arguments are assigned from their
    position in the tuple, every other position binds to `_`.
    """
    name = 'rust'
    filename = 'main.rs'
    while_header = 'while {guard} != 0 {{'
    reserved = RUST_KEYWORDS | {'main'}

    def declare(self, name: str) -> str:
        return f"let mut {name}: i32 = 0;"

    def emit_program(self, root: Block) -> None:
        for func in self.functions(root):
            self.emit_function(func)
            self.blank()
        self.line(0, 'fn main() {')
        self.emit_declarations(root, 1)
        self.emit_block(root, 1)
        self.line(0, '}')

    def emit_function(self, func: FuncBlock) -> None:
        params = self.params(func)
        name = self.ident(func.name)
        if not params:
            self.line(0, f"fn {name}() {{", func.line)
        else:
            signature = ', '.join(f"mut {p}: i32" for p in params)
            returns = tuple_of(['i32'] * len(params))
            self.line(0, f"fn {name}({signature}) -> {returns} {{", func.line)
        self.emit_declarations(func, 1)
        self.emit_block(func, 1)
        if params:
            self.line(1, tuple_of(params), func.end_line)
        self.line(0, '}', func.end_line)

    def emit_call(self, node: Func, depth: int) -> None:
        call = self.call_expr(node)
        if not any(node.by_ref):
            self.line(depth, f"{call};", node.line)
            return
        targets = [arg if ref else '_' for arg, ref in zip(self.args(node), node.by_ref)]
        self.line(depth, f"{tuple_of(targets)} = {call};", node.line)
