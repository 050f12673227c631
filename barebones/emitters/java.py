from ..ast import Block, Func, FuncBlock
from .base import BraceEmitter


JAVA_KEYWORDS = frozenset("""
    abstract assert boolean break byte case catch char class const continue default do double
    else enum extends final finally float for goto if implements import instanceof int interface
    long native new package private protected public return short static strictfp super switch
    synchronized this throw throws transient try void volatile while true false null _
""".split())


class JavaEmitter(BraceEmitter):
    """Transpiles a program into a single `Main` class.

    Procedures become static methods returning their parameters as an
    `int[]`; a call site copies the by-reference positions back.
    """
    name = 'java'
    filename = 'Main.java'
    result_name = '__ret'
    reserved = JAVA_KEYWORDS | {'argv', result_name}

    def emit_program(self, root: Block) -> None:
        self.line(0, 'public class Main {')
        for func in self.functions(root):
            self.emit_function(func)
            self.blank()
        self.line(1, 'public static void main(String[] argv) {')
        self.emit_declarations(root, 2)
        self.emit_block(root, 2)
        self.line(1, '}')
        self.line(0, '}')

    def emit_function(self, func: FuncBlock) -> None:
        params = self.params(func)
        signature = ', '.join(f"int {p}" for p in params)
        self.line(1, f"static int[] {self.ident(func.name)}({signature}) {{", func.line)
        self.emit_declarations(func, 2)
        self.emit_block(func, 2)
        self.line(2, f"return new int[] {{{', '.join(params)}}};", func.end_line)
        self.line(1, '}')

    def emit_call(self, node: Func, depth: int) -> None:
        call = self.call_expr(node)
        if not any(node.by_ref):
            self.line(depth, f"{call};", node.line)
            return
        copies = ' '.join(
            f"{arg} = {self.result_name}[{i}];"
            for i, (arg, ref) in enumerate(zip(self.args(node), node.by_ref)) if ref
        )
        self.line(depth, f"{{ int[] {self.result_name} = {call}; {copies} }}", node.line)
