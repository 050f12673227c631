from ..ast import Block, Func, FuncBlock
from .base import BraceEmitter


CPP_KEYWORDS = frozenset("""
    alignas alignof and and_eq asm auto bitand bitor bool break case catch char char8_t char16_t
    char32_t class compl concept const consteval constexpr constinit const_cast continue co_await
    co_return co_yield decltype default delete do double dynamic_cast else enum explicit export
    extern false float for friend goto if inline int long mutable namespace new noexcept not
    not_eq nullptr operator or or_eq private protected public register reinterpret_cast requires
    return short signed sizeof static static_assert static_cast struct switch template this
    thread_local throw true try typedef typeid typename union unsigned using virtual void
    volatile wchar_t while xor xor_eq
""".split())


class CppEmitter(BraceEmitter):
    """Transpiles a program into C++.

    Procedures return their parameters as a `std::tuple`; call sites bind the
    by-reference positions with `std::tie` and drop the rest into
    `std::ignore`.
    """
    name = 'cpp'
    filename = 'main.cpp'
    reserved = CPP_KEYWORDS | {'main', 'std'}

    def emit_program(self, root: Block) -> None:
        self.line(0, '#include <tuple>')
        self.blank()
        for func in self.functions(root):
            self.emit_function(func)
            self.blank()
        self.line(0, 'int main() {')
        self.emit_declarations(root, 1)
        self.emit_block(root, 1)
        self.line(1, 'return 0;')
        self.line(0, '}')

    def emit_function(self, func: FuncBlock) -> None:
        params = self.params(func)
        types = ', '.join('int' for _ in params)
        signature = ', '.join(f"int {p}" for p in params)
        self.line(0, f"std::tuple<{types}> {self.ident(func.name)}({signature}) {{", func.line)
        self.emit_declarations(func, 1)
        self.emit_block(func, 1)
        self.line(1, f"return std::make_tuple({', '.join(params)});", func.end_line)
        self.line(0, '}')

    def emit_call(self, node: Func, depth: int) -> None:
        call = self.call_expr(node)
        if not any(node.by_ref):
            self.line(depth, f"{call};", node.line)
            return
        targets = ', '.join(arg if ref else 'std::ignore' for arg, ref in zip(self.args(node), node.by_ref))
        self.line(depth, f"std::tie({targets}) = {call};", node.line)
