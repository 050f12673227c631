"""Shared machinery for the BareBones code emitters.

Every backend renders a program line by line into an in-memory buffer.
Indentation is passed down as an explicit `depth` argument, so rendering a
node never changes state on the node itself. A trailing comment from the
source is re-attached, in the target's comment syntax, to the first line
rendered for the command carrying that source line.

BareBones accepts names that are keywords (or names the generated code
uses itself) in a target language. Each backend lists those in `reserved`;
a colliding name is written with trailing underscores until it is free.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set, Union

from ..ast import Block, Clear, Command, Decr, Func, FuncBlock, Incr, WhileBlock
from ..parser import ParsedProgram


def tuple_of(items: List[str]) -> str:
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def program_names(block: Block) -> Iterator[str]:
    """Yield every variable and procedure name used in a program."""
    yield from block.locals
    if isinstance(block, FuncBlock):
        yield block.name
    for command in block.commands:
        if isinstance(command, Block):
            yield from program_names(command)


class Emitter:
    name = ''
    filename = ''
    indent_unit = '    '
    comment_prefix = ' //'
    reserved: frozenset = frozenset()

    def __init__(self):
        self.lines: List[str] = []
        self.comments: Dict[int, str] = {}
        self.attached = set()
        self.renames: Dict[str, str] = {}

    def emit(self, program: Union[ParsedProgram, Block], comments: Optional[Dict[int, str]] = None) -> str:
        if isinstance(program, ParsedProgram):
            root = program.root
            if comments is None:
                comments = program.comments
        else:
            root = program
        self.lines = []
        self.comments = dict(comments or {})
        self.attached = set()
        self.renames = self.build_renames(root)
        self.emit_program(root)
        return '\n'.join(self.lines) + '\n'

    def emit_program(self, root: Block) -> None:
        raise NotImplementedError

    def build_renames(self, root: Block) -> Dict[str, str]:
        used: Set[str] = set(program_names(root))
        renames: Dict[str, str] = {}
        for name in sorted(used & self.reserved):
            candidate = name + '_'
            while candidate in self.reserved or candidate in used:
                candidate += '_'
            used.add(candidate)
            renames[name] = candidate
        return renames

    def ident(self, name: str) -> str:
        return self.renames.get(name, name)

    def comment_text(self, text: str) -> str:
        return text

    def comment_for(self, source_line: Optional[int]) -> str:
        if source_line is None or source_line in self.attached or source_line not in self.comments:
            return ''
        self.attached.add(source_line)
        return self.comment_prefix + self.comment_text(self.comments[source_line])

    def line(self, depth: int, text: str, source_line: Optional[int] = None) -> None:
        self.lines.append(self.indent_unit * depth + text + self.comment_for(source_line))

    def blank(self) -> None:
        self.lines.append('')

    @staticmethod
    def functions(root: Block) -> List[FuncBlock]:
        return [c for c in root.commands if isinstance(c, FuncBlock)]

    @staticmethod
    def statements(block: Block) -> List[Command]:
        return [c for c in block.commands if not isinstance(c, FuncBlock)]

    @staticmethod
    def frame_names(frame: Block) -> List[str]:
        """Unique variable names a root or procedure frame must declare up front."""
        params = set(frame.formal_params) if isinstance(frame, FuncBlock) else set()
        names: List[str] = []
        for variable in frame.frame_variables():
            if variable.name not in params and variable.name not in names:
                names.append(variable.name)
        return names

    def params(self, func: FuncBlock) -> List[str]:
        return [self.ident(p) for p in func.formal_params]

    def args(self, node: Func) -> List[str]:
        return [self.ident(a.name) for a in node.actual_args]


class BraceEmitter(Emitter):
    """Common rendering for the curly-brace targets (Java, C++, Rust)."""
    while_header = 'while ({guard} != 0) {{'

    def comment_text(self, text: str) -> str:
        # a trailing backslash would continue the comment onto the next line
        return text.rstrip('\\')

    def declare(self, name: str) -> str:
        return f"int {name} = 0;"

    def emit_declarations(self, frame: Block, depth: int) -> None:
        for name in self.frame_names(frame):
            self.line(depth, self.declare(self.ident(name)))

    def emit_block(self, block: Block, depth: int) -> None:
        for command in self.statements(block):
            self.emit_command(command, depth)

    def emit_command(self, node: Command, depth: int) -> None:
        if isinstance(node, Incr):
            self.line(depth, f"{self.ident(node.variable.name)} += 1;", node.line)
        elif isinstance(node, Decr):
            self.line(depth, f"{self.ident(node.variable.name)} -= 1;", node.line)
        elif isinstance(node, Clear):
            self.line(depth, f"{self.ident(node.variable.name)} = 0;", node.line)
        elif isinstance(node, WhileBlock):
            self.line(depth, self.while_header.format(guard=self.ident(node.guard.name)), node.line)
            self.emit_block(node, depth + 1)
            self.line(depth, '}', node.end_line)
        elif isinstance(node, Func):
            self.emit_call(node, depth)
        else:
            raise NotImplementedError(f"{self.name}: unexpected node type {type(node)}")

    def emit_call(self, node: Func, depth: int) -> None:
        raise NotImplementedError

    def call_expr(self, node: Func) -> str:
        return f"{self.ident(node.name)}({', '.join(self.args(node))})"
