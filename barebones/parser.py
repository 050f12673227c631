"""Parser for the BareBones language.

Source text is parsed in two stages:

1. **Parsing**: a Lark LALR parser checks the program against the grammar
   below. Comments are ignored by the grammar but collected through a lexer
   callback so that trailing comments can be re-attached by the emitters.

2. **Building**: the parse tree is walked top-down by `ProgramBuilder`, which
   creates the command nodes, resolves every variable name to a shared
   `Variable` through a chain of `Scope` objects, and binds call sites to the
   procedures they invoke.

The `parse_program` function is the public entry point and returns a
`ParsedProgram` holding the root `Block` and the comment map.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput
from lark.visitors import Interpreter as TreeWalker

from .ast import Block, Clear, Command, Decr, Func, FuncBlock, Incr, WhileBlock
from .errors import ParseError
from .scope import Scope


BAREBONES_GRAMMAR = r"""
    start: statement*

    ?statement: clear_stmt
              | incr_stmt
              | decr_stmt
              | while_stmt
              | func_def
              | call_stmt

    clear_stmt: "clear" NAME ";"
    incr_stmt: "incr" NAME ";"
    decr_stmt: "decr" NAME ";"

    while_stmt: "while" NAME "not" "0" "do" ";" statement* END ";"
    func_def: "func" NAME "(" [param_list] ")" ";" statement* END ";"
    param_list: NAME ("," NAME)*

    call_stmt: NAME "(" [arg_list] ")" ";"
    arg_list: arg ("," arg)*
    arg: [REF] NAME

    END: "end"
    REF: "&"
    NAME: /[A-Za-z_][A-Za-z0-9_]*/

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT
    %import common.WS
    %ignore WS
"""


def make_parser(comments: Optional[List[Token]] = None) -> Lark:
    callbacks = {'COMMENT': comments.append} if comments is not None else {}
    return Lark(
        BAREBONES_GRAMMAR,
        parser='lalr',
        lexer='basic',
        maybe_placeholders=True,
        lexer_callbacks=callbacks,
    )


@dataclass
class ParsedProgram:
    root: Block
    comments: Dict[int, str] = field(default_factory=dict)
    functions: Dict[str, FuncBlock] = field(default_factory=dict)


class ProgramBuilder(TreeWalker):
    """Walks a BareBones parse tree and builds the command AST."""

    def __init__(self):
        self.root = Block(line=1, depth=0)
        self.functions: Dict[str, FuncBlock] = {}
        self.block: Block = self.root
        self.scope = Scope(self.root)

    def start(self, tree: Tree) -> Block:
        for statement in tree.children:
            self.root.add(self.visit(statement))
        return self.root

    def build_body(self, block: Block, statements: List[Tree], scope: Scope) -> None:
        saved = (self.block, self.scope)
        self.block, self.scope = block, scope
        try:
            for statement in statements:
                block.add(self.visit(statement))
        finally:
            self.block, self.scope = saved

    def clear_stmt(self, tree: Tree) -> Command:
        name = tree.children[0]
        return Clear(self.scope.resolve(str(name)), name.line)

    def incr_stmt(self, tree: Tree) -> Command:
        name = tree.children[0]
        return Incr(self.scope.resolve(str(name)), name.line)

    def decr_stmt(self, tree: Tree) -> Command:
        name = tree.children[0]
        return Decr(self.scope.resolve(str(name)), name.line)

    def while_stmt(self, tree: Tree) -> Command:
        name, *body, end = tree.children
        guard = self.scope.resolve(str(name))
        loop = WhileBlock(line=name.line, depth=self.block.depth + 1, guard=guard, end_line=end.line)
        loop.set_parent(self.block)
        self.build_body(loop, body, self.scope.child(loop))
        return loop

    def func_def(self, tree: Tree) -> Command:
        name, params, *body, end = tree.children
        if self.block is not self.root:
            raise ParseError(f"procedure {name} must be defined at top level", name.line, name.column)
        if str(name) in self.functions:
            raise ParseError(f"procedure {name} already defined", name.line, name.column)
        formal = [str(p) for p in params.children] if params is not None else []
        if len(set(formal)) != len(formal):
            raise ParseError(f"duplicate parameter name in procedure {name}", name.line, name.column)
        func = FuncBlock(line=name.line, depth=1, name=str(name), formal_params=formal, end_line=end.line)
        # registered before the body is built so a procedure can call itself
        self.functions[func.name] = func
        # procedure bodies see only their own parameters and locals
        self.build_body(func, body, Scope(func))
        return func

    def call_stmt(self, tree: Tree) -> Command:
        name, args = tree.children
        target = self.functions.get(str(name))
        if target is None:
            raise ParseError(f"call to undefined procedure {name}", name.line, name.column)
        actual_args = []
        by_ref = []
        for arg in (args.children if args is not None else []):
            ref, arg_name = arg.children
            actual_args.append(self.scope.resolve(str(arg_name)))
            by_ref.append(ref is not None)
        if len(actual_args) != len(target.formal_params):
            raise ParseError(
                f"procedure {name} expects {len(target.formal_params)} arguments, got {len(actual_args)}",
                name.line,
                name.column,
            )
        return Func(target, actual_args, by_ref, name.line)


def trailing_comments(source: str, tokens: List[Token]) -> Dict[int, str]:
    """Map line numbers to the text of comments that follow code on that line."""
    # lark counts lines by '\n' only
    lines = source.split('\n')
    comments: Dict[int, str] = {}
    for token in tokens:
        prefix = lines[token.line - 1][:token.column - 1]
        # comments alone on their line are not attached to any command
        if prefix.strip():
            comments[token.line] = token.value[2:].rstrip()
    return comments


def parse_program(source: str) -> ParsedProgram:
    """Parse BareBones source code into a root Block and its comment map.

    Syntax errors and construction errors (unknown procedures, arity
    mismatches, misplaced definitions) are raised as `ParseError`.
    """
    comment_tokens: List[Token] = []
    try:
        tree = make_parser(comment_tokens).parse(source)
    except UnexpectedInput as e:
        raise ParseError("syntax error: unexpected input", e.line, e.column) from e
    builder = ProgramBuilder()
    root = builder.visit(tree)
    return ParsedProgram(root, trailing_comments(source, comment_tokens), builder.functions)


def parse_file(path) -> ParsedProgram:
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    return parse_program(source)
