"""Abstract Syntax Tree (AST) definitions for the BareBones language.

A BareBones program is a tree of commands. Leaf commands (`Incr`, `Decr`,
`Clear`) and call sites (`Func`) refer to `Variable` cells which are shared
by reference between every command naming them and the `locals` table of the
block that declared them. The interpreter mutates variable values; the
emitters only read the tree.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass(eq=False)
class Variable:
    """A named natural-number cell; `value` is None until first written."""
    name: str
    value: Optional[int] = None

    @property
    def initialised(self) -> bool:
        return self.value is not None


@dataclass(eq=False)
class Command:
    """Base class for all AST nodes."""
    pass


@dataclass(eq=False)
class Incr(Command):
    variable: Variable
    line: int


@dataclass(eq=False)
class Decr(Command):
    variable: Variable
    line: int


@dataclass(eq=False)
class Clear(Command):
    variable: Variable
    line: int


@dataclass(eq=False)
class Block(Command):
    line: int
    depth: int = 0
    commands: List[Command] = field(default_factory=list)
    locals: Dict[str, Variable] = field(default_factory=dict)

    def add(self, command: Command) -> None:
        self.commands.append(command)

    def visible_variables(self) -> List[Variable]:
        return list(self.locals.values())

    def frame_variables(self) -> Iterator[Variable]:
        """Yield this block's locals followed by those of nested loops."""
        yield from self.locals.values()
        for command in self.commands:
            if isinstance(command, WhileBlock):
                yield from command.frame_variables()


@dataclass(eq=False)
class WhileBlock(Block):
    guard: Optional[Variable] = None
    end_line: Optional[int] = None
    # non-owning; the enclosing block owns this loop through its commands
    parent_ref: Optional[weakref.ReferenceType] = field(default=None, repr=False)

    @property
    def parent(self) -> Optional[Block]:
        if self.parent_ref is None:
            return None
        return self.parent_ref()

    def set_parent(self, block: Block) -> None:
        self.parent_ref = weakref.ref(block)

    def visible_variables(self) -> List[Variable]:
        # outer scopes first; a name may appear once per scope
        parent = self.parent
        outer = parent.visible_variables() if parent is not None else []
        return outer + list(self.locals.values())


@dataclass(eq=False)
class FuncBlock(Block):
    name: str = ''
    formal_params: List[str] = field(default_factory=list)
    end_line: Optional[int] = None

    def __post_init__(self):
        for param in self.formal_params:
            self.locals[param] = Variable(param)

    def param(self, index: int) -> Variable:
        return self.locals[self.formal_params[index]]


@dataclass(eq=False)
class Func(Command):
    target: FuncBlock
    actual_args: List[Variable]
    by_ref: List[bool]
    line: int

    def __post_init__(self):
        if not (len(self.actual_args) == len(self.by_ref) == len(self.target.formal_params)):
            raise ValueError(
                f"call to {self.target.name} has {len(self.actual_args)} arguments, "
                f"{len(self.by_ref)} reference flags and {len(self.target.formal_params)} parameters"
            )

    @property
    def name(self) -> str:
        return self.target.name
