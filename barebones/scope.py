from typing import Optional
from barebones.ast import Block, Variable


class Scope:
    """Resolves variable names to shared `Variable` cells while a program is built."""
    def __init__(self, block: Block, parent: Optional['Scope'] = None):
        self.block = block
        self.parent = parent

    def get(self, name: str) -> Optional[Variable]:
        if name in self.block.locals:
            return self.block.locals[name]
        if self.parent:
            return self.parent.get(name)
        return None

    def declare(self, name: str) -> Variable:
        variable = Variable(name)
        self.block.locals[name] = variable
        return variable

    def resolve(self, name: str) -> Variable:
        # first mention of a name declares it in the innermost scope
        variable = self.get(name)
        if variable is None:
            variable = self.declare(name)
        return variable

    def child(self, block: Block) -> 'Scope':
        return Scope(block, parent=self)
