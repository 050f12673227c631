"""JSON serialization for the BareBones AST.

This module converts the command tree into plain dict/list structures
suitable for JSON encoding. Variables are written by name (and current value
when `values` is set); call sites refer to their procedure by name, since
procedure definitions are serialized where they appear in the root block.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .ast import Block, Clear, Decr, Func, FuncBlock, Incr, Variable, WhileBlock
from .parser import ParsedProgram


def variable_to_obj(v: Variable, values: bool = False) -> Any:
    if values:
        return {"name": v.name, "value": v.value}
    return v.name


def ast_to_obj(node: Any, values: bool = False, lines: bool = True) -> Any:
    """Convert a node (or a whole `ParsedProgram`) into JSON-ready data.

    With `lines=False` source positions are left out, which makes the result
    suitable for comparing the structure of two programs.
    """
    if isinstance(node, ParsedProgram):
        obj: Dict[str, Any] = {"type": "Program", "root": ast_to_obj(node.root, values, lines)}
        if lines:
            obj["comments"] = {str(k): v for k, v in sorted(node.comments.items())}
        return obj

    if isinstance(node, (Incr, Decr, Clear)):
        obj = {"type": type(node).__name__, "variable": variable_to_obj(node.variable, values)}
    elif isinstance(node, Func):
        obj = {
            "type": "Func",
            "target": node.target.name,
            "args": [variable_to_obj(a, values) for a in node.actual_args],
            "by_ref": list(node.by_ref),
        }
    elif isinstance(node, WhileBlock):
        obj = block_to_obj(node, "WhileBlock", values, lines)
        obj["guard"] = variable_to_obj(node.guard, values)
    elif isinstance(node, FuncBlock):
        obj = block_to_obj(node, "FuncBlock", values, lines)
        obj["name"] = node.name
        obj["params"] = list(node.formal_params)
    elif isinstance(node, Block):
        obj = block_to_obj(node, "Block", values, lines)
    else:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")

    if lines:
        obj["line"] = node.line
        end_line: Optional[int] = getattr(node, "end_line", None)
        if end_line is not None:
            obj["end_line"] = end_line
    return obj


def block_to_obj(block: Block, kind: str, values: bool, lines: bool) -> Dict[str, Any]:
    return {
        "type": kind,
        "depth": block.depth,
        "locals": sorted(block.locals),
        "commands": [ast_to_obj(c, values, lines) for c in block.commands],
    }
