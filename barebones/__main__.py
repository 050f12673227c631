"""CLI entry point for the BareBones toolchain.

Usage:
    python -m barebones [-v...] [-o OUT_DIR] [-b LINE]... [--keep-going] [--no-run] <program_file>
    python -m barebones [-v...] --emit-ast <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  -o OUT_DIR    Directory receiving the emitted sources (default: bareBones)
  -b LINE       Break at LINE when the program runs (can be repeated)
  --keep-going  Attempt every output file even after one fails
  --no-run      Only emit the translated sources
  --emit-ast    Parse the given file and emit an AST JSON file

The program is first written out by every backend (canonical BareBones,
Python, Java, Rust and C++) and then run under the interactive debugger.
Trace output is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj
from .debugger import Debugger
from .emitters import write_all
from .errors import BareBonesError, EmitError, ParseError
from .interpreter import Interpreter
from .parser import parse_program


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="BareBones interpreter and transpiler")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('-o', '--out', type=Path, default=Path('bareBones'), help='output directory for emitted sources')
    parser.add_argument('-b', '--break', dest='breakpoints', type=int, action='append', default=[],
                        metavar='LINE', help='set a breakpoint before running (can be repeated)')
    parser.add_argument('--keep-going', action='store_true', help='write every output even if one fails')
    parser.add_argument('--no-run', action='store_true', help='emit sources without running the program')
    parser.add_argument('--emit-ast', action='store_true', help='write an AST JSON file for the program and exit')
    parser.add_argument('program', help='BareBones program file')
    args = parser.parse_args(argv)

    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()
    try:
        program = parse_program(source)
    except ParseError as e:
        print(f"Syntax error in {program_file}: {e}", file=sys.stderr)
        sys.exit(1)

    # Emit AST mode
    if args.emit_ast:
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    try:
        for path in write_all(program, args.out, keep_going=args.keep_going):
            print(f"Wrote {path}")
    except EmitError as e:
        print(f"Output error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.no_run:
        return

    debugger = Debugger({line: True for line in args.breakpoints})
    interpreter = Interpreter(debugger=debugger, debug_level=args.v)
    try:
        root = interpreter.run(program)
    except BareBonesError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    for variable in root.visible_variables():
        if variable.value is not None:
            print(f"{variable.name} = {variable.value}")


if __name__ == '__main__':
    main()
