from pathlib import Path
from textwrap import dedent

import pytest

from barebones.ast import Clear, Decr, Func, FuncBlock, Incr, WhileBlock
from barebones.ast_json import ast_to_obj
from barebones.errors import ParseError
from barebones.parser import parse_file, parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_commands_share_variables():
    program = parse_program("clear x;\nincr x;\ndecr x;\n")
    clear, incr, decr = program.root.commands
    assert isinstance(clear, Clear) and isinstance(incr, Incr) and isinstance(decr, Decr)
    assert clear.variable is incr.variable is decr.variable is program.root.locals['x']
    assert [c.line for c in program.root.commands] == [1, 2, 3]


def test_while_block_structure():
    program = parse_file(EXAMPLES / 'multiply.bb')
    root = program.root
    outer = root.commands[-1]
    assert isinstance(outer, WhileBlock)
    assert outer.line == 10 and outer.end_line == 22
    assert outer.guard is root.locals['x']
    assert outer.parent is root
    assert outer.depth == 1
    inner = outer.commands[1]
    assert isinstance(inner, WhileBlock)
    assert inner.parent is outer
    assert inner.depth == 2
    # first mentioned inside the loop, so local to it
    assert list(outer.locals) == ['w']
    assert 'w' not in root.locals
    assert inner.commands[1].variable is outer.locals['w']


def test_loop_visible_variables_walk_outwards():
    program = parse_file(EXAMPLES / 'multiply.bb')
    inner = program.root.commands[-1].commands[1]
    assert [v.name for v in inner.visible_variables()] == ['x', 'y', 'z', 'w']


def test_procedure_definition_and_call():
    program = parse_file(EXAMPLES / 'procedures.bb')
    add = program.functions['add']
    assert isinstance(add, FuncBlock)
    assert program.root.commands[0] is add
    assert add.formal_params == ['a', 'b']
    assert add.depth == 1
    assert add.line == 1 and add.end_line == 6
    assert add.locals['a'].value is None
    call = program.root.commands[-1]
    assert isinstance(call, Func)
    assert call.target is add
    assert [a.name for a in call.actual_args] == ['x', 'y']
    assert call.by_ref == [True, False]
    assert call.actual_args[0] is program.root.locals['x']


def test_procedure_scope_is_isolated():
    program = parse_program(dedent("""\
        clear x;
        func f(a);
            clear x;
        end;
    """))
    f = program.functions['f']
    assert f.locals['x'] is not program.root.locals['x']


def test_recursive_call_resolves():
    program = parse_program("func f(a);\n    f(&a);\nend;\n")
    f = program.functions['f']
    assert f.commands[0].target is f


def test_trailing_comments_only():
    program = parse_file(EXAMPLES / 'multiply.bb')
    assert program.comments == {10: ' outer loop', 22: ' product ready'}


def test_keywords_are_not_names():
    with pytest.raises(ParseError):
        parse_program("clear while;\n")


@pytest.mark.parametrize('source, message', [
    ("f(x);\n", "undefined procedure"),
    ("func f(a, b);\nend;\nclear x;\nf(x);\n", "expects 2 arguments"),
    ("func f(a);\nend;\nfunc f(b);\nend;\n", "already defined"),
    ("func f(a, a);\nend;\n", "duplicate parameter"),
    ("clear x;\nwhile x not 0 do;\n    func f(a);\n    end;\nend;\n", "top level"),
])
def test_construction_errors(source, message):
    with pytest.raises(ParseError) as exc:
        parse_program(source)
    assert message in str(exc.value)


def test_syntax_error_reports_position():
    with pytest.raises(ParseError) as exc:
        parse_program("clear x;\nincr x\n")
    assert exc.value.line is not None


def test_unterminated_loop():
    with pytest.raises(ParseError):
        parse_program("clear x;\nwhile x not 0 do;\n    decr x;\n")


def test_ast_json_shape():
    program = parse_file(EXAMPLES / 'procedures.bb')
    obj = ast_to_obj(program)
    assert obj['comments'] == {'1': ' a becomes a + b', '14': ' x += y'}
    call = obj['root']['commands'][-1]
    assert call == {'type': 'Func', 'target': 'add', 'args': ['x', 'y'], 'by_ref': [True, False], 'line': 14}
    add = obj['root']['commands'][0]
    assert add['type'] == 'FuncBlock'
    assert add['params'] == ['a', 'b']
    assert add['end_line'] == 6


def test_form_feed_does_not_shift_comment_lines():
    program = parse_program("clear x;\n\f\nincr x;  // bump\n")
    assert program.comments == {3: ' bump'}
    assert program.root.commands[1].line == 3
