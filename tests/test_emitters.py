from pathlib import Path
from textwrap import dedent

import pytest

from barebones.ast_json import ast_to_obj
from barebones.emitters import BACKENDS, get_emitter, write_all, write_artifact
from barebones.errors import EmitError
from barebones.parser import parse_file, parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'

COMMENT_MARKERS = {'format': '//', 'python': '#', 'java': '//', 'rust': '//', 'cpp': '//'}


def emit(backend, program):
    return get_emitter(backend).emit(program)


def test_canonical_output():
    program = parse_file(EXAMPLES / 'procedures.bb')
    assert emit('format', program) == dedent("""\
        func add(a, b); // a becomes a + b
            while b not 0 do;
                incr a;
                decr b;
            end;
        end;
        clear x;
        incr x;
        incr x;
        clear y;
        incr y;
        incr y;
        incr y;
        add(&x, y); // x += y
    """)


def test_canonical_nested_indentation_has_no_drift():
    program = parse_file(EXAMPLES / 'multiply.bb')
    emitter = get_emitter('format')
    first = emitter.emit(program)
    assert "while x not 0 do; // outer loop\n    clear w;\n    while y not 0 do;\n        incr z;\n" in first
    assert "        decr w;\n    end;\n    decr x;\nend; // product ready\n" in first
    assert emitter.emit(program) == first
    assert [c.depth for c in program.root.commands[-1].commands if hasattr(c, 'depth')] == [2, 2]


@pytest.mark.parametrize('example', ['multiply.bb', 'procedures.bb', 'countdown.bb'])
def test_canonical_round_trip(example):
    program = parse_file(EXAMPLES / example)
    reparsed = parse_program(emit('format', program))
    assert ast_to_obj(reparsed, lines=False) == ast_to_obj(program, lines=False)
    assert sorted(reparsed.comments.values()) == sorted(program.comments.values())
    assert emit('format', reparsed) == emit('format', program)


def test_python_output():
    program = parse_file(EXAMPLES / 'procedures.bb')
    assert emit('python', program) == dedent("""\
        def add(a, b):  # a becomes a + b
            while b != 0:
                a += 1
                b -= 1
            return (a, b)


        x = 0
        x += 1
        x += 1
        y = 0
        y += 1
        y += 1
        y += 1
        (x, _) = add(x, y)  # x += y
    """)


@pytest.mark.parametrize('example, expected', [
    ('procedures.bb', {'x': 5, 'y': 3}),
    ('multiply.bb', {'x': 0, 'y': 2, 'z': 6}),
    ('countdown.bb', {'n': 0, 'steps': 4}),
])
def test_python_output_runs(example, expected):
    namespace = {}
    exec(emit('python', parse_file(EXAMPLES / example)), namespace)
    assert {name: namespace[name] for name in expected} == expected


def test_python_end_comment_becomes_comment_line():
    text = emit('python', parse_file(EXAMPLES / 'multiply.bb'))
    assert "while x != 0:  # outer loop\n" in text
    assert text.endswith("    x -= 1\n    # product ready\n")


def test_python_empty_bodies():
    program = parse_program("func reset();\nend;\nclear g;\nwhile g not 0 do;\nend;\nreset();\n")
    text = emit('python', program)
    assert "def reset():\n    return ()\n" in text
    assert "while g != 0:\n    pass\n" in text
    assert text.endswith("reset()\n")


def test_java_output():
    text = emit('java', parse_file(EXAMPLES / 'procedures.bb'))
    assert text.startswith("public class Main {\n    static int[] add(int a, int b) { // a becomes a + b\n")
    assert "        while (b != 0) {\n            a += 1;\n            b -= 1;\n        }\n" in text
    assert "        return new int[] {a, b};\n    }\n" in text
    assert "    public static void main(String[] argv) {\n        int x = 0;\n        int y = 0;\n" in text
    assert "        { int[] __ret = add(x, y); x = __ret[0]; } // x += y\n" in text
    assert text.endswith("    }\n}\n")


def test_java_declares_loop_locals_once_per_frame():
    text = emit('java', parse_file(EXAMPLES / 'multiply.bb'))
    for name in 'xyzw':
        assert text.count(f"int {name} = 0;") == 1


def test_cpp_output():
    text = emit('cpp', parse_file(EXAMPLES / 'procedures.bb'))
    assert text.startswith("#include <tuple>\n\nstd::tuple<int, int> add(int a, int b) { // a becomes a + b\n")
    assert "    return std::make_tuple(a, b);\n}\n" in text
    assert "int main() {\n    int x = 0;\n    int y = 0;\n" in text
    assert "    std::tie(x, std::ignore) = add(x, y); // x += y\n" in text
    assert text.endswith("    return 0;\n}\n")


def test_rust_output():
    text = emit('rust', parse_file(EXAMPLES / 'procedures.bb'))
    assert text.startswith("fn add(mut a: i32, mut b: i32) -> (i32, i32) { // a becomes a + b\n")
    assert "    while b != 0 {\n        a += 1;\n        b -= 1;\n    }\n    (a, b)\n}\n" in text
    assert "fn main() {\n    let mut x: i32 = 0;\n    let mut y: i32 = 0;\n" in text
    assert "    (x, _) = add(x, y); // x += y\n" in text


def test_rust_procedure_locals_exclude_parameters():
    program = parse_program(dedent("""\
        func twice(a, out);
            clear out;
            clear t;
            while a not 0 do;
                incr out;
                incr out;
                decr a;
            end;
        end;
        clear x;
        clear y;
        twice(x, &y);
    """))
    text = emit('rust', program)
    assert "fn twice(mut a: i32, mut out: i32) -> (i32, i32) {\n    let mut t: i32 = 0;\n" in text
    assert "    (_, y) = twice(x, y);\n" in text


def test_single_parameter_tuples():
    program = parse_program("func bump(a);\n    incr a;\nend;\nclear x;\nbump(&x);\n")
    assert "(x,) = bump(x)" in emit('python', program)
    assert "return (a,)" in emit('python', program)
    assert "fn bump(mut a: i32) -> (i32,) {" in emit('rust', program)
    assert "(x,) = bump(x);" in emit('rust', program)


@pytest.mark.parametrize('backend', sorted(BACKENDS))
def test_comments_follow_their_command(backend):
    program = parse_file(EXAMPLES / 'procedures.bb')
    text = emit(backend, program)
    marker = COMMENT_MARKERS[backend]
    [call_line] = [l for l in text.splitlines() if l.endswith(marker + ' x += y')]
    assert 'add(' in call_line
    [def_line] = [l for l in text.splitlines() if l.endswith(marker + ' a becomes a + b')]
    assert 'add' in def_line


def test_write_all(tmp_path):
    program = parse_file(EXAMPLES / 'procedures.bb')
    written = write_all(program, tmp_path / 'out')
    assert sorted(p.name for p in written) == ['Main.java', 'format.bb', 'main.cpp', 'main.py', 'main.rs']
    assert (tmp_path / 'out' / 'format.bb').read_text(encoding='utf-8') == emit('format', program)


def test_write_artifact_failure(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory', encoding='utf-8')
    program = parse_file(EXAMPLES / 'countdown.bb')
    with pytest.raises(EmitError) as exc:
        write_artifact('rust', program, blocker / 'main.rs')
    assert exc.value.backend == 'rust'
    with pytest.raises(EmitError) as exc:
        write_all(program, blocker)
    assert exc.value.backend == 'format'


def test_write_all_keep_going_reports_every_failure(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory', encoding='utf-8')
    with pytest.raises(EmitError) as exc:
        write_all(parse_file(EXAMPLES / 'countdown.bb'), blocker, keep_going=True)
    assert exc.value.backend == 'format, python, java, rust, cpp'


def test_unknown_backend():
    with pytest.raises(ValueError):
        get_emitter('cobol')


LOOP_CLOSERS = {'format': 'end;', 'python': '', 'java': '}', 'rust': '}', 'cpp': '}'}


@pytest.mark.parametrize('backend', sorted(BACKENDS))
def test_loop_comments_follow_header_and_end(backend):
    text = emit(backend, parse_file(EXAMPLES / 'multiply.bb'))
    marker = COMMENT_MARKERS[backend]
    lines = text.splitlines()
    [header] = [l for l in lines if l.endswith(marker + ' outer loop')]
    assert header.lstrip().startswith('while') and 'x' in header
    [closer] = [l for l in lines if l.endswith(marker + ' product ready')]
    # python keeps the comment as its own line at the end of the loop body
    assert closer.strip() == (LOOP_CLOSERS[backend] + ' ' + marker + ' product ready').strip()
    assert text.count('product ready') == 1


RESERVED_NAMES = dedent("""\
    func class(a, _);
        incr a;
        incr _;
    end;
    clear int;
    incr int;
    clear fn;
    clear def;
    clear def_;
    clear argv;
    clear _;
    clear main;
    class(&int, &_);
""")


def test_python_renames_keywords():
    text = emit('python', parse_program(RESERVED_NAMES))
    assert "def class_(a, __):\n" in text
    assert "def__ = 0\n" in text
    assert "def_ = 0\n" in text
    assert "(int, __) = class_(int, __)\n" in text
    compile(text, 'main.py', 'exec')
    namespace = {}
    exec(text, namespace)
    assert namespace['int'] == 2
    assert namespace['__'] == 1
    assert namespace['def__'] == 0


def test_java_renames_keywords_and_generated_names():
    text = emit('java', parse_program(RESERVED_NAMES))
    assert "    static int[] class_(int a, int __) {\n" in text
    assert "        int int_ = 0;\n" in text
    assert "        int argv_ = 0;\n" in text
    assert "        int __ = 0;\n" in text
    assert "int fn = 0;" in text
    assert "{ int[] __ret = class_(int_, __); int_ = __ret[0]; __ = __ret[1]; }" in text
    assert "int int = 0;" not in text


def test_java_renames_result_name():
    text = emit('java', parse_program("func f(a);\nend;\nclear __ret;\nf(&__ret);\n"))
    assert "int __ret_ = 0;" in text
    assert "{ int[] __ret = f(__ret_); __ret_ = __ret[0]; }" in text


def test_cpp_renames_keywords():
    text = emit('cpp', parse_program(RESERVED_NAMES))
    assert "std::tuple<int, int> class_(int a, int _) {\n" in text
    assert "    int int_ = 0;\n" in text
    assert "    int main_ = 0;\n" in text
    assert "    std::tie(int_, _) = class_(int_, _);\n" in text


def test_rust_renames_keywords():
    text = emit('rust', parse_program(RESERVED_NAMES))
    assert "fn class(mut a: i32, mut __: i32) -> (i32, i32) {\n" in text
    assert "    let mut fn_: i32 = 0;\n" in text
    assert "    let mut __: i32 = 0;\n" in text
    assert "    let mut main_: i32 = 0;\n" in text
    assert "    (int, __) = class(int, __);\n" in text
    assert "let mut fn:" not in text


def test_brace_comments_drop_trailing_backslash():
    program = parse_program("clear x;  // c:\\temp\\\nincr x;\n")
    assert program.comments == {1: ' c:\\temp\\'}
    for backend in ('java', 'cpp', 'rust'):
        text = emit(backend, program)
        assert 'x = 0; // c:\\temp\n' in text
    assert 'clear x; // c:\\temp\\\n' in emit('format', program)
