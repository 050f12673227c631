"""Code emitters for BareBones programs.

Five backends share one contract: `emit(program, comments) -> str`.
`write_all` renders every backend into its conventional file name inside an
output directory.
"""

from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from ..ast import Block
from ..errors import EmitError
from ..parser import ParsedProgram
from .base import Emitter
from .canonical import FormatEmitter
from .cpp import CppEmitter
from .java import JavaEmitter
from .python import PythonEmitter
from .rust import RustEmitter


BACKENDS: Dict[str, Type[Emitter]] = {
    FormatEmitter.name: FormatEmitter,
    PythonEmitter.name: PythonEmitter,
    JavaEmitter.name: JavaEmitter,
    RustEmitter.name: RustEmitter,
    CppEmitter.name: CppEmitter,
}


def get_emitter(name: str) -> Emitter:
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ValueError(f"unknown backend {name!r}; expected one of {', '.join(BACKENDS)}") from None


def write_artifact(backend: str, program: Union[ParsedProgram, Block], path,
                   comments: Optional[Dict[int, str]] = None) -> Path:
    emitter = get_emitter(backend)
    text = emitter.emit(program, comments)
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise EmitError(backend, str(path), e.strerror or str(e)) from e
    return path


def write_all(program: Union[ParsedProgram, Block], out_dir, comments: Optional[Dict[int, str]] = None,
              keep_going: bool = False) -> List[Path]:
    """Write one artifact per backend into `out_dir`.

    The first failure is raised immediately unless `keep_going` is set, in
    which case every artifact is attempted and the failures are reported
    together afterwards.
    """
    out_dir = Path(out_dir)
    written: List[Path] = []
    failures: List[EmitError] = []
    for name, cls in BACKENDS.items():
        try:
            written.append(write_artifact(name, program, out_dir / cls.filename, comments))
        except EmitError as e:
            if not keep_going:
                raise
            failures.append(e)
    if failures:
        first = failures[0]
        reason = '; '.join(f"{f.path}: {f.reason}" for f in failures)
        raise EmitError(', '.join(f.backend for f in failures), first.path, reason)
    return written


__all__ = [
    'BACKENDS',
    'Emitter',
    'FormatEmitter',
    'PythonEmitter',
    'JavaEmitter',
    'RustEmitter',
    'CppEmitter',
    'get_emitter',
    'write_artifact',
    'write_all',
]
