"""
Compiler pipeline: screen documents in, generated source files out.
"""

from .formatting import format_output
from .pipeline import (
    CompileError,
    CompileResult,
    CompileSummary,
    compile_from_memory,
    compile_project,
    write_output,
)

__all__ = [
    "CompileError",
    "CompileResult",
    "CompileSummary",
    "compile_from_memory",
    "compile_project",
    "format_output",
    "write_output",
]
