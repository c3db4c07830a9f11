from .ast_loader import load_source, load_source_file
from .emitter import BINARY_OPERATORS, JavaEmitter, generate, operator_spelling

__all__ = [
    "BINARY_OPERATORS",
    "JavaEmitter",
    "generate",
    "load_source",
    "load_source_file",
    "operator_spelling",
]
