"""Template package - declarative shape descriptions and their compiler."""

from .compiler import TemplateCompiler, compile_template
from .loader import load_template
from .model import BASIC_TYPES, ExtraStrategy, MissingStrategy, Template, TypeKind

__all__ = [
    "BASIC_TYPES",
    "ExtraStrategy",
    "MissingStrategy",
    "Template",
    "TemplateCompiler",
    "TypeKind",
    "compile_template",
    "load_template",
]
