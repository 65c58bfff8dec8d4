"""iamvalidator - recursive, template-driven data validation.

A template describes the expected shape of a value. ``create_validator``
checks the template once, up front, and returns a :class:`Validator` whose
``validate`` coroutine returns the (possibly transformed) value or raises a
structured :class:`ValidationError`.
"""

from ._version import __version__
from .exceptions import (
    MISSING,
    ConfigurationError,
    ErrorCode,
    HookError,
    IamValidatorError,
    TemplateError,
    ValidationError,
)
from .registry import CustomType, CustomTypeRegistry
from .template import BASIC_TYPES, ExtraStrategy, MissingStrategy, Template, TypeKind, load_template
from .validation import HookOptions
from .validator import Validator, create_validator, create_validator_from_file

__all__ = [
    "BASIC_TYPES",
    "MISSING",
    "ConfigurationError",
    "CustomType",
    "CustomTypeRegistry",
    "ErrorCode",
    "ExtraStrategy",
    "HookError",
    "HookOptions",
    "IamValidatorError",
    "MissingStrategy",
    "Template",
    "TemplateError",
    "TypeKind",
    "ValidationError",
    "Validator",
    "__version__",
    "create_validator",
    "create_validator_from_file",
    "load_template",
]
