from lagoon.lagoon_config import RuntimeConfig
from lagoon.lagoon_datatypes import (
    LagoonError, UnsupportedOperandError, UndefinedMethodError, UndefinedFieldError,
    InvalidIterableError, InvalidMethodAssignmentError, UnknownTypeError, TypeRedefinitionError, ConfigError,
    TypeDescriptor, StructType, StructInstance, BoundMethod, MethodTable,
    type_name,
)
from lagoon.lagoon_registry import (
    TypeRegistry, default_registry, register_method, call_method, call_static,
)
from lagoon.lagoon_runtime import Runtime, contains, for_each, println, print_
from lagoon.lagoon_printer import Printer

__all__ = [
    "RuntimeConfig", "Runtime", "Printer",
    "LagoonError", "UnsupportedOperandError", "UndefinedMethodError", "UndefinedFieldError",
    "InvalidIterableError", "InvalidMethodAssignmentError", "UnknownTypeError", "TypeRedefinitionError", "ConfigError",
    "TypeDescriptor", "StructType", "StructInstance", "BoundMethod", "MethodTable",
    "TypeRegistry", "default_registry", "register_method", "call_method", "call_static",
    "type_name", "contains", "for_each", "println", "print_",
]
