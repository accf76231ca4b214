"""
Defines the core data types for the Lagoon runtime support layer.

Lagoon values are plain Python values (bool, int/float, str, list, dict,
callables and None). This module adds the few types the host does not
provide: type descriptors with their method tables, user-defined struct
types and their instances, and the runtime's error hierarchy.
"""

import threading
import collections.abc
from typing import List, Dict, Any, Optional, Callable


# =================================================================
# Errors
# =================================================================

class LagoonError(Exception):
    """Base class for all errors raised by the Lagoon runtime layer."""
    pass


class UnsupportedOperandError(LagoonError, TypeError):
    def __init__(self, operator: str, left: str, right: str):
        super().__init__(f"Unsupported operand kinds for '{operator}': {left} and {right}.")
        self.operator = operator
        self.left = left
        self.right = right


class UndefinedMethodError(LagoonError, AttributeError):
    def __init__(self, type_name: str, method: str):
        super().__init__(f"Undefined method: {type_name}.{method}()")
        self.type_name = type_name
        self.method = method


class UndefinedFieldError(LagoonError, AttributeError):
    def __init__(self, type_name: str, field: str):
        super().__init__(f"Undefined field: {type_name}.{field}")
        self.type_name = type_name
        self.field = field


class InvalidIterableError(LagoonError, TypeError):
    def __init__(self, type_name: str):
        super().__init__(f"Unable to iterate over value of type {type_name}.")
        self.type_name = type_name


class InvalidMethodAssignmentError(LagoonError, TypeError):
    def __init__(self, type_name: str):
        super().__init__(f"Cannot assign method to static property of type {type_name}.")
        self.type_name = type_name


class UnknownTypeError(LagoonError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown type: {self.name}."


class TypeRedefinitionError(LagoonError, ValueError):
    def __init__(self, name: str):
        super().__init__(f"Cannot redefine built-in type {name}.")
        self.name = name


class ConfigError(LagoonError, ValueError):
    pass


# =================================================================
# Method tables
# =================================================================

INSTANCE = "instance"
STATIC = "static"


class MethodEntry:
    """A registered callable tagged with how it is dispatched.

    Instance callbacks always receive the receiver as their first argument;
    static callbacks receive only the call arguments.
    """
    __slots__ = ("name", "callback", "kind")

    def __init__(self, name: str, callback: Callable, kind: str):
        if kind not in (INSTANCE, STATIC):
            raise ValueError(f"Unknown method kind: {kind!r}")
        self.name = name
        self.callback = callback
        self.kind = kind

    def __repr__(self):
        return f"<MethodEntry {self.kind} {self.name}>"


class MethodTable:
    """Name -> MethodEntry mapping split into instance and static sub-tables.

    Registering an existing name replaces the previous entry. Writers take the
    table lock; readers do not.
    """
    def __init__(self):
        self.instance: Dict[str, MethodEntry] = {}
        self.static: Dict[str, MethodEntry] = {}
        self._lock = threading.Lock()

    def _table(self, kind: str) -> Dict[str, MethodEntry]:
        return self.instance if kind == INSTANCE else self.static

    def set(self, name: str, callback: Callable, kind: str) -> MethodEntry:
        entry = MethodEntry(name, callback, kind)
        with self._lock:
            self._table(kind)[name] = entry
        return entry

    def get(self, name: str, kind: str) -> Optional[MethodEntry]:
        return self._table(kind).get(name)

    def remove(self, name: str, kind: str):
        with self._lock:
            self._table(kind).pop(name, None)

    def names(self, kind: str) -> List[str]:
        return list(self._table(kind).keys())

    def __len__(self):
        return len(self.instance) + len(self.static)


class BoundMethod:
    """Supplies the receiver to an instance callback at call time."""
    __slots__ = ("entry", "receiver")

    def __init__(self, entry: MethodEntry, receiver: Any):
        self.entry = entry
        self.receiver = receiver

    @property
    def name(self) -> str:
        return self.entry.name

    def __call__(self, *args):
        return self.entry.callback(self.receiver, *args)

    def __repr__(self):
        return f"<BoundMethod {self.entry.name}>"


# =================================================================
# Core Runtime Types
# =================================================================

class TypeDescriptor:
    """A value tag together with the extension methods attached to it."""
    def __init__(self, name: str):
        self.name = name
        self.methods = MethodTable()

    def __repr__(self):
        return f"<type {self.name}>"


class StructType(TypeDescriptor):
    """A user-defined struct. Accepts method registration exactly like a built-in type."""
    def __init__(self, name: str, fields: Optional[List[str]] = None):
        super().__init__(name)
        self.fields: List[str] = list(fields or [])

    def __call__(self, *args, **kwargs):
        return self.instantiate(*args, **kwargs)

    def instantiate(self, *args, **kwargs) -> 'StructInstance':
        if len(args) > len(self.fields):
            raise TypeError(f"{self.name} expects at most {len(self.fields)} positional fields, got {len(args)}")
        values: Dict[str, Any] = {f: None for f in self.fields}
        for field_name, value in zip(self.fields, args):
            values[field_name] = value
        for field_name, value in kwargs.items():
            if field_name not in values:
                raise UndefinedFieldError(self.name, field_name)
            values[field_name] = value
        return StructInstance(self, values)

    def __repr__(self):
        return f"<struct {self.name}>"


class StructInstance:
    """An instance of a StructType. Fields are stored by name."""
    def __init__(self, definition: StructType, fields: Optional[Dict[str, Any]] = None):
        self.definition = definition
        self.fields: Dict[str, Any] = dict(fields or {})

    def get(self, field: str) -> Any:
        if field in self.fields:
            return self.fields[field]
        raise UndefinedFieldError(self.definition.name, field)

    def set(self, field: str, value: Any):
        if field not in self.definition.fields:
            raise UndefinedFieldError(self.definition.name, field)
        self.fields[field] = value

    def __repr__(self):
        return f"<{self.definition.name}>"


# =================================================================
# Value classification
# =================================================================

COMPOSITE_KINDS = ("list", "object", "function", "struct", "type")


def host_kind(value: Any) -> str:
    """Returns the host primitive-kind name of a Lagoon value.

    Struct instances report the name of their struct.
    """
    if value is None:
        return "null"
    # bool is a subclass of int, so check it before numbers
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, StructInstance):
        return value.definition.name
    if isinstance(value, StructType):
        return "struct"
    # Built-in descriptors, e.g. the `number` type itself
    if isinstance(value, TypeDescriptor):
        return "type"
    if isinstance(value, collections.abc.Mapping):
        return "object"
    if callable(value):
        return "function"
    return "object"


# Host kinds whose Lagoon name differs. Extend this table, do not replace it.
TYPE_NAMES: Dict[str, str] = {
    "boolean": "bool",
}


def type_name(value: Any) -> str:
    """The name the `type()` operator reports for a value."""
    if isinstance(value, StructInstance):
        return value.definition.name
    kind = host_kind(value)
    return TYPE_NAMES.get(kind, kind)


def is_composite(value: Any) -> bool:
    return isinstance(value, StructInstance) or host_kind(value) in COMPOSITE_KINDS


def values_equal(a: Any, b: Any) -> bool:
    """Equality used by membership tests.

    Primitives compare by value, composites (lists, objects, struct
    instances, functions) by identity. Values of different kinds are never
    equal, so 1 and True are distinct.
    """
    if host_kind(a) != host_kind(b):
        return False
    if is_composite(a):
        return a is b
    return a == b


def to_bool(value: Any) -> bool:
    """Lagoon truthiness: true, non-empty strings, positive numbers and functions."""
    if isinstance(value, bool):
        return value
    kind = host_kind(value)
    if kind == "string":
        return len(value) > 0
    if kind == "number":
        return value > 0
    if kind == "function":
        return True
    return False
