"""
Method registration and dispatch for Lagoon value types.

Each value tag has a TypeDescriptor owning an instance and a static method
table. Compiled code extends types through `register_method` and calls
through `call_method` / `call_static`; lookups consult the registered
tables first and fall back to the host's own behavior.
"""

import threading
from typing import Any, Callable, Dict, Optional

from lagoon.lagoon_config import _dbg
from lagoon.lagoon_datatypes import (
    TypeDescriptor, StructType, StructInstance, BoundMethod,
    UnknownTypeError, UndefinedMethodError, InvalidMethodAssignmentError, TypeRedefinitionError,
    INSTANCE, STATIC, type_name,
)

BUILTIN_TYPES = ("bool", "number", "string", "list", "object", "function", "null")

# Python classes accepted wherever a built-in type name is
_PY_TYPES = {
    bool: "bool",
    int: "number",
    float: "number",
    str: "string",
    list: "list",
    dict: "object",
    type(None): "null",
}


class TypeRegistry:
    """Process-wide table of type descriptors keyed by type name."""

    def __init__(self, debug: Optional[bool] = None):
        self.debug = debug
        self.types: Dict[str, TypeDescriptor] = {name: TypeDescriptor(name) for name in BUILTIN_TYPES}
        self._lock = threading.Lock()

    def _dbg(self, *parts):
        _dbg(*parts, enabled=self.debug)

    # --- Types ---
    def resolve(self, target_type: Any) -> TypeDescriptor:
        """Returns the descriptor for a descriptor, a type name or a Python builtin class."""
        if isinstance(target_type, TypeDescriptor):
            return target_type
        if isinstance(target_type, type) and target_type in _PY_TYPES:
            target_type = _PY_TYPES[target_type]
        if isinstance(target_type, str):
            descriptor = self.types.get(target_type)
            if descriptor is not None:
                return descriptor
        raise UnknownTypeError(str(target_type))

    def add_type(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        if descriptor.name in BUILTIN_TYPES:
            raise TypeRedefinitionError(descriptor.name)
        with self._lock:
            self.types[descriptor.name] = descriptor
        self._dbg("add_type", descriptor.name)
        return descriptor

    def define_struct(self, name: str, fields=None) -> StructType:
        return self.add_type(StructType(name, fields))

    def descriptor_for(self, value: Any) -> Optional[TypeDescriptor]:
        if isinstance(value, StructInstance):
            return value.definition
        return self.types.get(type_name(value))

    # --- Registration ---
    def register_method(self, target_type: Any, name: str, callback: Callable,
                        is_instance_method: bool = False):
        """Attach `callback` to a type under `name`.

        Instance methods receive the receiver as their first argument. A name
        registered twice keeps only the last callback.
        """
        descriptor = self.resolve(target_type)
        if not callable(callback):
            raise InvalidMethodAssignmentError(descriptor.name)
        kind = INSTANCE if is_instance_method else STATIC
        entry = descriptor.methods.set(name, callback, kind)
        self._dbg("register_method", f"{descriptor.name}.{name}", kind)
        return entry

    def assign_method(self, target: Any, name: str, callback: Any):
        """`Type.name = fn` in compiled code: a static method on a type."""
        if not isinstance(target, TypeDescriptor) or not callable(callback):
            raise InvalidMethodAssignmentError(type_name(target))
        return self.register_method(target, name, callback, is_instance_method=False)

    # --- Dispatch ---
    def get_method(self, value: Any, name: str) -> Callable:
        """Resolves `value.name` to a callable.

        Order: registered instance methods, then (for type values) static
        methods, then host-native members, struct fields included.
        """
        if isinstance(value, TypeDescriptor):
            return self.get_static(value, name)

        descriptor = self.descriptor_for(value)
        if descriptor is not None:
            entry = descriptor.methods.get(name, INSTANCE)
            if entry is not None:
                return BoundMethod(entry, value)

        if isinstance(value, StructInstance):
            member = value.fields.get(name)
            if callable(member):
                return member
        elif not name.startswith('_'):
            member = getattr(value, name, None)
            if callable(member):
                self._dbg("get_method", "host fallback", f"{type_name(value)}.{name}")
                return member

        raise UndefinedMethodError(type_name(value), name)

    def call_method(self, value: Any, name: str, *args):
        return self.get_method(value, name)(*args)

    def get_static(self, target_type: Any, name: str) -> Callable:
        descriptor = self.resolve(target_type)
        entry = descriptor.methods.get(name, STATIC)
        if entry is None:
            raise UndefinedMethodError(descriptor.name, name)
        return entry.callback

    def call_static(self, target_type: Any, name: str, *args):
        return self.get_static(target_type, name)(*args)


# ===================================================================
# Default registry
# ===================================================================

_default: Optional[TypeRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> TypeRegistry:
    """The shared registry, created with the built-in extensions on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                from lagoon.lagoon_extensions import install_extensions
                registry = TypeRegistry()
                install_extensions(registry)
                _default = registry
    return _default


def register_method(target_type: Any, name: str, callback: Callable,
                    is_instance_method: bool = False, registry: Optional[TypeRegistry] = None):
    return (registry or default_registry()).register_method(target_type, name, callback, is_instance_method)


def call_method(value: Any, name: str, *args, registry: Optional[TypeRegistry] = None):
    return (registry or default_registry()).call_method(value, name, *args)


def call_static(target_type: Any, name: str, *args, registry: Optional[TypeRegistry] = None):
    return (registry or default_registry()).call_static(target_type, name, *args)
