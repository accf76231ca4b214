# lagoon_runtime.py

import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from lagoon.lagoon_config import RuntimeConfig, _dbg
from lagoon.lagoon_datatypes import (
    StructType, UnsupportedOperandError, InvalidIterableError,
    type_name, values_equal,
)
from lagoon.lagoon_extensions import install_extensions
from lagoon.lagoon_printer import Printer
from lagoon.lagoon_registry import TypeRegistry, default_registry

# ===================================================================
# 1. Primitives
# ===================================================================


def contains(needle: Any, haystack: Any, fallback: str = "error") -> bool:
    """The `in` operator: `needle in haystack`.

    Two strings: substring test. A list haystack: element membership, where
    primitives compare by value and lists, objects, struct instances and
    functions compare by identity. Any other pair raises
    UnsupportedOperandError, or answers False when `fallback` is "false".
    """
    if isinstance(needle, str) and isinstance(haystack, str):
        return needle in haystack
    if isinstance(haystack, list):
        return any(values_equal(needle, item) for item in haystack)
    if fallback == "false":
        return False
    raise UnsupportedOperandError("in", type_name(needle), type_name(haystack))


def for_each(target: Any, visitor: Callable, with_index: bool = False) -> None:
    """Calls `visitor` once per element of a list, in index order."""
    if not isinstance(target, list):
        raise InvalidIterableError(type_name(target))
    # Snapshot, so a visitor appending to the list does not extend the loop
    for index, item in enumerate(list(target)):
        if with_index:
            visitor(item, index)
        else:
            visitor(item)
    return None


_printer = Printer()


def println(*values, stream: Optional[TextIO] = None) -> None:
    """Writes each value on its own line. Errors from the stream propagate."""
    out = stream if stream is not None else sys.stdout
    for value in values:
        out.write(_printer.pformat(value) + "\n")
    return None


# `print` in the language; trailing underscore keeps the builtin usable here
print_ = println


# ===================================================================
# 2. Runtime
# ===================================================================

class Runtime:
    """Bundles the primitives, a method registry and an output sink for compiled code."""

    def __init__(self, config: Optional[RuntimeConfig] = None,
                 registry: Optional[TypeRegistry] = None,
                 stdout: Optional[TextIO] = None):
        self.config = config or RuntimeConfig.from_env()
        self.printer = Printer()
        self._stdout = stdout
        if registry is None:
            if self.config.install_extensions:
                registry = install_extensions(TypeRegistry(debug=self.config.debug), self.printer)
            else:
                registry = TypeRegistry(debug=self.config.debug)
        self.registry = registry

        # Names compiled call sites resolve against
        self.globals: Dict[str, Callable] = {
            "println": self.println,
            "print": self.println,
            "type": self.type,
            "__lagoon_in": self.contains,
            "__lagoon_for_each": self.for_each,
            "__lagoon_register_method": self.register_method,
        }

    @classmethod
    def shared(cls, config: Optional[RuntimeConfig] = None) -> 'Runtime':
        """A runtime backed by the process-wide default registry."""
        return cls(config=config, registry=default_registry())

    def _dbg(self, *parts):
        _dbg(*parts, enabled=self.config.debug)

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    # --- Primitives ---
    def type(self, value: Any) -> str:
        return type_name(value)

    def contains(self, needle: Any, haystack: Any) -> bool:
        return contains(needle, haystack, fallback=self.config.membership_fallback)

    def for_each(self, target: Any, visitor: Callable, with_index: bool = False) -> None:
        return for_each(target, visitor, with_index=with_index)

    def println(self, *values) -> None:
        out = self.stdout
        for value in values:
            out.write(self.printer.pformat(value) + "\n")
        return None

    print = println

    # --- Methods ---
    def register_method(self, target_type: Any, name: str, callback: Callable,
                        is_instance_method: bool = False):
        return self.registry.register_method(target_type, name, callback, is_instance_method)

    def assign_method(self, target: Any, name: str, callback: Any):
        return self.registry.assign_method(target, name, callback)

    def get_method(self, value: Any, name: str) -> Callable:
        return self.registry.get_method(value, name)

    def call_method(self, value: Any, name: str, *args):
        self._dbg("call_method", f"{type_name(value)}.{name}", "argc", len(args))
        return self.registry.call_method(value, name, *args)

    def call_static(self, target_type: Any, name: str, *args):
        self._dbg("call_static", name, "argc", len(args))
        return self.registry.call_static(target_type, name, *args)

    def define_struct(self, name: str, fields: Optional[List[str]] = None) -> StructType:
        struct = self.registry.define_struct(name, fields)
        self.globals[name] = struct
        return struct
