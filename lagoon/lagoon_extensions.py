"""
The built-in extension methods installed onto Lagoon's list, string and
number types.

Each extension set is a class whose `_snake_case` methods become
`camelCase` instance methods of its target type (`_is_empty` -> `isEmpty`).
Every method takes the receiver as its first argument and returns a new
value; none of them mutates the receiver.
"""

import inspect
import math
from typing import Any, Callable, Iterator, Optional, Tuple

from lagoon.lagoon_datatypes import to_bool
from lagoon.lagoon_printer import Printer


def lagoon_name(py_name: str) -> str:
    """`_starts_with` -> `startsWith`"""
    head, *rest = py_name.lstrip('_').split('_')
    return head + ''.join(part.capitalize() for part in rest)


class ExtensionSet:
    """Base class: collects the `_name` methods and installs them on `target`."""
    target: str = ""

    def __init__(self, printer: Optional[Printer] = None):
        self.printer = printer or Printer()

    def methods(self) -> Iterator[Tuple[str, Callable]]:
        for name, member in inspect.getmembers(self):
            if name.startswith('_') and not name.startswith('__') and callable(member):
                yield lagoon_name(name), member

    def install(self, registry):
        for name, member in self.methods():
            registry.register_method(self.target, name, member, is_instance_method=True)

    def text_of(self, value: Any) -> str:
        return value if isinstance(value, str) else self.printer.pformat(value)


class ListMethods(ExtensionSet):
    target = "list"

    def _is_empty(self, items):
        return len(items) <= 0

    def _is_not_empty(self, items):
        return not self._is_empty(items)

    def _each(self, items, callback):
        for item in list(items):
            callback(item)
        return None

    def _first(self, items, callback=None):
        if not items:
            return None
        if callback is None:
            return items[0]
        for item in list(items):
            if to_bool(callback(item)):
                return item
        return None

    def _reverse(self, items):
        # list.reverse mutates, so it only ever runs on a copy
        result = list(items)
        result.reverse()
        return result

    def _map(self, items, callback):
        return [callback(item) for item in list(items)]

    def _filter(self, items, callback):
        return [item for item in list(items) if to_bool(callback(item))]

    def _join(self, items, separator):
        return self.text_of(separator).join(self.text_of(item) for item in items)


class StringMethods(ExtensionSet):
    target = "string"

    def _contains(self, text, needle):
        return self.text_of(needle) in text

    def _starts_with(self, text, prefix):
        return text.startswith(self.text_of(prefix))

    def _ends_with(self, text, suffix):
        return text.endswith(self.text_of(suffix))

    def _finish(self, text, suffix):
        suffix = self.text_of(suffix)
        if text.endswith(suffix):
            return text
        return text + suffix

    def _append(self, text, other):
        return text + self.text_of(other)

    def _tap(self, text, callback=None):
        if callback is not None:
            callback(text)
        return text

    def _to_upper(self, text):
        return text.upper()

    def _to_lower(self, text):
        return text.lower()


class NumberMethods(ExtensionSet):
    target = "number"

    def _is_integer(self, number):
        return float(number).is_integer()

    def _is_float(self, number):
        return not float(number).is_integer()

    def _to_fixed(self, number, precision=0):
        precision = int(precision)
        if precision <= 0:
            return float(math.trunc(number))
        # Rounds the binary value, so 2.675 (stored as 2.67499...) gives 2.67
        return round(float(number), precision)


EXTENSION_SETS = (ListMethods, StringMethods, NumberMethods)


def install_extensions(registry, printer: Optional[Printer] = None):
    """Registers every built-in extension method on `registry`."""
    for extension_cls in EXTENSION_SETS:
        extension_cls(printer).install(registry)
    registry._dbg("install_extensions", [cls.target for cls in EXTENSION_SETS])
    return registry
