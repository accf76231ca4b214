"""
Renders Lagoon values as the text `println` writes.
"""
import math
import collections.abc

from lagoon.lagoon_datatypes import (
    StructType, StructInstance, TypeDescriptor, BoundMethod
)


class Printer:
    """Formats Lagoon values the way the language displays them."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, StructInstance): return self._pformat_instance
        if isinstance(obj, StructType): return self._pformat_struct
        if isinstance(obj, TypeDescriptor): return self._pformat_type
        if isinstance(obj, collections.abc.Mapping): return self._pformat_dict
        if isinstance(obj, list): return self._pformat_list
        if callable(obj): return self._pformat_function
        return lambda o, l: str(o)

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_float,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
            list: self._pformat_list,
            dict: self._pformat_dict,
            BoundMethod: self._pformat_bound_method,
        }

    def _pformat_primitive(self, obj, level):
        return str(obj)

    def _pformat_str(self, obj, level):
        return obj

    def _pformat_float(self, obj, level):
        if math.isnan(obj):
            return 'NaN'
        if math.isinf(obj):
            return 'inf' if obj > 0 else '-inf'
        # Integral numbers print without a fractional part
        if obj.is_integer():
            return str(int(obj))
        return repr(obj)

    def _pformat_bool(self, obj, level):
        return 'true' if obj else 'false'

    def _pformat_none(self, obj, level):
        return 'null'

    def _pformat_list(self, obj, level):
        inner = ", ".join(self.pformat(item, level + 1) for item in obj)
        return f"[{inner}]"

    def _pformat_dict(self, obj, level):
        if not obj:
            return "{}"
        inner = ", ".join(f"{key}: {self.pformat(value, level + 1)}" for key, value in obj.items())
        return f"{{{inner}}}"

    def _pformat_function(self, obj, level):
        name = getattr(obj, '__name__', None) or type(obj).__name__
        return f"<{name}>"

    def _pformat_bound_method(self, obj, level):
        return f"<{obj.name}>"

    def _pformat_type(self, obj, level):
        return f"<type:{obj.name}>"

    def _pformat_struct(self, obj, level):
        members = list(obj.fields) + [f"{name}()" for name in obj.methods.names('static')]
        if not members:
            return f"<struct:{obj.name}> {{}}"
        return f"<struct:{obj.name}> {{ {', '.join(members)} }}"

    def _pformat_instance(self, obj, level):
        return f"<{obj.definition.name}>"
