import pytest

from lagoon.lagoon_registry import (
    TypeRegistry, BUILTIN_TYPES, default_registry, register_method, call_method, call_static,
)
from lagoon.lagoon_datatypes import (
    StructType, BoundMethod, type_name,
    UnknownTypeError, UndefinedMethodError, InvalidMethodAssignmentError, TypeRedefinitionError,
)


@pytest.fixture
def registry():
    return TypeRegistry()


def test_registry_has_every_builtin_type(registry):
    for name in BUILTIN_TYPES:
        assert registry.resolve(name).name == name


def test_resolve_accepts_python_builtin_classes(registry):
    assert registry.resolve(list) is registry.resolve("list")
    assert registry.resolve(int) is registry.resolve("number")
    assert registry.resolve(float) is registry.resolve("number")
    assert registry.resolve(bool) is registry.resolve("bool")
    assert registry.resolve(str) is registry.resolve("string")


def test_resolve_unknown_type_raises(registry):
    with pytest.raises(UnknownTypeError):
        registry.resolve("widget")
    with pytest.raises(UnknownTypeError):
        registry.resolve(set)

# --- Instance methods ---

def test_instance_method_receives_receiver(registry):
    registry.register_method("list", "second", lambda items: items[1], is_instance_method=True)
    assert registry.call_method([10, 20, 30], "second") == 20


def test_instance_method_reregistration_replaces(registry):
    calls = []
    registry.register_method("string", "foo", lambda s: calls.append(("cb", s)), True)
    registry.call_method("x", "foo")
    registry.register_method("string", "foo", lambda s: calls.append(("cb2", s)), True)
    registry.call_method("y", "foo")
    registry.call_method("z", "foo")
    assert calls == [("cb", "x"), ("cb2", "y"), ("cb2", "z")]


def test_get_method_returns_bound_method(registry):
    registry.register_method("number", "double", lambda n: n * 2, True)
    method = registry.get_method(21, "double")
    assert isinstance(method, BoundMethod)
    assert method() == 42


def test_instance_methods_do_not_leak_between_types(registry):
    registry.register_method("list", "size", lambda items: len(items), True)
    with pytest.raises(UndefinedMethodError) as exc:
        registry.call_method(5, "size")
    assert str(exc.value) == "Undefined method: number.size()"


def test_bool_is_its_own_type(registry):
    registry.register_method("number", "inc", lambda n: n + 1, True)
    with pytest.raises(UndefinedMethodError):
        registry.call_method(True, "inc")
    registry.register_method("bool", "flip", lambda b: not b, True)
    assert registry.call_method(True, "flip") is False


def test_registered_instance_method_shadows_host_method(registry):
    registry.register_method("string", "upper", lambda s: "shadowed", True)
    assert registry.call_method("abc", "upper") == "shadowed"


def test_unregistered_name_falls_back_to_host(registry):
    assert registry.call_method("abc", "upper") == "ABC"
    assert registry.call_method([3, 1, 3], "count", 3) == 2


def test_private_host_attributes_are_not_exposed(registry):
    with pytest.raises(UndefinedMethodError):
        registry.get_method("abc", "__len__")


def test_unknown_method_raises(registry):
    with pytest.raises(UndefinedMethodError) as exc:
        registry.call_method([1], "flatten")
    assert exc.value.type_name == "list"
    assert exc.value.method == "flatten"

# --- Static methods ---

def test_static_method_on_builtin_type(registry):
    registry.register_method("number", "zero", lambda: 0)
    assert registry.call_static("number", "zero") == 0


def test_static_and_instance_tables_are_separate(registry):
    registry.register_method("number", "zero", lambda: 0)
    with pytest.raises(UndefinedMethodError):
        registry.call_method(5, "zero")
    registry.register_method("number", "half", lambda n: n / 2, True)
    with pytest.raises(UndefinedMethodError):
        registry.call_static("number", "half")


def test_static_method_missing_raises(registry):
    with pytest.raises(UndefinedMethodError) as exc:
        registry.get_static("string", "nope")
    assert str(exc.value) == "Undefined method: string.nope()"


def test_register_rejects_non_callable(registry):
    with pytest.raises(InvalidMethodAssignmentError):
        registry.register_method("list", "oops", 42, True)

# --- Structs ---

def test_struct_registration_same_call_shape_as_builtins(registry):
    point = registry.define_struct("Point", ["x", "y"])
    registry.register_method(point, "origin", lambda: point(0, 0))
    registry.register_method(point, "sum", lambda p: p.get("x") + p.get("y"), True)

    origin = registry.call_static(point, "origin")
    assert origin.fields == {"x": 0, "y": 0}
    assert registry.call_method(point(2, 3), "sum") == 5
    # Registered structs are also reachable by name
    assert registry.resolve("Point") is point


@pytest.mark.parametrize("name", BUILTIN_TYPES)
def test_struct_cannot_take_a_builtin_name(registry, name):
    builtin = registry.resolve(name)
    with pytest.raises(TypeRedefinitionError) as exc:
        registry.define_struct(name, ["x"])
    assert str(exc.value) == f"Cannot redefine built-in type {name}."
    assert registry.resolve(name) is builtin


def test_builtin_methods_survive_rejected_redefinition(registry):
    registry.register_method("list", "size", lambda items: len(items), True)
    with pytest.raises(TypeRedefinitionError):
        registry.define_struct("list", ["x"])
    assert registry.call_method([1, 2], "size") == 2


def test_builtin_type_value_reports_type(registry):
    assert type_name(registry.resolve("number")) == "type"
    assert type_name(registry.define_struct("Point")) == "struct"


def test_struct_type_value_dispatches_to_static_table(registry):
    point = registry.define_struct("Point", ["x"])
    registry.register_method(point, "make", lambda x: point(x))
    assert registry.call_method(point, "make", 7).get("x") == 7


def test_struct_instance_callable_field_is_a_method(registry):
    counter = StructType("Counter", ["step"])
    c = counter(step=lambda: "stepped")
    assert registry.call_method(c, "step") == "stepped"


def test_struct_instance_plain_field_is_not_a_method(registry):
    counter = StructType("Counter", ["count"])
    with pytest.raises(UndefinedMethodError) as exc:
        registry.call_method(counter(count=1), "count")
    assert exc.value.type_name == "Counter"


def test_assign_method_on_type(registry):
    point = registry.define_struct("Point")
    registry.assign_method(point, "zero", lambda: 0)
    assert registry.call_static(point, "zero") == 0


def test_assign_method_rejects_non_type_or_non_callable(registry):
    point = registry.define_struct("Point")
    with pytest.raises(InvalidMethodAssignmentError) as exc:
        registry.assign_method("abc", "zero", lambda: 0)
    assert str(exc.value) == "Cannot assign method to static property of type string."
    with pytest.raises(InvalidMethodAssignmentError):
        registry.assign_method(point, "zero", 0)

# --- Default registry ---

def test_default_registry_is_shared_and_has_extensions():
    reg = default_registry()
    assert reg is default_registry()
    assert reg.call_method([], "isEmpty") is True
    assert reg.call_method("ab", "finish", "c") == "abc"


def test_module_level_helpers_use_given_registry(registry):
    register_method("number", "zero", lambda: 0, registry=registry)
    assert call_static("number", "zero", registry=registry) == 0
    register_method("list", "head", lambda items: items[0], True, registry=registry)
    assert call_method([9, 8], "head", registry=registry) == 9
