# =============================================================================
# Invocation Context
# =============================================================================
# The object bound as `self` while one endpoint runs. It is an instance of a
# per-handler-class subclass, so handler methods, properties and super()
# behave as they do on the handler itself. Its own fields (operation,
# metadata, event, context) are read-only; the handler's instance attributes
# (options, deps, ...) are read through to the handler.
# A context is built per dispatch and never shared.
# =============================================================================

import inspect
import types
from collections.abc import Mapping, Set
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Optional

_MISSING = object()

# Instance slot holding the handler a context reads through to
_SOURCE = "_lambda6_handler"

# Values that are already immutable or must be kept by reference
_SCALARS = (str, bytes, int, float, complex, bool, type(None), range, frozenset)


class FrozenView:
    """Read-only attribute view over an arbitrary object."""

    __slots__ = ("_target", "_attrs")

    def __init__(self, target: Any, attrs: Mapping) -> None:
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_attrs", attrs)

    def __getattr__(self, name: str) -> Any:
        attrs = object.__getattribute__(self, "_attrs")
        if name in attrs:
            return attrs[name]
        target = object.__getattribute__(self, "_target")
        member = inspect.getattr_static(type(target), name, _MISSING)
        # Methods and properties run against the view, so writes through
        # `self` inside them fail like any other write
        if isinstance(member, types.FunctionType):
            return types.MethodType(member, self)
        if isinstance(member, property) and member.fget is not None:
            return member.fget(self)
        return getattr(target, name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError(f"cannot assign to field '{name}' of a frozen object")

    def __delattr__(self, name: str) -> None:
        raise TypeError(f"cannot delete field '{name}' of a frozen object")

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FrozenView):
            return self._attrs == other._attrs
        return self._attrs == _own_attrs(other)

    __hash__ = None

    def __repr__(self) -> str:
        target = object.__getattribute__(self, "_target")
        return f"FrozenView({type(target).__name__}, {dict(self._attrs)!r})"


def _own_attrs(obj: Any) -> Optional[Mapping]:
    """Instance __dict__ of `obj`, or None when it has none."""
    try:
        return vars(obj)
    except TypeError:
        return None


def deep_freeze(value: Any, _memo: Optional[Dict[int, Any]] = None) -> Any:
    """
    Recursively rebuild `value` so nothing reachable from it can be written.

    Mappings become read-only mapping proxies, lists and tuples become
    tuples (named tuples keep their type), sets become frozensets and
    objects with a __dict__ become FrozenViews. Callables, classes,
    immutable scalars and slots-only objects are kept by reference.
    """
    if isinstance(value, _SCALARS) or isinstance(value, type) or callable(value):
        return value
    if _memo is None:
        _memo = {}
    key = id(value)
    if key in _memo:
        return _memo[key]

    if isinstance(value, Mapping):
        items: Dict[Any, Any] = {}
        frozen = MappingProxyType(items)
        _memo[key] = frozen
        for k, v in value.items():
            items[k] = deep_freeze(v, _memo)
        return frozen
    if isinstance(value, (list, tuple)):
        # A tuple cannot reference itself; a cycle back into this sequence
        # is cut to an empty tuple
        _memo[key] = ()
        members = [deep_freeze(v, _memo) for v in value]
        make = getattr(type(value), "_make", None)
        frozen = make(members) if isinstance(value, tuple) and callable(make) else tuple(members)
        _memo[key] = frozen
        return frozen
    if isinstance(value, Set):
        frozen = frozenset(deep_freeze(v, _memo) for v in value)
        _memo[key] = frozen
        return frozen
    if isinstance(value, bytearray):
        return bytes(value)

    attrs = _own_attrs(value)
    if attrs is None:
        return value
    items = {}
    frozen = FrozenView(value, MappingProxyType(items))
    _memo[key] = frozen
    for k, v in list(attrs.items()):
        items[k] = deep_freeze(v, _memo)
    return frozen


class InvocationContext:
    """
    Per-call `self` for an endpoint.

    Never instantiated directly: create_invocation_context() builds an
    instance of a subclass of both this class and the handler's class.

    Attributes:
        operation: Name of the resolved operation
        metadata: EndpointMetadata of the resolved endpoint
        event: The full event being handled
        context: The external completion object, if any
    """

    def __getattr__(self, name: str) -> Any:
        # Reached only when fields and class members did not match
        handler = self.__dict__.get(_SOURCE)
        attrs = _own_attrs(handler) if handler is not None else None
        if attrs is not None and name in attrs:
            return attrs[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError(f"cannot assign to field '{name}' of invocation context")

    def __delattr__(self, name: str) -> None:
        raise TypeError(f"cannot delete field '{name}' of invocation context")

    def __dir__(self):
        names = set(super().__dir__())
        handler = self.__dict__.get(_SOURCE)
        if handler is not None:
            names |= set(_own_attrs(handler) or ())
        names.discard(_SOURCE)
        return sorted(names)

    def __repr__(self) -> str:
        handler = self.__dict__.get(_SOURCE)
        operation = self.__dict__.get("operation")
        return f"InvocationContext(handler={type(handler).__name__}, operation={operation!r})"


@lru_cache(maxsize=None)
def context_class(handler_cls: type) -> type:
    """The InvocationContext subclass used for instances of `handler_cls`."""
    if issubclass(handler_cls, InvocationContext):
        return handler_cls

    def body(ns: Dict[str, Any]) -> None:
        ns["__module__"] = handler_cls.__module__
        ns["__qualname__"] = f"{handler_cls.__qualname__}.InvocationContext"

    return types.new_class(f"{handler_cls.__name__}InvocationContext",
                           (InvocationContext, handler_cls), {}, body)


def create_invocation_context(handler: Any, fields: Optional[Mapping[str, Any]] = None,
                              deep_copy: bool = False) -> InvocationContext:
    """
    Build a fresh InvocationContext for one endpoint call.

    The result is an instance of the handler's class (its __init__ is not
    run), so `isinstance(self, MyHandler)` and zero-argument super() work
    inside endpoints.

    Args:
        handler: Handler the context falls back to
        fields: Own fields of the context (operation, metadata, event, context)
        deep_copy: Deep-freeze the field values

    Raises:
        TypeError: if `fields` is given and is not a mapping
    """
    if fields is not None:
        if not isinstance(fields, Mapping):
            raise TypeError("fields must be a mapping")
        if deep_copy:
            memo: Dict[int, Any] = {}
            fields = {key: deep_freeze(value, memo) for key, value in fields.items()}

    # A context dispatching again reads through to the same handler
    if isinstance(handler, InvocationContext):
        handler = handler.__dict__[_SOURCE]

    ictx = object.__new__(context_class(type(handler)))
    state = ictx.__dict__
    state.update(fields or {})
    state[_SOURCE] = handler
    return ictx
