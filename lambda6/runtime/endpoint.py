# =============================================================================
# Endpoint Registry
# =============================================================================
# An endpoint is a handler method carrying EndpointMetadata. Only methods
# registered with @operation are visible to dispatch; helper methods stay
# private even when an incoming operation names them.
#
# USAGE:
#     class MyHandler(Handler):
#
#         @operation
#         def echo(self, payload):
#             return {"operation": self.operation}
#
#         @operation(category="users", description="Create a user")
#         async def create_user(self, payload):
#             ...
# =============================================================================

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

METADATA_KEY = "_lambda6_metadata"

F = TypeVar("F", bound=Callable[..., Any])


def check_type(obj: Any, name: str, predicate: Callable[[Any], bool]) -> None:
    """Raise TypeError naming `name` and the offending type."""
    if obj is None:
        raise TypeError(f"invalid type for {name}, cannot be None")
    if not predicate(obj):
        raise TypeError(f"invalid type for {name}, cannot be {type(obj).__name__}")


def _unwrap(endpoint: Any) -> Any:
    # Bound methods keep metadata on the underlying function
    return getattr(endpoint, "__func__", endpoint)


def _own_attrs(obj: Any) -> Mapping[str, Any]:
    try:
        return vars(obj)
    except TypeError:
        return {}


def validate_endpoint(endpoint: Any) -> None:
    """Raise TypeError unless `endpoint` is callable."""
    check_type(endpoint, "endpoint", callable)


def _describe(func: Callable[..., Any]) -> str:
    if func.__doc__:
        first = func.__doc__.strip().split("\n")[0].strip()
        if first:
            return first
    return f"Handle {getattr(func, '__name__', 'endpoint')} operation"


def mark_endpoint(func: F, metadata: Optional[Mapping[str, Any]] = None) -> F:
    """
    Attach EndpointMetadata to `func`, making it dispatchable.

    Re-marking an endpoint merges the new metadata over the old one.

    Args:
        func: The method to register
        metadata: Extra metadata entries (category, description, ...)

    Returns:
        The same function, so this can back a decorator
    """
    validate_endpoint(func)
    target = _unwrap(func)
    merged: Dict[str, Any] = {"description": _describe(target)}
    existing = _own_attrs(target).get(METADATA_KEY)
    if isinstance(existing, Mapping):
        merged.update(existing)
    if metadata:
        merged.update(metadata)
    setattr(target, METADATA_KEY, MappingProxyType(merged))
    return func


def operation(func: Optional[F] = None, **metadata: Any):
    """
    Decorator registering a handler method as an operation endpoint.

    Works bare (``@operation``) or with metadata
    (``@operation(category="users")``).
    """
    if func is None:
        def decorator(f: F) -> F:
            return mark_endpoint(f, metadata)
        return decorator
    return mark_endpoint(func, metadata)


def get_endpoint_metadata(endpoint: Any) -> Optional[Mapping[str, Any]]:
    """
    Get the EndpointMetadata attached to an endpoint.

    Returns None if the endpoint was never registered. Raises TypeError if
    the endpoint is not callable or its metadata is not a mapping.
    """
    validate_endpoint(endpoint)
    attrs = _own_attrs(_unwrap(endpoint))
    if METADATA_KEY not in attrs:
        return None
    metadata = attrs[METADATA_KEY]
    check_type(metadata, "endpoint metadata", lambda m: isinstance(m, Mapping))
    return metadata


def is_endpoint(value: Any) -> bool:
    """Check whether a value is a registered endpoint."""
    if not callable(value):
        return False
    metadata = _own_attrs(_unwrap(value)).get(METADATA_KEY)
    return isinstance(metadata, Mapping)


def list_endpoints(cls: type) -> Dict[str, Mapping[str, Any]]:
    """List registered endpoints of a handler type with their metadata."""
    endpoints: Dict[str, Mapping[str, Any]] = {}
    seen = set()
    for klass in cls.__mro__:
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            member = getattr(value, "__func__", value)
            if is_endpoint(member):
                endpoints[name] = _own_attrs(member)[METADATA_KEY]
    return endpoints
