# =============================================================================
# Runtime Package - Operation Dispatch Core
# =============================================================================
# Endpoint registration, endpoint resolution, invocation contexts and the
# Handler.handle() dispatch pipeline.
# =============================================================================

from lambda6.runtime.context import FrozenView, InvocationContext, create_invocation_context, deep_freeze
from lambda6.runtime.deps import Deps, create_deps
from lambda6.runtime.endpoint import (
    METADATA_KEY,
    get_endpoint_metadata,
    is_endpoint,
    list_endpoints,
    mark_endpoint,
    operation,
    validate_endpoint,
)
from lambda6.runtime.errors import EndpointNotFoundError, Lambda6Error
from lambda6.runtime.handler import Handler
from lambda6.runtime.options import HandlerOptions, resolve_options
from lambda6.runtime.parse_event import EventSource, detect_event_source, normalize_event

__all__ = [
    "METADATA_KEY",
    "Deps",
    "EndpointNotFoundError",
    "EventSource",
    "FrozenView",
    "Handler",
    "HandlerOptions",
    "InvocationContext",
    "Lambda6Error",
    "create_deps",
    "create_invocation_context",
    "deep_freeze",
    "detect_event_source",
    "get_endpoint_metadata",
    "is_endpoint",
    "list_endpoints",
    "mark_endpoint",
    "normalize_event",
    "operation",
    "resolve_options",
    "validate_endpoint",
]
