# =============================================================================
# Handler - Operation Dispatch
# =============================================================================
# Base class for Lambda handlers. Subclasses add operations as methods and
# register them with @operation. handle() then:
#   1. Extracts operation and payload from the event (keys from options)
#   2. Resolves self.<operation> and validates it as an endpoint
#   3. Builds a new InvocationContext falling back to this handler
#   4. Invokes the endpoint with the context bound as `self`
#   5. Calls context.succeed() / context.fail() when present
#   6. Returns the result, or re-raises the error
#
# USAGE:
#     from lambda6 import Handler, operation
#
#     class MyHandler(Handler):
#
#         @operation
#         def echo_operation_name(self, payload):
#             return {"operationName": self.operation}
#
#     lambda_handler = MyHandler().as_lambda()
# =============================================================================

import inspect
import logging
import types
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from lambda6.runtime.context import InvocationContext, create_invocation_context
from lambda6.runtime.deps import Deps, create_deps
from lambda6.runtime.endpoint import (
    METADATA_KEY,
    check_type,
    get_endpoint_metadata,
    list_endpoints,
    validate_endpoint,
)
from lambda6.runtime.errors import EndpointNotFoundError
from lambda6.runtime.options import HandlerOptions, resolve_options

logger = logging.getLogger(__name__)

# Member kinds that can be dispatched to
_ENDPOINT_TYPES = (types.FunctionType, types.MethodType, staticmethod, classmethod)


def _call_context_fn(context: Any, name: str, value: Any) -> None:
    fn = getattr(context, name, None) if context is not None else None
    if callable(fn):
        fn(value)


class Handler:
    """
    Base class for Lambda handlers.

    Extend it and add operations as methods registered with ``@operation``.
    Pass ``options`` (or keyword overrides) to change the event keys or to
    enable deep-frozen invocation contexts; any other option is kept and is
    readable as ``self.options["name"]`` inside endpoints.

    Args:
        options: Mapping (camelCase or snake_case keys) or HandlerOptions
        deps: AWS dependency container; a default one is created when omitted
              (its clients are still built on first use)
        **overrides: Option overrides applied last
    """

    metadata_key = METADATA_KEY

    def __init__(self, options: Optional[Mapping[str, Any]] = None,
                 deps: Optional[Deps] = None, **overrides: Any) -> None:
        self.options: HandlerOptions = resolve_options(options, **overrides)
        self.deps: Deps = deps if deps is not None else create_deps()

    @staticmethod
    def default_options() -> HandlerOptions:
        """Options used when neither environment nor caller set any."""
        return HandlerOptions()

    @classmethod
    def operations(cls) -> Dict[str, Mapping[str, Any]]:
        """Registered operations of this handler type with their metadata."""
        return list_endpoints(cls)

    # Kept on the class for introspection from handler code and tests
    validate_endpoint = staticmethod(validate_endpoint)
    get_endpoint_metadata = staticmethod(get_endpoint_metadata)

    # ==========================================================================
    # Dispatch
    # ==========================================================================

    async def handle(self, event: Optional[Mapping[str, Any]], context: Any = None, *args: Any) -> Any:
        """
        Handle one event.

        Args:
            event: The Lambda event to process
            context: Completion object exposing succeed()/fail(), optional
            *args: Extra arguments passed to the endpoint after the payload

        Returns:
            The endpoint's return value (awaited if it was awaitable)

        Raises:
            TypeError: if the event is missing or the operation is not a string
            EndpointNotFoundError: if no registered endpoint matches
            Exception: whatever the endpoint raised, unchanged
        """
        if event is None:
            raise TypeError("event is required")
        if not isinstance(event, Mapping):
            raise TypeError("event must be a mapping")

        operation = event.get(self.options.operation_key)
        payload = event.get(self.options.payload_key, {})

        try:
            endpoint, metadata = self.resolve_endpoint(operation)
            logger.info(f"Dispatching operation={operation} handler={type(self).__name__}")
            fields = {
                "metadata": metadata,
                "operation": operation,
                "event": event,
                "context": context,
            }
            result = await self.invoke(endpoint, fields, payload, *args)
        except Exception as e:
            _call_context_fn(context, "fail", e)
            raise

        _call_context_fn(context, "succeed", result)
        return result

    def create_invocation_context(self, fields: Optional[Mapping[str, Any]] = None) -> InvocationContext:
        """
        Create the `self` object for one endpoint invocation.

        Fields become read-only attributes; everything else falls back to
        this handler. With options.deep_copy the field values are deeply
        frozen.
        """
        return create_invocation_context(self, fields, deep_copy=self.options.deep_copy)

    async def invoke(self, endpoint: Callable[..., Any], fields: Optional[Mapping[str, Any]],
                     payload: Any = None, *args: Any) -> Any:
        """Invoke an endpoint with a fresh context, awaiting async results."""
        ictx = self.create_invocation_context(fields)
        func = getattr(endpoint, "__func__", None)
        if func is not None and getattr(endpoint, "__self__", None) is self:
            result = func(ictx, payload, *args)
        else:
            # Static methods and plain callables have no `self` to rebind
            result = endpoint(payload, *args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def resolve_endpoint(self, operation: Any) -> Tuple[Callable[..., Any], Mapping[str, Any]]:
        """
        Resolve an operation name to an endpoint of this handler.

        Missing members, non-callable members and unregistered methods all
        raise the same EndpointNotFoundError, so callers cannot map the
        handler's private surface.

        Returns:
            (endpoint, metadata)

        Raises:
            TypeError: if `operation` is not a string
            EndpointNotFoundError: if no registered endpoint matches
        """
        check_type(operation, "operation", lambda op: isinstance(op, str))

        # Look the member up without running descriptors, so properties and
        # other computed attributes are never evaluated by a lookup
        member = inspect.getattr_static(self, operation, None)
        if isinstance(member, _ENDPOINT_TYPES):
            endpoint = getattr(self, operation)
            try:
                metadata = get_endpoint_metadata(endpoint)
            except TypeError as e:
                logger.error(f"Invalid endpoint for operation {operation!r}: {e}")
            else:
                if metadata is not None:
                    return endpoint, metadata

        raise EndpointNotFoundError(operation)

    def as_lambda(self) -> Callable[[Any, Any], Any]:
        """Synchronous (event, context) entry point for the Lambda runtime."""
        from lambda6.app.direct_handler import lambda_handler_for
        return lambda_handler_for(self)
