# =============================================================================
# lambda6 - Operation dispatch for AWS Lambda handlers
# =============================================================================
# USAGE:
#     from lambda6 import Handler, operation
#
#     class MyHandler(Handler):
#
#         @operation
#         def echo_values_from_payload(self, payload):
#             return {"oldValue1": payload["value1"]}
#
#     lambda_handler = MyHandler().as_lambda()
# =============================================================================

from lambda6.runtime import (
    Deps,
    EndpointNotFoundError,
    Handler,
    HandlerOptions,
    InvocationContext,
    Lambda6Error,
    operation,
)
from lambda6.app import lambda_handler_for

__version__ = "2.0.0"

__all__ = [
    "Deps",
    "EndpointNotFoundError",
    "Handler",
    "HandlerOptions",
    "InvocationContext",
    "Lambda6Error",
    "lambda_handler_for",
    "operation",
]
