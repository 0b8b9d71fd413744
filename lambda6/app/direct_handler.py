# =============================================================================
# Lambda Entry Point
# =============================================================================
# Thin adapter between the synchronous Lambda Python runtime and the async
# Handler.handle() pipeline.
#
# Direct invokes get the endpoint's result (or its error) unchanged.
# API Gateway proxy requests always get a proxy response:
#   200 -> endpoint result as JSON body
#   400 -> bad request body, bad event or operation type (TypeError)
#   404 -> no registered endpoint for the operation
#   500 -> anything else the endpoint raised
# =============================================================================

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

from lambda6.runtime.errors import EndpointNotFoundError
from lambda6.runtime.handler import Handler
from lambda6.runtime.parse_event import EventSource, detect_event_source, normalize_event

logger = logging.getLogger(__name__)

RESPONSE_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def api_response(data: Any, status_code: Optional[int] = None) -> Dict[str, Any]:
    """Format response for API Gateway (REST or HTTP API proxy integration)."""
    return {
        "statusCode": status_code or 200,
        "headers": dict(RESPONSE_HEADERS),
        "body": json.dumps(data, ensure_ascii=False, default=str),
    }


def _error_response(error: Exception) -> Dict[str, Any]:
    if isinstance(error, EndpointNotFoundError):
        return api_response({"statusCode": 404, "error": str(error)}, 404)
    if isinstance(error, TypeError):
        return api_response({"statusCode": 400, "error": str(error)}, 400)
    logger.exception(f"Unhandled endpoint error: {error}")
    return api_response({"statusCode": 500, "error": f"Internal error: {error}"}, 500)


def lambda_handler_for(handler: Handler) -> Callable[[Any, Any], Any]:
    """
    Build a Lambda-compatible (event, context) function for `handler`.

    Usage (in the Lambda module):
        lambda_handler = lambda_handler_for(MyHandler())
    """
    def lambda_handler(event: Any, context: Any = None) -> Any:
        source = detect_event_source(event)
        logger.info(f"LAMBDA_HANDLER source={source} handler={type(handler).__name__}")

        if source != EventSource.API_GATEWAY:
            return asyncio.run(handler.handle(event, context))

        try:
            normalized, _ = normalize_event(event)
            result = asyncio.run(handler.handle(normalized, context))
        except Exception as e:
            return _error_response(e)
        return api_response(result)

    lambda_handler.__name__ = f"{type(handler).__name__}_lambda_handler"
    lambda_handler.__doc__ = f"Lambda entry point for {type(handler).__name__}."
    return lambda_handler
