# =============================================================================
# Event Parser - Detect and Normalize Lambda Events
# =============================================================================
# API Gateway proxy events carry the operation event as a JSON body; direct
# invokes carry it as the event itself. Both normalize to one event mapping.
# =============================================================================

import base64
import binascii
import json
import logging
from typing import Any, Dict, Mapping, Tuple

logger = logging.getLogger(__name__)


class EventSource:
    """Event source identifiers."""
    API_GATEWAY = "api_gateway"
    DIRECT = "direct"
    UNKNOWN = "unknown"


def detect_event_source(event: Any) -> str:
    """
    Detect the source of a Lambda event.

    Returns one of: api_gateway, direct, unknown
    """
    if not isinstance(event, Mapping):
        return EventSource.UNKNOWN

    # API Gateway HTTP API (v2) or REST API (v1)
    request_context = event.get("requestContext")
    if isinstance(request_context, Mapping):
        if "http" in request_context or "httpMethod" in request_context:
            return EventSource.API_GATEWAY
    if "httpMethod" in event and "body" in event:
        return EventSource.API_GATEWAY

    return EventSource.DIRECT


def _decode_body(event: Mapping[str, Any]) -> Dict[str, Any]:
    body = event.get("body")
    if body is None or body == "":
        return {}
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise TypeError(f"request body is not valid base64-encoded UTF-8: {e}") from e
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TypeError(f"request body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise TypeError(f"request body must be a JSON object, not {type(body).__name__}")
    return body


def normalize_event(event: Any) -> Tuple[Any, str]:
    """
    Normalize a raw Lambda event into an operation event.

    Returns:
        (event, source) - the event to dispatch and the detected source.
        Direct and unknown events are returned unchanged.
    """
    source = detect_event_source(event)
    if source == EventSource.API_GATEWAY:
        logger.debug("Decoding API Gateway request body")
        return _decode_body(event), source
    return event, source
