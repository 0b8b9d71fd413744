# =============================================================================
# Application Entry Points
# =============================================================================
# Thin transport adapters that normalize events and call Handler.handle().
# =============================================================================

from lambda6.app.direct_handler import api_response, lambda_handler_for

__all__ = [
    "api_response",
    "lambda_handler_for",
]
