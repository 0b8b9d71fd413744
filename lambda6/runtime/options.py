# =============================================================================
# Handler Options
# =============================================================================
# Resolution order: defaults <- environment <- options mapping <- overrides
# =============================================================================

import os
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

DEFAULT_OPERATION_KEY = "operation"
DEFAULT_PAYLOAD_KEY = "payload"

# Original camelCase option names are accepted alongside snake_case
_ALIASES = {
    "operationKey": "operation_key",
    "payloadKey": "payload_key",
    "deepCopy": "deep_copy",
}


def _get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _get_env_bool(key: str, default: bool = False) -> bool:
    return _get_env(key, str(default)).lower() == "true"


@dataclass(frozen=True)
class HandlerOptions:
    """
    Options controlling how a Handler reads events and builds contexts.

    Attributes:
        operation_key: Event key holding the operation name
        payload_key: Event key holding the endpoint argument
        deep_copy: Deep-freeze the invocation context fields
        extras: Any other options, available as options["name"]
    """
    operation_key: str = DEFAULT_OPERATION_KEY
    payload_key: str = DEFAULT_PAYLOAD_KEY
    deep_copy: bool = False
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, key: str) -> Any:
        key = _ALIASES.get(key, key)
        if key in _KNOWN:
            return getattr(self, key)
        return self.extras[key]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def merge(self, overrides: Optional[Mapping[str, Any]] = None) -> "HandlerOptions":
        """Return a copy with `overrides` applied; unknown keys go to extras."""
        if not overrides:
            return self
        known: Dict[str, Any] = {}
        extras = dict(self.extras)
        for key, value in overrides.items():
            key = _ALIASES.get(key, key)
            if key in _KNOWN:
                known[key] = value
            else:
                extras[key] = value
        if "deep_copy" in known:
            known["deep_copy"] = bool(known["deep_copy"])
        return replace(self, extras=MappingProxyType(extras), **known)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a plain dict, extras included."""
        return {
            "operation_key": self.operation_key,
            "payload_key": self.payload_key,
            "deep_copy": self.deep_copy,
            **self.extras,
        }

    @classmethod
    def from_env(cls) -> "HandlerOptions":
        """Build options from LAMBDA6_* environment variables."""
        return cls(
            operation_key=_get_env("LAMBDA6_OPERATION_KEY", DEFAULT_OPERATION_KEY),
            payload_key=_get_env("LAMBDA6_PAYLOAD_KEY", DEFAULT_PAYLOAD_KEY),
            deep_copy=_get_env_bool("LAMBDA6_DEEP_COPY"),
        )


_KNOWN = {f.name for f in fields(HandlerOptions)} - {"extras"}


def resolve_options(options: Optional[Mapping[str, Any]] = None, **overrides: Any) -> HandlerOptions:
    """Combine environment configuration with explicit options."""
    if options is not None and not isinstance(options, Mapping):
        if isinstance(options, HandlerOptions):
            return options.merge(overrides)
        raise TypeError(f"invalid type for options, cannot be {type(options).__name__}")
    return HandlerOptions.from_env().merge(options).merge(overrides)
