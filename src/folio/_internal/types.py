"""Shared type aliases used across folio modules."""

from collections.abc import Awaitable, Callable, Mapping, MutableMapping
from typing import Any, TypeAlias

# Raw ASGI types (matching the ASGI 3 interface)
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# Page handler: called with the captured path params, or with nothing
PageHandler: TypeAlias = Callable[..., Any]

# Server endpoint: receives a Request, returns a Response (sync or async)
Endpoint: TypeAlias = Callable[..., Any]

# Path params captured by the pattern matcher
Params: TypeAlias = Mapping[str, str]

# Middleware continuation: the rest of the pipeline for a request
Next: TypeAlias = Callable[[Any], Awaitable[Any]]
