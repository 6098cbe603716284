"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Request or error handler: (request, response, next) or
# (error, request, response, next), sync or async
Handler: TypeAlias = Callable[..., Any]

# Startup / shutdown hook, no arguments, sync or async
Hook: TypeAlias = Callable[[], Any]
