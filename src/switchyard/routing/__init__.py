"""Routing — ordered registrations dispatched as Express-style chains.

Routes, middleware and mounted routers share one ordered list per
router. Dispatch walks it in registration order; the first chain that
responds wins.
"""

from switchyard.routing.layer import MountRegistration, RouteRegistration, Step
from switchyard.routing.pattern import (
    PatternMatch,
    RegexPattern,
    RoutePattern,
    TemplatePattern,
    compile_pattern,
)
from switchyard.routing.route import RouteBuilder
from switchyard.routing.router import RouteInfo, Router
from switchyard.routing.signals import UNHANDLED, Signal, Unhandled

__all__ = [
    "UNHANDLED",
    "MountRegistration",
    "PatternMatch",
    "RegexPattern",
    "RouteBuilder",
    "RouteInfo",
    "RoutePattern",
    "RouteRegistration",
    "Router",
    "Signal",
    "Step",
    "TemplatePattern",
    "Unhandled",
    "compile_pattern",
]
