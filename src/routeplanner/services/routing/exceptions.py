"""Routing error hierarchy."""

from __future__ import annotations


class RoutingError(Exception):
    """Base class for failures raised by the routing engine."""


class InvalidInputError(RoutingError, ValueError):
    """A precondition of a public routing call was violated."""


class OptimizationFailed(RoutingError):
    """A single strategy could not produce a route."""


class ExternalServiceError(OptimizationFailed):
    """The directions service was unavailable or answered with something unusable."""
