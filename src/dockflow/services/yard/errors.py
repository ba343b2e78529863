"""Typed failures raised by yard commands."""

from __future__ import annotations


class YardError(Exception):
    """Base class for rejected yard commands. State is never partially changed."""


class InvalidTransition(YardError):
    """The vehicle is not in the status the command requires."""


class DockUnavailable(YardError):
    """The target dock is held by another vehicle or is under maintenance."""


class ValidationError(YardError):
    """A required input is missing or out of range."""


class NotFound(YardError):
    """The command references an unknown vehicle or supplier."""
