"""Exceptions raised by the service layer (never by the flock store itself)."""
from __future__ import annotations


class FlockError(Exception):
    """Base exception for flock workflows."""


class InvalidFormError(FlockError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

