"""
Domain errors raised by the Interpolice services.

The API layer translates these into HTTP responses; services never return
error tuples.
"""

from typing import Any


class InterpoliceError(Exception):
    """Base class for all domain errors"""


class NotFoundError(InterpoliceError):
    """A referenced entity does not exist"""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} does not exist")


class ConflictError(InterpoliceError):
    """A uniqueness constraint would be violated"""


class AuthenticationError(InterpoliceError):
    """Credentials or token could not be verified"""
