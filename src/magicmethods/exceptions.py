"""Exceptions thrown by magicmethods are catchable as magicmethods.exceptions.MagicMethodsError.

Where an example stands in for a built-in contract, the exception also derives
from the matching built-in exception. A validating descriptor raises a
`ValidationError`, which is still a `ValueError`; a frozen record raises a
`FrozenAttributeError`, which is still an `AttributeError` and so keeps
`hasattr()` and `getattr(obj, name, default)` working as expected.
"""

import logging as _logging

logger = _logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


class MagicMethodsError(Exception):
    """Base exception for magicmethods package errors."""


class DuplicateKeyError(MagicMethodsError):
    """A name is being registered a second time where names must be unique."""


class FrozenAttributeError(MagicMethodsError, AttributeError):
    """An attribute of an immutable object was assigned or deleted."""


class ProtocolError(MagicMethodsError):
    """A behavioral protocol has not been followed correctly."""


class ValidationError(MagicMethodsError, ValueError):
    """A value was rejected by a validating hook."""
