"""The equality and hashing contract.

Objects that compare equal must have equal hashes, and an object's hash must
not change while it is in a set or used as a dict key. Sets and dicts look
up a bucket by ``hash()`` first and only then compare with ``==``, so a
broken contract shows up as "missing" keys rather than as an error.

Defining ``__eq__`` in a class body without ``__hash__`` sets ``__hash__`` to
None and makes instances unhashable (see :py:class:`EqualityOnly`). That is the
safe default for mutable objects. Immutable value types define both, from the
same data.

:py:class:`HashableWrapper` computes a hashable key once, from a snapshot of an
otherwise unhashable value, so lists and dicts can be used in sets.
:py:class:`Fingerprint` is an identity based on a fixed-size digest. Equality,
hash and the integer, bytes, string and filesystem-path conversions all derive
from the same 32 bytes.
"""

from __future__ import annotations

__all__ = ["EqualityOnly", "Fingerprint", "HashableWrapper", "freeze", "is_hashable", "demo"]

import builtins
import collections.abc
import hashlib
import json
import logging
import typing

from magicmethods.catalog import chapter
from magicmethods.exceptions import FrozenAttributeError
from magicmethods.exceptions import ValidationError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


def is_hashable(obj) -> bool:
    """Tell whether ``hash(obj)`` succeeds.

    Note that ``isinstance(obj, collections.abc.Hashable)`` only checks the
    type, so it is True for a tuple that contains a list.
    """
    try:
        hash(obj)
    except TypeError:
        return False
    return True


def freeze(value) -> typing.Hashable:
    """Recursively convert lists, tuples, sets and mappings to hashable equivalents.

    Lists and tuples become tuples, sets become frozensets, and mappings become
    a frozenset of frozen ``(key, value)`` pairs, so that key order does not matter.
    """
    if isinstance(value, collections.abc.Mapping):
        return frozenset((freeze(key), freeze(item)) for key, item in value.items())
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(item) for item in value)
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


class HashableWrapper:
    """Make any value usable as a set member or dict key.

    The key is computed once, at construction, by *key* (default: :py:func:`freeze`).
    Later changes to a mutable wrapped value are not reflected in equality or hash.

    Wrappers compare equal only to other wrappers with an equal key.
    """

    __slots__ = ("value", "_key")

    def __init__(self, value, key: typing.Callable[[typing.Any], typing.Hashable] = None):
        if key is None:
            key = freeze
        self.value = value
        self._key = key(value)
        if not is_hashable(self._key):
            raise TypeError(f"Key function produced an unhashable key for {value!r}.")

    def __eq__(self, other):
        if not isinstance(other, HashableWrapper):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash(self._key)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.value!r})"


class Fingerprint:
    """A 256-bit digest used as an identity.

    Construct from 32 bytes, or with :py:meth:`of` from JSON-serializable data.
    """

    __slots__ = ("_data",)

    def __init__(self, data: builtins.bytes):
        data = builtins.bytes(data)
        if len(data) != 32:
            raise ValidationError(f"Expected a 256-bit hash digest. Got {len(data)} bytes.")
        object.__setattr__(self, "_data", data)

    @classmethod
    def of(cls, obj) -> "Fingerprint":
        """Fingerprint the canonical JSON encoding of *obj*.

        Mapping keys are sorted, so equal dicts produce equal fingerprints.
        """
        encoded = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return cls(hashlib.sha256(encoded.encode("utf-8")).digest())

    def bytes(self) -> builtins.bytes:
        return self._data

    def __setattr__(self, name, value):
        raise FrozenAttributeError(f"{self.__class__.__name__} is immutable.")

    def __delattr__(self, name):
        raise FrozenAttributeError(f"{self.__class__.__name__} is immutable.")

    def __reduce__(self):
        # The default slot state restoration would go through __setattr__.
        return self.__class__, (self._data,)

    def __eq__(self, other):
        return isinstance(other, self.__class__) and other.bytes() == self.bytes()

    def __hash__(self) -> int:
        # hash() reduces the result to the width of a Py_ssize_t, but objects
        # that compare equal still produce the same value.
        return self.__index__()

    def __index__(self) -> int:
        """Support integer conversions, including the `hex()` built-in function."""
        return int.from_bytes(self._data, "big")

    def __bytes__(self) -> builtins.bytes:
        return self._data

    def __str__(self) -> str:
        return self._data.hex()

    def __fspath__(self) -> str:
        """Support `os.fspath`, so a fingerprint can name a file."""
        return str(self)

    def __repr__(self):
        return f"{self.__class__.__name__}('{str(self)[:12]}...')"


class EqualityOnly:
    """Defines ``__eq__`` but not ``__hash__``, so instances are unhashable."""

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, EqualityOnly):
            return NotImplemented
        return self.value == other.value


@chapter("hashing", title="Equality and hashing")
def demo():
    observations = []

    observations.append(("list hashable", is_hashable([1, 2])))
    observations.append(("tuple holding a list hashable", is_hashable((1, [2]))))
    observations.append(("__hash__ after __eq__", EqualityOnly.__hash__))

    configs = [{"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1}, {"a": 2}]
    unique = {HashableWrapper(config) for config in configs}
    observations.append(("unique wrapped dicts", len(unique)))

    first = Fingerprint.of({"name": "ada", "tags": ["x"]})
    second = Fingerprint.of({"tags": ["x"], "name": "ada"})
    observations.append(("fingerprint", first))
    observations.append(("equal fingerprints", first == second))
    observations.append(("same hash", hash(first) == hash(second)))
    observations.append(("as dict key", {first: "stored"}[second]))
    observations.append(("hex()", hex(first)[:14]))
    return observations
