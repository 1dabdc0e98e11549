"""A memoizing attribute built from a non-data descriptor.

:py:class:`lazy_property` defines ``__get__`` only. On first access it computes
the value and writes it into the instance ``__dict__`` under its own name.
Because a non-data descriptor ranks *below* the instance ``__dict__`` in
attribute lookup, every later access finds the cached value directly and the
descriptor is never consulted again. Deleting the attribute removes the
instance entry, which uncovers the descriptor, so the next access recomputes.

The standard library provides the same behavior as `functools.cached_property`.
"""

from __future__ import annotations

__all__ = ["Dataset", "lazy_property", "demo"]

import functools
import logging
import math
import typing

from magicmethods.catalog import chapter

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

_T = typing.TypeVar("_T")


class lazy_property(typing.Generic[_T]):
    """Compute an attribute once per instance and cache it in the instance ``__dict__``."""

    def __init__(self, func: typing.Callable[[typing.Any], _T]):
        self.func = func
        self.attrname: typing.Optional[str] = None
        functools.update_wrapper(self, func)

    def __set_name__(self, owner, name):
        if self.attrname is None:
            self.attrname = name
        elif name != self.attrname:
            raise TypeError(
                "Cannot assign the same lazy_property to two different names "
                f"({self.attrname!r} and {name!r})."
            )

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        if self.attrname is None:
            raise TypeError("Cannot use lazy_property instance without calling __set_name__ on it.")
        try:
            cache = instance.__dict__
        except AttributeError:
            raise TypeError(
                f"No '__dict__' attribute on {type(instance).__name__!r} instance to cache {self.attrname!r}."
            ) from None
        logger.debug(f"Computing {type(instance).__name__}.{self.attrname}")
        value = self.func(instance)
        cache[self.attrname] = value
        return value


class Dataset:
    """A sequence of numbers with lazily computed summary statistics."""

    def __init__(self, values: typing.Iterable[float]):
        self.values = tuple(values)
        if not self.values:
            raise ValueError("Dataset needs at least one value.")
        self.computations = 0

    @lazy_property
    def mean(self) -> float:
        """Arithmetic mean."""
        self.computations += 1
        return math.fsum(self.values) / len(self.values)

    @lazy_property
    def variance(self) -> float:
        """Population variance."""
        self.computations += 1
        mean = self.mean
        return math.fsum((x - mean) ** 2 for x in self.values) / len(self.values)


@chapter("lazy", title="A memoizing attribute")
def demo():
    observations = []
    data = Dataset([2, 4, 4, 4, 5, 5, 7, 9])
    observations.append(("cached before access", "mean" in vars(data)))
    observations.append(("mean", data.mean))
    observations.append(("cached after access", "mean" in vars(data)))
    observations.append(("variance", data.variance))
    _ = data.mean, data.variance
    observations.append(("computations", data.computations))
    del data.mean
    observations.append(("mean after reset", data.mean))
    observations.append(("computations after reset", data.computations))
    observations.append(("class access", type(Dataset.mean).__name__))
    return observations
