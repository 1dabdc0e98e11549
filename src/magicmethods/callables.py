"""The callable-object protocol.

Any object whose *type* defines ``__call__`` can be invoked with call syntax.
That makes an instance a function that carries state: a counter, a cache, the
coefficients of a polynomial.

A class-based decorator is the classic use. :py:class:`CallCounter` replaces a
function with an instance that wraps it, copying ``__name__``, ``__doc__`` and
friends with `functools.update_wrapper`. Plain functions become bound methods
when accessed through an instance because functions are non-data descriptors;
a callable *instance* is not, so a decorator class that should work on methods
must define ``__get__`` itself and return a bound callable.
"""

from __future__ import annotations

__all__ = ["CacheInfo", "CallCounter", "Memoize", "Polynomial", "is_callable_object", "demo"]

import functools
import logging
import types
import typing

import typing_extensions

from magicmethods.catalog import chapter

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

_P = typing_extensions.ParamSpec("_P")
_T = typing.TypeVar("_T")

_function_types = (
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
)


class CallCounter(typing.Generic[_P, _T]):
    """Count the calls to the wrapped callable.

    Usable on plain functions and on methods. When decorating a method, all
    instances share the one counter of the class attribute.
    """

    def __init__(self, func: typing.Callable[_P, _T]):
        if not callable(func):
            raise TypeError("Needs a function or function object.")
        functools.update_wrapper(self, func)
        self._callable = func
        self.calls = 0

    def __call__(self, *args: _P.args, **kwargs: _P.kwargs) -> _T:
        self.calls += 1
        return self._callable(*args, **kwargs)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.__qualname__} calls={self.calls}>"


class CacheInfo(typing.NamedTuple):
    hits: int
    misses: int
    size: int


class Memoize(typing.Generic[_P, _T]):
    """Cache the results of the wrapped callable, keyed by its arguments.

    Calls with unhashable arguments are passed through without caching and are
    counted as neither hits nor misses.
    """

    def __init__(self, func: typing.Callable[_P, _T]):
        if not callable(func):
            raise TypeError("Needs a function or function object.")
        functools.update_wrapper(self, func)
        self._callable = func
        self._cache: typing.Dict[typing.Hashable, typing.Any] = {}
        self._hits = 0
        self._misses = 0

    def __call__(self, *args: _P.args, **kwargs: _P.kwargs) -> _T:
        key = (args, tuple(sorted(kwargs.items())))
        try:
            hash(key)
        except TypeError:
            logger.debug(f"Unhashable arguments to {self.__qualname__} bypass the cache.")
            return self._callable(*args, **kwargs)
        try:
            result = self._cache[key]
        except KeyError:
            self._misses += 1
            result = self._callable(*args, **kwargs)
            self._cache[key] = result
        else:
            self._hits += 1
        return result

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def cache_info(self) -> CacheInfo:
        return CacheInfo(self._hits, self._misses, len(self._cache))

    def cache_clear(self):
        self._cache.clear()
        self._hits = 0
        self._misses = 0


class Polynomial:
    """A polynomial that can be called to evaluate it.

    Coefficients are given lowest degree first: ``Polynomial(1, 0, 2)`` is
    ``1 + 2*x**2``.
    """

    def __init__(self, *coefficients):
        if not coefficients:
            raise ValueError("Polynomial needs at least one coefficient.")
        self.coefficients = tuple(coefficients)

    @property
    def degree(self) -> int:
        degree = len(self.coefficients) - 1
        while degree > 0 and self.coefficients[degree] == 0:
            degree -= 1
        return degree

    def __call__(self, x):
        # Horner's rule.
        result = 0
        for coefficient in reversed(self.coefficients):
            result = result * x + coefficient
        return result

    def __repr__(self):
        return f"{self.__class__.__name__}{self.coefficients!r}"


def is_callable_object(obj) -> bool:
    """Tell whether *obj* is an instance made callable by its class' ``__call__``.

    Unlike the `callable` builtin, this is False for classes and for functions,
    methods and the other built-in function types.
    """
    if isinstance(obj, type) or isinstance(obj, _function_types):
        return False
    return any("__call__" in vars(base) for base in type(obj).__mro__ if base is not object)


@Memoize
def _fibonacci(n: int) -> int:
    return n if n < 2 else _fibonacci(n - 1) + _fibonacci(n - 2)


@chapter("callables", title="Callable objects")
def demo():
    observations = []

    square_plus_one = Polynomial(1, 0, 1)
    observations.append(("polynomial", square_plus_one))
    observations.append(("called", [square_plus_one(x) for x in range(4)]))
    observations.append(("callable()", callable(square_plus_one)))

    _fibonacci.cache_clear()
    observations.append(("fibonacci(30)", _fibonacci(30)))
    observations.append(("cache info", tuple(_fibonacci.cache_info())))

    class Greeter:
        @CallCounter
        def greet(self, name):
            return f"Hello, {name}"

    first, second = Greeter(), Greeter()
    first.greet("Ada")
    second.greet("Grace")
    observations.append(("method call count", Greeter.greet.calls))
    observations.append(("wrapper keeps name", Greeter.greet.__name__))

    observations.append(
        ("is_callable_object", [is_callable_object(x) for x in (square_plus_one, len, demo, Polynomial)])
    )
    return observations
