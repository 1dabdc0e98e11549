"""Operator-overload hooks and how binary operators are dispatched.

For ``left + right`` the interpreter tries, in order:

1. ``type(right).__radd__(right, left)``, *first*, if the type of *right* is a
   proper subclass of the type of *left* and overrides ``__radd__``;
2. ``type(left).__add__(left, right)``;
3. ``type(right).__radd__(right, left)``, if the types differ and it was not
   already tried.

A hook that does not support its operand returns the `NotImplemented`
singleton (it must not raise `TypeError`), which lets the other operand have a
turn. If every candidate returns `NotImplemented`, the interpreter raises
`TypeError`. :py:func:`binary_dispatch_order` lists the candidates for a pair
of operands and :py:func:`apply_binary` runs them as the interpreter would.

In-place operators (``+=``) first try ``__iadd__``; an immutable type like
:py:class:`Vector` does not define it, so ``v += w`` falls back to
``v = v + w`` and rebinds the name to a new object.
"""

from __future__ import annotations

__all__ = ["BINARY_OPERATORS", "Money", "Vector", "apply_binary", "binary_dispatch_order", "demo"]

import decimal
import functools
import logging
import math
import numbers
import operator
import types
import typing

from magicmethods.catalog import chapter
from magicmethods.exceptions import ValidationError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

BINARY_OPERATORS: typing.Mapping[str, typing.Tuple[str, str]] = {
    "+": ("__add__", "__radd__"),
    "-": ("__sub__", "__rsub__"),
    "*": ("__mul__", "__rmul__"),
    "@": ("__matmul__", "__rmatmul__"),
    "/": ("__truediv__", "__rtruediv__"),
    "//": ("__floordiv__", "__rfloordiv__"),
    "%": ("__mod__", "__rmod__"),
    "**": ("__pow__", "__rpow__"),
    "<<": ("__lshift__", "__rlshift__"),
    ">>": ("__rshift__", "__rrshift__"),
    "&": ("__and__", "__rand__"),
    "|": ("__or__", "__ror__"),
    "^": ("__xor__", "__rxor__"),
}
"""Operator symbol to (forward, reflected) special method names."""

_MISSING = object()


def _special(cls: type, name: str):
    for base in cls.__mro__:
        if name in base.__dict__:
            return base.__dict__[name]
    return _MISSING


def _defined(method) -> bool:
    return method is not _MISSING and method is not None


def _shares_builtin_slot(left_type: type, right_type: type, forward: str, reflected: str) -> bool:
    shared = all(_special(right_type, name) is _special(left_type, name) for name in (forward, reflected))
    return shared and isinstance(_special(left_type, reflected), types.WrapperDescriptorType)


def binary_dispatch_order(left, right, op: str) -> typing.List[typing.Tuple[type, str]]:
    """List the ``(operand type, method name)`` candidates for ``left op right``, in the order tried.

    Types that resolve both methods to the same built-in slot wrapper (``bool`` and ``int``)
    share one C-level slot, so the reflected method is never tried.

    Raises:
        ValueError: if *op* is not a binary operator symbol.
    """
    try:
        forward, reflected = BINARY_OPERATORS[op]
    except KeyError:
        raise ValueError(f"Unknown binary operator {op!r}.") from None
    left_type, right_type = type(left), type(right)

    left_method = _special(left_type, forward)
    right_method = _MISSING
    if right_type is not left_type:
        right_method = _special(right_type, reflected)
        if _shares_builtin_slot(left_type, right_type, forward, reflected):
            logger.debug(f"{right_type.__name__} shares the {forward} slot of {left_type.__name__}.")
            right_method = _MISSING

    candidates = []
    right_first = (
        _defined(right_method)
        and issubclass(right_type, left_type)
        and right_method is not _special(left_type, reflected)
    )
    if right_first:
        candidates.append((right_type, reflected))
    if _defined(left_method):
        candidates.append((left_type, forward))
    if _defined(right_method) and not right_first:
        candidates.append((right_type, reflected))
    return candidates


def apply_binary(left, right, op: str) -> typing.Tuple[typing.Any, typing.Tuple[type, str]]:
    """Evaluate ``left op right`` by explicit dispatch.

    Returns:
        The result, and the ``(operand type, method name)`` candidate that produced it.

    Raises:
        TypeError: if every candidate returns `NotImplemented`, with the
            interpreter's message.
    """
    forward, _ = BINARY_OPERATORS.get(op, (None, None))
    for owner, name in binary_dispatch_order(left, right, op):
        method = _special(owner, name)
        if name == forward:
            result = method(left, right)
        else:
            result = method(right, left)
        if result is not NotImplemented:
            return result, (owner, name)
        logger.debug(f"{owner.__name__}.{name} returned NotImplemented")
    raise TypeError(
        f"unsupported operand type(s) for {op}: {type(left).__name__!r} and {type(right).__name__!r}"
    )


class Vector:
    """An immutable Euclidean vector."""

    __slots__ = ("_components",)

    def __init__(self, *components: numbers.Real):
        if not components:
            raise ValueError("A Vector needs at least one component.")
        for component in components:
            if not isinstance(component, numbers.Real):
                raise TypeError(f"Vector components must be real numbers, not {type(component).__name__}.")
        self._components = tuple(components)

    def _same_dimension(self, other: "Vector"):
        if len(self) != len(other):
            raise ValueError(f"Dimension mismatch: {len(self)} and {len(other)}.")

    def __len__(self):
        return len(self._components)

    def __iter__(self):
        return iter(self._components)

    def __getitem__(self, index):
        return self._components[index]

    def __add__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        self._same_dimension(other)
        return Vector(*(a + b for a, b in zip(self, other)))

    def __sub__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        self._same_dimension(other)
        return Vector(*(a - b for a, b in zip(self, other)))

    def __mul__(self, scalar):
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return Vector(*(a * scalar for a in self))

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return Vector(*(a / scalar for a in self))

    def __matmul__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        self._same_dimension(other)
        return sum(a * b for a, b in zip(self, other))

    def __neg__(self):
        return Vector(*(-a for a in self))

    def __pos__(self):
        return self

    def __abs__(self):
        return math.hypot(*self._components)

    def __bool__(self):
        return any(self._components)

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self._components == other._components

    def __hash__(self):
        return hash(self._components)

    def __repr__(self):
        return f"{self.__class__.__name__}({', '.join(map(repr, self._components))})"

    def __format__(self, format_spec):
        return "(" + ", ".join(format(component, format_spec) for component in self._components) + ")"


@functools.total_ordering
class Money:
    """An amount in a currency. Arithmetic and ordering only work within one currency."""

    __slots__ = ("amount", "currency")

    def __init__(self, amount, currency: str = "EUR"):
        # Decimal(str(x)) keeps 0.1 as 0.1 rather than its binary float expansion.
        self.amount = decimal.Decimal(str(amount))
        self.currency = currency

    def _same_currency(self, other: "Money"):
        if self.currency != other.currency:
            raise ValidationError(f"Cannot combine {self.currency} and {other.currency}.")

    def __add__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __radd__(self, other):
        # sum() starts from the integer 0.
        if isinstance(other, int) and not isinstance(other, bool) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor):
        if isinstance(factor, bool) or not isinstance(factor, (int, decimal.Decimal)):
            return NotImplemented
        return Money(self.amount * factor, self.currency)

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        return (self.amount, self.currency) == (other.amount, other.currency)

    def __lt__(self, other):
        if not isinstance(other, Money):
            return NotImplemented
        self._same_currency(other)
        return self.amount < other.amount

    def __hash__(self):
        return hash((self.amount, self.currency))

    def __repr__(self):
        return f"{self.__class__.__name__}('{self.amount}', {self.currency!r})"


class _Labeled(Vector):
    """A subclass that overrides the reflected hook, so it is tried first."""

    __slots__ = ()

    def __radd__(self, other):
        return "labeled"


@chapter("operators", title="Operator overloading and dispatch")
def demo():
    observations = []

    v, w = Vector(1, 2), Vector(3, 4)
    observations.append(("v + w", v + w))
    observations.append(("3 * v (reflected)", 3 * v))
    observations.append(("v @ w", v @ w))
    observations.append(("abs(w)", abs(w)))
    observations.append(("format", format(w / 3, ".2f")))

    alias = v
    v += w
    observations.append(("+= rebinds", (v, alias, v is alias)))

    try:
        v + 1
    except TypeError as e:
        observations.append(("NotImplemented becomes TypeError", str(e)))

    observations.append(("dispatch int + float", binary_dispatch_order(1, 1.5, "+")))
    observations.append(("applied int + float", apply_binary(1, 1.5, "+")))
    observations.append(("subclass reflected first", binary_dispatch_order(v, _Labeled(0, 0), "+")))

    prices = [Money("1.10"), Money("2.20"), Money("0.70")]
    observations.append(("sum() via __radd__", sum(prices)))
    observations.append(("total_ordering", max(prices)))
    observations.append(("operator module agrees", operator.add(v, w) == apply_binary(v, w, "+")[0]))
    return observations
