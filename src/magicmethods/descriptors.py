"""Reusable accessors: validating data descriptors.

A descriptor is any object whose *type* defines ``__get__``, ``__set__`` or
``__delete__``. When it is found as a class attribute, attribute access on
instances of the class is routed through it. Defining ``__set__`` (or
``__delete__``) makes it a *data descriptor*, which takes priority over the
instance ``__dict__`` (see :py:mod:`magicmethods.lookup`).

That priority is what lets :py:class:`Validator` store the value in the
instance ``__dict__`` under the attribute's own public name: reads and writes
still go through the descriptor, but ``vars(instance)`` shows plain data.

``__set_name__`` is called by ``type.__new__`` for each descriptor created in a
class body, so a single descriptor class can serve many attributes (and many
owner classes) without repeating the name::

    class ScoreCard:
        points = NonNegative()
        rebounds = NonNegative()

Two other ways to keep the value are shown for comparison. :py:class:`SharedGrade`
keeps it on the descriptor itself, which is shared by every instance of the owner
class. :py:class:`WeakKeyGrade` keeps a `weakref.WeakKeyDictionary` keyed by
instance, which works even when instances have no ``__dict__``.
"""

from __future__ import annotations

__all__ = [
    "Bounded",
    "Exam",
    "NonNegative",
    "OneOf",
    "ScoreCard",
    "SharedExam",
    "SharedGrade",
    "SlottedExam",
    "Typed",
    "Validator",
    "WeakKeyGrade",
    "demo",
]

import abc
import logging
import math
import numbers
import typing
import weakref

from magicmethods.catalog import chapter
from magicmethods.exceptions import ProtocolError
from magicmethods.exceptions import ValidationError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


class Validator(abc.ABC):
    """Data descriptor that validates values before storing them on the instance.

    Attributes:
        public_name: Name of the attribute provided by the data descriptor.
        owner: The class in which the descriptor was first bound.

    Subclasses implement :py:meth:`validate`, which raises for a bad value.
    """

    public_name: typing.Optional[str]

    def __init__(self):
        # Not fully initialized until the owning class is created.
        self.public_name = None
        self.owner = None

    def __set_name__(self, owner, name):
        if self.public_name is not None and self.public_name != name:
            raise ProtocolError(
                f"{self.__class__.__name__} is already bound as {self.public_name!r}; cannot also bind as {name!r}."
            )
        self.public_name = name
        if self.owner is None:
            self.owner = owner
        logger.debug(f"Bound {self.__class__.__name__} to {owner.__qualname__}.{name}")

    def __get__(self, instance, owner=None):
        # instance is None when accessed through the *owner* (as a class attribute).
        if instance is None:
            return self
        try:
            return instance.__dict__[self.public_name]
        except KeyError:
            raise AttributeError(
                f"{type(instance).__name__!r} object has no attribute {self.public_name!r}"
            ) from None

    def __set__(self, instance, value):
        self.validate(value)
        instance.__dict__[self.public_name] = value

    def __delete__(self, instance):
        try:
            del instance.__dict__[self.public_name]
        except KeyError:
            raise AttributeError(self.public_name) from None

    @abc.abstractmethod
    def validate(self, value):
        """Raise an exception if *value* is not acceptable."""
        ...

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.public_name!r}>"


def _check_real(name, value):
    # bool is an Integral, but True points are not a score.
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a real number, not {type(value).__name__}.")
    if isinstance(value, float) and math.isnan(value):
        raise ValidationError(f"{name} must not be NaN.")


class NonNegative(Validator):
    """A real number greater than or equal to zero."""

    def validate(self, value):
        _check_real(self.public_name, value)
        if value < 0:
            raise ValidationError(f"{self.public_name} must be >= 0, got {value!r}.")


class Bounded(Validator):
    """A real number in the closed interval [*minimum*, *maximum*].

    Either bound may be None for a half-open range.
    """

    def __init__(self, minimum: numbers.Real = None, maximum: numbers.Real = None):
        super().__init__()
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValueError(f"Empty range: [{minimum}, {maximum}].")
        self.minimum = minimum
        self.maximum = maximum

    def validate(self, value):
        _check_real(self.public_name, value)
        if self.minimum is not None and value < self.minimum:
            raise ValidationError(f"{self.public_name} must be >= {self.minimum!r}, got {value!r}.")
        if self.maximum is not None and value > self.maximum:
            raise ValidationError(f"{self.public_name} must be <= {self.maximum!r}, got {value!r}.")


class OneOf(Validator):
    """A value drawn from a fixed set of options."""

    def __init__(self, *options):
        super().__init__()
        if not options:
            raise ValueError("OneOf needs at least one option.")
        self.options = frozenset(options)

    def validate(self, value):
        if value not in self.options:
            raise ValidationError(
                f"{self.public_name} must be one of {sorted(map(repr, self.options))}, got {value!r}."
            )


class Typed(Validator):
    """A value that is an instance of *kind*."""

    def __init__(self, kind: typing.Union[type, typing.Tuple[type, ...]]):
        super().__init__()
        self.kind = kind

    def validate(self, value):
        if not isinstance(value, self.kind):
            raise TypeError(f"{self.public_name} must be {self.kind!r}, not {type(value).__name__}.")


class ScoreCard:
    """One player's line in a box score."""

    player = Typed(str)
    position = OneOf("guard", "forward", "center")
    points = NonNegative()
    rebounds = NonNegative()
    assists = NonNegative()

    def __init__(self, player: str, position: str, points=0, rebounds=0, assists=0):
        self.player = player
        self.position = position
        self.points = points
        self.rebounds = rebounds
        self.assists = assists

    def __repr__(self):
        return (
            f"{self.__class__.__name__}({self.player!r}, {self.position!r}, "
            f"points={self.points!r}, rebounds={self.rebounds!r}, assists={self.assists!r})"
        )


class Exam:
    """A second owner class reusing the same descriptor classes."""

    score = NonNegative()
    grade = Bounded(1, 5)

    def __init__(self, score, grade):
        self.score = score
        self.grade = grade


class SharedGrade:
    """Keep the value on the descriptor.

    This is a mistake: the descriptor is a class attribute, so every instance
    of the owner class reads and writes the same value.
    """

    def __init__(self, initial=1):
        self._value = initial

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return self._value

    def __set__(self, instance, value):
        if not 1 <= value <= 5:
            raise ValidationError(f"grade must be between 1 and 5, got {value!r}.")
        self._value = value


class SharedExam:
    grade = SharedGrade()


class WeakKeyGrade:
    """Keep one value per instance in a weak-keyed table held by the descriptor.

    The instance does not need a ``__dict__`` (only a ``__weakref__`` slot), and
    the table does not keep instances alive. Instances must be hashable.
    """

    def __init__(self):
        self._values: typing.MutableMapping[typing.Any, typing.Any] = weakref.WeakKeyDictionary()

    def __set_name__(self, owner, name):
        self.public_name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return self._values[instance]
        except KeyError:
            raise AttributeError(self.public_name) from None

    def __set__(self, instance, value):
        if not 1 <= value <= 5:
            raise ValidationError(f"{self.public_name} must be between 1 and 5, got {value!r}.")
        self._values[instance] = value

    def __delete__(self, instance):
        try:
            del self._values[instance]
        except KeyError:
            raise AttributeError(self.public_name) from None

    def __len__(self):
        return len(self._values)


class SlottedExam:
    __slots__ = ("__weakref__",)
    grade = WeakKeyGrade()


@chapter("descriptors", title="Reusable accessors: validating data descriptors")
def demo():
    observations = []

    card = ScoreCard("Ada", "guard", points=31, rebounds=4, assists=9)
    observations.append(("validated instance", repr(card)))
    observations.append(("instance __dict__", dict(vars(card))))
    observations.append(("class access", ScoreCard.points))

    try:
        card.points = -3
    except ValidationError as e:
        logger.info(f"Rejected negative points: {e}")
        observations.append(("negative points", str(e)))

    try:
        card.position = "goalie"
    except ValidationError as e:
        observations.append(("unknown position", str(e)))

    del card.assists
    observations.append(("after del", hasattr(card, "assists")))
    observations.append(("reused across owners", (ScoreCard.points.owner.__name__, Exam.score.owner.__name__)))

    first, second = SharedExam(), SharedExam()
    first.grade = 2
    second.grade = 5
    observations.append(("shared storage pitfall", (first.grade, second.grade)))

    first, second = SlottedExam(), SlottedExam()
    first.grade = 2
    second.grade = 5
    observations.append(("weak-keyed storage", (first.grade, second.grade)))
    del second
    observations.append(("weak table size after del", len(SlottedExam.grade)))

    for label, value in observations:
        logger.debug(f"{label}: {value!r}")
    return observations
