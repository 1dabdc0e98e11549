"""Attribute interception hooks.

Four hooks let a class take over attribute access:

``__getattribute__(self, name)``
    Called for *every* ``obj.name`` read. Overriding it replaces the lookup order
    of :py:mod:`magicmethods.lookup` entirely, so implementations almost always
    delegate back to ``super().__getattribute__(name)``.
``__getattr__(self, name)``
    Called only after normal lookup raised `AttributeError`. This is the right
    hook for fallbacks, defaults and delegation.
``__setattr__(self, name, value)`` and ``__delattr__(self, name)``
    Called for every assignment and ``del`` statement.

None of these hooks sees the implicit special-method lookups the interpreter
performs for ``repr(obj)``, ``len(obj)``, ``obj + 1`` and so on, which go
straight to the type.

Inside the hooks, reach instance state through ``object.__getattribute__``,
``object.__setattr__`` or ``self.__dict__`` to avoid recursing into the hook.
A ``__getattr__`` must raise `AttributeError` (not return a default) for names
that protocols probe, such as ``__deepcopy__`` or ``__getstate__``, or
`copy` and `pickle` will misbehave.
"""

from __future__ import annotations

__all__ = ["DefaultingRecord", "Delegate", "FrozenRecord", "TracedAttributes", "TracedPoint", "demo"]

import logging
import typing

from magicmethods.catalog import chapter
from magicmethods.exceptions import FrozenAttributeError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


class Delegate:
    """Forward attribute reads that miss on the delegate to a wrapped *target*.

    Attributes assigned on the delegate stay on the delegate and shadow the
    target's attributes of the same name.
    """

    def __init__(self, target):
        self._target = target

    def __getattr__(self, name):
        # Reached only when normal lookup fails. _target may be missing while
        # copy or pickle builds a new instance without calling __init__.
        try:
            target = self.__dict__["_target"]
        except KeyError:
            raise AttributeError(name) from None
        logger.debug(f"Delegating {name!r} to {type(target).__name__}")
        return getattr(target, name)

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(dir(self._target)))

    def __repr__(self):
        return f"{self.__class__.__name__}({self._target!r})"


class TracedAttributes:
    """Mixin that records every attribute read, write and delete in ``access_log``.

    Reads of ``access_log`` itself are not recorded.
    """

    def _record(self, operation: str, name: str):
        namespace = object.__getattribute__(self, "__dict__")
        namespace.setdefault("access_log", []).append((operation, name))

    def __getattribute__(self, name):
        if name != "access_log":
            # Look the helper up on the class so that recording does not recurse.
            TracedAttributes._record(self, "get", name)
        return super().__getattribute__(name)

    def __setattr__(self, name, value):
        TracedAttributes._record(self, "set", name)
        super().__setattr__(name, value)

    def __delattr__(self, name):
        TracedAttributes._record(self, "del", name)
        super().__delattr__(name)


class TracedPoint(TracedAttributes):
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def norm(self):
        return (self.x**2 + self.y**2) ** 0.5


class DefaultingRecord:
    """A record that answers unknown public attribute names with a default.

    Names starting with an underscore still raise `AttributeError`, so that
    special-method probes by `copy`, `pickle` and friends behave normally.
    """

    def __init__(self, default=None, /, **fields):
        self._default = default
        self.__dict__.update(fields)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self._default

    def __repr__(self):
        fields = ", ".join(f"{key}={value!r}" for key, value in vars(self).items() if not key.startswith("_"))
        return f"{self.__class__.__name__}({self._default!r}, {fields})"


class FrozenRecord:
    """An immutable record of named fields.

    Fields are written once by ``__init__`` through ``object.__setattr__``;
    afterwards ``__setattr__`` and ``__delattr__`` refuse every change. Use
    :py:meth:`replace` to get a modified copy.
    """

    def __init__(self, **fields):
        for name, value in fields.items():
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise FrozenAttributeError(f"cannot assign to field {name!r} of {self.__class__.__name__}")

    def __delattr__(self, name):
        raise FrozenAttributeError(f"cannot delete field {name!r} of {self.__class__.__name__}")

    def fields(self) -> typing.Dict[str, typing.Any]:
        return dict(vars(self))

    def replace(self, **changes) -> "FrozenRecord":
        """Get a new record with some fields changed.

        Raises:
            TypeError: if *changes* names a field the record does not have.
        """
        unknown = set(changes) - set(vars(self))
        if unknown:
            raise TypeError(f"{self.__class__.__name__} has no field(s) {', '.join(sorted(unknown))}")
        return self.__class__(**{**vars(self), **changes})

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    def __hash__(self):
        return hash(tuple(sorted(vars(self).items())))

    def __repr__(self):
        fields = ", ".join(f"{key}={value!r}" for key, value in vars(self).items())
        return f"{self.__class__.__name__}({fields})"


@chapter("interception", title="Attribute interception hooks")
def demo():
    observations = []

    wrapped = Delegate([3, 1, 2])
    wrapped.label = "local"
    observations.append(("delegated method", wrapped.count(1)))
    observations.append(("local attribute", wrapped.label))
    observations.append(("explicit dunder is delegated", wrapped.__len__()))
    try:
        len(wrapped)
    except TypeError as e:
        # len() looks __len__ up on the type, so __getattr__ never sees it.
        observations.append(("implicit dunder is not", str(e)))

    point = TracedPoint(3, 4)
    point.norm()
    del point.x
    observations.append(("access log", list(point.access_log)))

    record = DefaultingRecord("n/a", name="Ada")
    observations.append(("known field", record.name))
    observations.append(("unknown field", record.email))
    observations.append(("private name", hasattr(record, "_secret")))

    frozen = FrozenRecord(x=1, y=2)
    try:
        frozen.x = 10
    except FrozenAttributeError as e:
        observations.append(("frozen assignment", str(e)))
    observations.append(("replace", frozen.replace(x=10)))
    observations.append(("original unchanged", frozen))
    return observations
