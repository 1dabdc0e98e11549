"""Priority-ordered attribute lookup, reproduced step by step.

When ``obj.name`` is evaluated for an ordinary instance, ``object.__getattribute__``
consults several candidates and the first applicable one wins:

1. a *data descriptor* (its type defines ``__set__`` or ``__delete__``) found on the
   class or one of its bases;
2. an entry in the instance ``__dict__``;
3. a *non-data descriptor* (its type defines only ``__get__``) found on the class;
4. any other class attribute;
5. if all of that raised `AttributeError`, the class' ``__getattr__`` hook.

Only the first class in ``type(obj).__mro__`` that defines the name takes part;
a definition in a base class that is hidden by a subclass is never consulted.
The hooks are looked up on the *type* of each object, never on the instance.

:py:func:`explain_lookup` performs the same steps as the interpreter and
reports which step supplied the value. It describes ``object.__getattribute__``;
classes that override ``__getattribute__`` (see :py:mod:`magicmethods.interception`)
opt out of this order, and class objects are looked up through their metaclass
with different rules, so neither is supported.
"""

from __future__ import annotations

__all__ = ["AttributeSource", "Candidate", "Resolution", "explain_lookup", "lookup_chain", "demo"]

import enum
import logging
import typing

from magicmethods.catalog import chapter
from magicmethods.exceptions import ProtocolError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

_MISSING = object()


class AttributeSource(enum.IntEnum):
    """Candidate sources for an attribute value, in the order they are consulted."""

    DATA_DESCRIPTOR = 1
    INSTANCE_DICT = 2
    NON_DATA_DESCRIPTOR = 3
    CLASS_ATTRIBUTE = 4
    GETATTR_FALLBACK = 5


class Resolution(typing.NamedTuple):
    """Outcome of an attribute lookup."""

    value: typing.Any
    source: AttributeSource
    owner: typing.Optional[type]
    """Class whose ``__dict__`` supplied the attribute (or the ``__getattr__`` hook), or None."""


class Candidate(typing.NamedTuple):
    """An unevaluated candidate for an attribute lookup."""

    source: AttributeSource
    owner: typing.Optional[type]
    raw: typing.Any
    """The object stored in a ``__dict__`` (not yet passed through ``__get__``)."""


def _find_in_mro(cls: type, name: str) -> typing.Tuple[typing.Optional[type], typing.Any]:
    """Find *name* in the ``__dict__`` of the classes of *cls.__mro__*, without invoking anything."""
    for base in cls.__mro__:
        namespace = base.__dict__
        if name in namespace:
            return base, namespace[name]
    return None, _MISSING


def _special(obj, name: str):
    """Look up a special method the way the interpreter does: on the type, bypassing the instance."""
    return _find_in_mro(type(obj), name)[1]


def _is_data_descriptor(attr) -> bool:
    return _special(attr, "__set__") is not _MISSING or _special(attr, "__delete__") is not _MISSING


def _instance_dict(obj) -> typing.Optional[dict]:
    try:
        return object.__getattribute__(obj, "__dict__")
    except AttributeError:
        # E.g. a class that uses __slots__ without "__dict__".
        return None


def _check_instance(obj):
    if isinstance(obj, type):
        raise TypeError(
            f"{obj!r} is a class. Class attribute lookup goes through the metaclass and is not modeled here."
        )


def _generic_getattr(obj, name: str) -> Resolution:
    cls = type(obj)
    owner, attr = _find_in_mro(cls, name)

    getter = _MISSING
    if owner is not None:
        getter = _special(attr, "__get__")
        if getter is not _MISSING and _is_data_descriptor(attr):
            return Resolution(getter(attr, obj, cls), AttributeSource.DATA_DESCRIPTOR, owner)

    namespace = _instance_dict(obj)
    if namespace is not None and name in namespace:
        return Resolution(namespace[name], AttributeSource.INSTANCE_DICT, None)

    if getter is not _MISSING:
        return Resolution(getter(attr, obj, cls), AttributeSource.NON_DATA_DESCRIPTOR, owner)

    if owner is not None:
        # Includes a data descriptor without __get__, which yields itself.
        return Resolution(attr, AttributeSource.CLASS_ATTRIBUTE, owner)

    raise AttributeError(f"{cls.__name__!r} object has no attribute {name!r}")


def explain_lookup(obj, name: str) -> Resolution:
    """Resolve ``obj.name`` and report which source supplied the value.

    The value is the same one ``getattr(obj, name)`` returns. Descriptors are
    invoked, so a property getter runs exactly as it would for normal access.

    As in the interpreter, an `AttributeError` raised anywhere in the generic
    lookup (including from inside a descriptor's ``__get__``) triggers the
    ``__getattr__`` fallback.

    Raises:
        AttributeError: if no source supplies the attribute.
        TypeError: if *obj* is a class.
    """
    _check_instance(obj)
    try:
        resolution = _generic_getattr(obj, name)
    except AttributeError:
        hook_owner, hook = _find_in_mro(type(obj), "__getattr__")
        if hook_owner is None:
            raise
        logger.debug(f"Falling back to {hook_owner.__qualname__}.__getattr__ for {name!r}")
        # Bind the hook the way the interpreter does (through its own __get__, if any).
        hook_getter = _special(hook, "__get__")
        if hook_getter is not _MISSING:
            hook = hook_getter(hook, obj, type(obj))
        value = hook(name)
        resolution = Resolution(value, AttributeSource.GETATTR_FALLBACK, hook_owner)
    logger.debug(f"{type(obj).__name__}.{name} resolved from {resolution.source.name}")
    return resolution


def lookup_chain(obj, name: str) -> typing.List[Candidate]:
    """List every source that holds a candidate for ``obj.name``, highest priority first.

    Nothing is invoked, so the list shows candidates that a higher priority
    source hides (for example an instance ``__dict__`` entry shadowed by a
    property). The first element is the one :py:func:`explain_lookup` uses,
    unless its ``__get__`` raises `AttributeError`.
    """
    _check_instance(obj)
    cls = type(obj)
    candidates = []

    owner, attr = _find_in_mro(cls, name)
    if owner is not None:
        if _special(attr, "__get__") is _MISSING:
            source = AttributeSource.CLASS_ATTRIBUTE
        elif _is_data_descriptor(attr):
            source = AttributeSource.DATA_DESCRIPTOR
        else:
            source = AttributeSource.NON_DATA_DESCRIPTOR
        candidates.append(Candidate(source, owner, attr))

    namespace = _instance_dict(obj)
    if namespace is not None and name in namespace:
        candidates.append(Candidate(AttributeSource.INSTANCE_DICT, None, namespace[name]))

    hook_owner, hook = _find_in_mro(cls, "__getattr__")
    if hook_owner is not None:
        candidates.append(Candidate(AttributeSource.GETATTR_FALLBACK, hook_owner, hook))

    candidates.sort(key=lambda candidate: candidate.source)
    return candidates


class _Example:
    kind = "example"

    @property
    def size(self):
        return 3

    def describe(self):
        return "method"

    def __getattr__(self, name):
        return f"<fallback for {name}>"


@chapter("lookup", title="Priority-ordered attribute lookup")
def demo():
    observations = []
    example = _Example()
    # Write directly into the instance __dict__ to put a candidate behind every class attribute.
    vars(example).update(size=99, describe="shadowed method", kind="instance kind", extra="instance only")
    for name in ("size", "describe", "kind", "extra", "missing"):
        resolution = explain_lookup(example, name)
        if resolution.value != getattr(example, name):
            raise ProtocolError(f"explain_lookup disagrees with getattr for {name!r}.")
        observations.append((name, (resolution.source.name, resolution.value)))
    chain = lookup_chain(example, "size")
    observations.append(("size candidates", [candidate.source.name for candidate in chain]))
    return observations
