"""Construction and destruction hooks.

``Cls(*args)`` calls ``type.__call__``, which runs two hooks in order:

1. ``Cls.__new__(Cls, *args)`` allocates and returns the object;
2. if that object is an instance of ``Cls``, ``obj.__init__(*args)`` initializes it.

``__new__`` is where immutable types (``int``, ``float``, ``str``, ``tuple``) must
be customized, since by the time ``__init__`` runs their value is fixed. It can
also return an existing object (:py:class:`Singleton`) or an object of another
type, in which case ``__init__`` is skipped.

``__del__`` runs when the object is reclaimed. When that happens is an
implementation detail (immediately on the last reference in CPython, later if
the object is in a reference cycle, possibly never at interpreter exit), and it
runs on whatever thread drops the last reference, so it must not take locks
that thread may hold. Prefer an explicit ``close()`` and the context manager
protocol, with `weakref.finalize` as a safety net (:py:class:`TrackedResource`).

Classes have a construction hook, too: ``__init_subclass__`` runs on the base
class whenever a subclass is defined, which is enough for a plugin registry
without a metaclass (:py:class:`PluginBase`).
"""

from __future__ import annotations

__all__ = [
    "ABSOLUTE_ZERO",
    "Celsius",
    "Configuration",
    "LifecycleProbe",
    "PluginBase",
    "Singleton",
    "TrackedResource",
    "demo",
]

import gc
import logging
import typing
import weakref

from magicmethods.catalog import chapter
from magicmethods.exceptions import DuplicateKeyError
from magicmethods.exceptions import ValidationError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

ABSOLUTE_ZERO = -273.15
"""Degrees Celsius."""


class LifecycleProbe:
    """Record the hooks that run while an instance is created and destroyed.

    Each subclass gets its own ``events`` list of ``(hook, name)`` pairs.
    """

    events: typing.ClassVar[typing.List[typing.Tuple[str, str]]] = []

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.events = []

    def __new__(cls, name: str):
        cls.events.append(("__new__", name))
        # object.__new__ accepts no extra arguments once __new__ is overridden.
        return super().__new__(cls)

    def __init__(self, name: str):
        self.name = name
        type(self).events.append(("__init__", name))

    def __del__(self):
        # __init__ may have failed, so the name is not guaranteed.
        type(self).events.append(("__del__", getattr(self, "name", "<uninitialized>")))


class Singleton:
    """At most one instance per class.

    ``__new__`` returns the existing instance of the exact class, but
    ``__init__`` still runs on every call. Each subclass gets its own instance.
    """

    def __new__(cls, *args, **kwargs):
        # Look in the class' own namespace so that subclasses do not inherit the instance.
        instance = cls.__dict__.get("_instance")
        if instance is None:
            instance = super().__new__(cls)
            cls._instance = instance
            logger.debug(f"Created the {cls.__name__} instance.")
        return instance

    def __init__(self):
        self.init_calls = getattr(self, "init_calls", 0) + 1

    @classmethod
    def reset(cls):
        """Forget the instance of *cls*, so the next call creates a new one."""
        if "_instance" in cls.__dict__:
            del cls._instance


class Configuration(Singleton):
    def __init__(self, **settings):
        super().__init__()
        if not hasattr(self, "settings"):
            self.settings = {}
        self.settings.update(settings)


class Celsius(float):
    """A temperature that cannot be below absolute zero.

    ``float`` is immutable, so validation and conversion happen in ``__new__``.
    Arithmetic is inherited from ``float`` and returns plain floats.
    """

    def __new__(cls, degrees=0.0):
        value = float(degrees)
        if value < ABSOLUTE_ZERO:
            raise ValidationError(f"{value} is below absolute zero ({ABSOLUTE_ZERO}).")
        return super().__new__(cls, value)

    @property
    def fahrenheit(self) -> float:
        return float(self) * 9 / 5 + 32

    def __repr__(self):
        return f"{self.__class__.__name__}({float(self)!r})"


def _release(ledger: typing.List[str], name: str):
    # Must not reference the resource object, or it could never be collected.
    logger.info(f"Releasing {name}.")
    ledger.append(name)


class TrackedResource:
    """A resource released exactly once: explicitly, on leaving a ``with`` block,
    when garbage collected, or at interpreter exit, whichever comes first.

    Released names are appended to the class-level ``released`` ledger.
    """

    released: typing.ClassVar[typing.List[str]] = []

    def __init__(self, name: str):
        self.name = name
        self._finalizer = weakref.finalize(self, _release, self.released, name)

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self):
        """Release the resource. Calling again has no effect."""
        self._finalizer()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        # Do not suppress exceptions.
        return False


class PluginBase:
    """Register subclasses by the ``name`` class keyword.

    Example::

        class Csv(PluginBase, name="csv"):
            ...

        assert PluginBase.get("csv") is Csv

    Subclasses defined without ``name`` are not registered. The registry holds
    classes weakly, so a plugin class that is no longer referenced drops out.
    """

    _registry: typing.ClassVar[typing.MutableMapping[str, type]] = weakref.WeakValueDictionary()
    plugin_name: typing.ClassVar[typing.Optional[str]] = None

    def __init_subclass__(cls, /, name: str = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if name is None:
            return
        existing = PluginBase._registry.get(name)
        if existing is not None:
            raise DuplicateKeyError(f"Plugin name {name!r} is already used by {existing.__qualname__}.")
        cls.plugin_name = name
        PluginBase._registry[name] = cls
        logger.debug(f"Registered plugin {name!r}: {cls.__qualname__}")

    @classmethod
    def get(cls, name: str) -> type:
        return PluginBase._registry[name]

    @classmethod
    def plugins(cls) -> typing.Dict[str, type]:
        return dict(PluginBase._registry)


class _Probe(LifecycleProbe):
    pass


class _NotAnInstance:
    def __new__(cls, value):
        # Returns an int, so _NotAnInstance.__init__ never runs.
        return int(value)

    def __init__(self, value):
        raise AssertionError("unreachable")


@chapter("lifecycle", title="Construction and destruction hooks")
def demo():
    observations = []

    _Probe.events.clear()
    probe = _Probe("first")
    del probe
    gc.collect()
    observations.append(("hook order", list(_Probe.events)))

    observations.append(("__new__ returning another type", _NotAnInstance("7")))

    Configuration.reset()
    first = Configuration(debug=True)
    second = Configuration(verbose=False)
    observations.append(("same instance", first is second))
    observations.append(("__init__ calls", second.init_calls))
    observations.append(("merged settings", second.settings))

    body = Celsius(36.6)
    observations.append(("immutable subclass", (body, body.fahrenheit)))
    try:
        Celsius(-300)
    except ValidationError as e:
        observations.append(("rejected in __new__", str(e)))

    with TrackedResource("socket") as resource:
        observations.append(("open inside with", not resource.closed))
    observations.append(("closed after with", resource.closed))
    dropped = TrackedResource("temp file")
    del dropped
    gc.collect()
    observations.append(("released", list(TrackedResource.released[-2:])))

    class _Json(PluginBase, name="demo-json"):
        pass

    observations.append(("registered plugin", PluginBase.get("demo-json").__name__))
    del _Json
    gc.collect()
    observations.append(("registry after del", "demo-json" in PluginBase.plugins()))
    return observations
