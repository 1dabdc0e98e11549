"""Container and sequence protocols.

A sequence needs only two hooks: ``__len__`` and ``__getitem__``. Everything
else (iteration, membership, ``reversed()``) has a fallback built on them,
and `collections.abc.Sequence` adds ``index()`` and ``count()`` as mixin methods.

The fallbacks are tried in a fixed order.

``iter(obj)``
    uses ``type(obj).__iter__`` if defined; otherwise, if ``__getitem__`` is
    defined, creates an iterator that calls ``obj[0]``, ``obj[1]``, ... until
    `IndexError`.
``x in obj``
    uses ``type(obj).__contains__`` if defined; otherwise iterates as above,
    comparing each item with ``x``.

Setting a hook to None in a class body (``__iter__ = None``) explicitly marks
the object as *not* supporting the operation, and no fallback is tried.

Mappings use ``__getitem__`` differently: a `dict` subclass may define
``__missing__``, which ``dict.__getitem__`` calls for absent keys (but
``dict.get`` does not).
"""

from __future__ import annotations

__all__ = [
    "CaseInsensitiveDict",
    "CountingDict",
    "IndexedOnly",
    "Playlist",
    "iteration_protocol",
    "membership_protocol",
    "demo",
]

import collections.abc
import logging
import typing

from magicmethods.catalog import chapter

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

_MISSING = object()


class Playlist(collections.abc.Sequence):
    """An ordered, immutable collection of track names.

    Slicing returns a Playlist, not a list.
    """

    def __init__(self, tracks: typing.Iterable[str] = ()):
        self._tracks = list(tracks)

    def __len__(self):
        return len(self._tracks)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self.__class__(self._tracks[index])
        return self._tracks[index]

    def __contains__(self, track):
        return track in self._tracks

    def __iter__(self):
        return iter(self._tracks)

    def __reversed__(self):
        return reversed(self._tracks)

    def __add__(self, other):
        if not isinstance(other, Playlist):
            return NotImplemented
        return self.__class__(self._tracks + other._tracks)

    def __eq__(self, other):
        if not isinstance(other, Playlist):
            return NotImplemented
        return self._tracks == other._tracks

    def __repr__(self):
        return f"{self.__class__.__name__}({self._tracks!r})"


class IndexedOnly:
    """Defines ``__getitem__`` only, and counts how often it is called."""

    def __init__(self, data: typing.Sequence):
        self._data = data
        self.lookups = 0

    def __getitem__(self, index):
        self.lookups += 1
        return self._data[index]


def _special(obj, name: str):
    for base in type(obj).__mro__:
        if name in base.__dict__:
            return base.__dict__[name]
    return _MISSING


def iteration_protocol(obj) -> typing.Optional[str]:
    """Name the hook that ``iter(obj)`` would use.

    Returns:
        ``"__iter__"``, ``"__getitem__"``, or None if *obj* is not iterable.
    """
    hook = _special(obj, "__iter__")
    if hook is not _MISSING:
        # ``__iter__ = None`` blocks the __getitem__ fallback, too.
        return None if hook is None else "__iter__"
    hook = _special(obj, "__getitem__")
    if hook is not _MISSING and hook is not None:
        return "__getitem__"
    return None


def membership_protocol(obj) -> typing.Optional[str]:
    """Name the hook that ``item in obj`` would use.

    Returns:
        ``"__contains__"``, ``"__iter__"``, ``"__getitem__"``, or None if
        ``in`` raises `TypeError` for *obj*.
    """
    hook = _special(obj, "__contains__")
    if hook is not _MISSING:
        return None if hook is None else "__contains__"
    return iteration_protocol(obj)


class CountingDict(dict):
    """A dict in which absent keys read as zero.

    Like `collections.Counter`, reading an absent key does not insert it;
    ``counts[key] += 1`` reads zero and then stores one.
    """

    def __missing__(self, key):
        return 0

    @classmethod
    def tally(cls, items: typing.Iterable[typing.Hashable]) -> "CountingDict":
        counts = cls()
        for item in items:
            counts[item] += 1
        return counts


def _fold(key) -> str:
    if not isinstance(key, str):
        raise TypeError(f"CaseInsensitiveDict keys must be str, not {type(key).__name__}.")
    return key.casefold()


class CaseInsensitiveDict(collections.abc.MutableMapping):
    """A mapping of string keys that ignores case.

    Iteration yields each key in the case used by the most recent assignment.
    Equality with another mapping also ignores the case of its keys.
    """

    def __init__(self, data: typing.Union[typing.Mapping, typing.Iterable] = (), **kwargs):
        self._data: typing.Dict[str, typing.Tuple[str, typing.Any]] = {}
        self.update(data, **kwargs)

    def __getitem__(self, key):
        # Non-str keys are simply absent, so `in` and .get() work for any key.
        if isinstance(key, str) and key.casefold() in self._data:
            return self._data[key.casefold()][1]
        raise KeyError(key)

    def __setitem__(self, key, value):
        self._data[_fold(key)] = (key, value)

    def __delitem__(self, key):
        if not isinstance(key, str) or key.casefold() not in self._data:
            raise KeyError(key)
        del self._data[key.casefold()]

    def __iter__(self):
        return (key for key, _ in self._data.values())

    def __len__(self):
        return len(self._data)

    def __eq__(self, other):
        if not isinstance(other, collections.abc.Mapping):
            return NotImplemented
        try:
            folded = {_fold(key): value for key, value in other.items()}
        except TypeError:
            return False
        if len(folded) != len(other):
            # Two keys of the other mapping differ only by case.
            return False
        return folded == {key: value for key, (_, value) in self._data.items()}

    def copy(self) -> "CaseInsensitiveDict":
        return self.__class__(self._data.values())

    def __repr__(self):
        return f"{self.__class__.__name__}({dict(self.items())!r})"


class _NotIterable:
    __iter__ = None

    def __getitem__(self, index):
        return index


@chapter("containers", title="Container and sequence protocols")
def demo():
    observations = []

    playlist = Playlist(["intro", "verse", "chorus", "verse", "outro"])
    observations.append(("len", len(playlist)))
    observations.append(("slice", playlist[1:3]))
    observations.append(("index mixin", playlist.index("chorus")))
    observations.append(("count mixin", playlist.count("verse")))
    observations.append(("reversed", list(reversed(playlist))))
    observations.append(("concatenated", playlist[:1] + playlist[-1:]))

    legacy = IndexedOnly("abc")
    observations.append(("iter via __getitem__", list(legacy)))
    observations.append(("lookups including the final IndexError", legacy.lookups))
    observations.append(("in via __getitem__", "b" in legacy))

    for obj in (playlist, legacy, _NotIterable(), 42):
        observations.append(
            (f"protocols of {type(obj).__name__}", (iteration_protocol(obj), membership_protocol(obj)))
        )

    counts = CountingDict.tally("mississippi")
    observations.append(("tally", dict(counts)))
    observations.append(("absent key", counts["z"]))
    observations.append(("absent key not stored", "z" in counts))
    observations.append((".get skips __missing__", counts.get("z")))

    headers = CaseInsensitiveDict({"Content-Type": "text/plain"})
    headers["content-length"] = "12"
    headers["CONTENT-TYPE"] = "application/json"
    observations.append(("case-insensitive read", headers["content-type"]))
    observations.append(("keys keep last case", list(headers)))
    same = {"content-type": "application/json", "Content-Length": "12"}
    observations.append(("equality ignores case", headers == same))
    return observations
