"""Registry of the chapters shipped with the package.

Each chapter module decorates its ``demo()`` function with :py:func:`chapter`
at import time. The command line runner and the documentation build use
:py:func:`chapters` to discover what is available.
"""

from __future__ import annotations

__all__ = ("Chapter", "CHAPTER_MODULES", "chapter", "chapters", "get_chapter", "load_all")

import dataclasses
import importlib
import logging
import typing

from magicmethods.exceptions import DuplicateKeyError

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))

Observation = typing.Tuple[str, typing.Any]
"""A ``(label, value)`` pair reported by a chapter demo."""

DemoFunction = typing.Callable[[], typing.List[Observation]]

CHAPTER_MODULES: typing.Tuple[str, ...] = (
    "magicmethods.descriptors",
    "magicmethods.lazy",
    "magicmethods.lookup",
    "magicmethods.interception",
    "magicmethods.callables",
    "magicmethods.containers",
    "magicmethods.hashing",
    "magicmethods.lifecycle",
    "magicmethods.operators",
    "magicmethods.asynchronous",
)
"""Importable chapter modules, in reading order."""


@dataclasses.dataclass(frozen=True)
class Chapter:
    """A registered chapter."""

    name: str
    """Short name, used on the command line."""

    title: str
    """Human readable title of the article."""

    module: str
    """Name of the module defining the chapter."""

    demo: DemoFunction
    """Run the chapter example and report observations."""

    def run(self) -> typing.List[Observation]:
        logger.debug(f"Running chapter {self.name}.")
        return list(self.demo())


_registry: typing.Dict[str, Chapter] = {}


def chapter(name: str, title: str):
    """Get a decorator that registers a chapter demo function.

    Example::

        @chapter("descriptors", title="Reusable accessors")
        def demo():
            ...

    Raises:
        DuplicateKeyError: if *name* is already registered.
    """

    def decorator(func: DemoFunction) -> DemoFunction:
        if name in _registry:
            raise DuplicateKeyError(f"Chapter {name} is already registered by {_registry[name].module}.")
        _registry[name] = Chapter(name=name, title=title, module=func.__module__, demo=func)
        logger.debug(f"Registered chapter {name} from {func.__module__}.")
        return func

    return decorator


def load_all():
    """Import every chapter module so that all chapters are registered."""
    for module in CHAPTER_MODULES:
        importlib.import_module(module)


def chapters() -> typing.Tuple[Chapter, ...]:
    """Get all chapters, in reading order."""
    load_all()

    def reading_order(item: Chapter):
        try:
            return CHAPTER_MODULES.index(item.module)
        except ValueError:
            return len(CHAPTER_MODULES)

    return tuple(sorted(_registry.values(), key=reading_order))


def get_chapter(name: str) -> Chapter:
    """Get a chapter by its short name.

    Raises:
        KeyError: if no such chapter exists. The message lists the known names.
    """
    load_all()
    try:
        return _registry[name]
    except KeyError:
        raise KeyError(f"No chapter named {name!r}. Known chapters: {', '.join(_registry)}") from None
