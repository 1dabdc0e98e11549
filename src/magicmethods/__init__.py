"""magicmethods - worked chapters on the hooks of the Python object model.

Each chapter is a small, importable module of example classes, accompanied by
an article in the package documentation:

* :py:mod:`magicmethods.descriptors` -- reusable, validating accessors
* :py:mod:`magicmethods.lazy` -- a memoizing attribute
* :py:mod:`magicmethods.lookup` -- the priority order of attribute lookup
* :py:mod:`magicmethods.interception` -- ``__getattr__`` and friends
* :py:mod:`magicmethods.callables` -- objects that can be called
* :py:mod:`magicmethods.containers` -- sequence, iteration and mapping hooks
* :py:mod:`magicmethods.hashing` -- the equality and hashing contract
* :py:mod:`magicmethods.lifecycle` -- construction and destruction hooks
* :py:mod:`magicmethods.operators` -- operator overloading and dispatch
* :py:mod:`magicmethods.asynchronous` -- awaitables, async iterators and context managers

The chapters do not depend on each other. Import the one you are reading.

Invocation:
    Every chapter has a ``demo()`` function that runs its examples and reports
    what it observed. Run some or all of them from the command line::

        python -m magicmethods --list
        python -m magicmethods lookup operators

"""
from __future__ import annotations

# Note: Even though `from magicmethods import *` is generally discouraged, the __all__ module attribute is useful
# to document the intended public interface *and* to indicate sort order for tools like
# https://www.sphinx-doc.org/en/master/usage/extensions/autodoc.html#directive-automodule
__all__ = (
    # chapters
    "chapters",
    "get_chapter",
    # utilities and helpers
    "__version__",
    "logger",
)

from ._version import __version__
from .logger import logger
from .catalog import chapters
from .catalog import get_chapter

logger.debug("Imported {}".format(__name__))
