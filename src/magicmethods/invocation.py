"""Command line invocation of the chapter demos.

Usage::

    python -m magicmethods --list
    python -m magicmethods descriptors lookup
    python -m magicmethods --log-level DEBUG operators

With no chapter names, every chapter is run in reading order. Each observation
reported by a chapter is printed as one ``label: value`` line beneath a
header naming the chapter.

The base command line parser is provided by :py:func:`base_parser`, and extended
by :py:func:`make_parser` so that other entry points can compose it with the
*parents* mechanism of :py:class:`argparse.ArgumentParser`.
"""

__all__ = ("base_parser", "configure_logging", "make_parser", "parser", "run")

import argparse
import functools
import logging
import sys
import typing

from magicmethods import catalog

logger = logging.getLogger(__name__)
logger.debug("Importing {}".format(__name__))


@functools.cache
def base_parser(add_help=False):
    """Get the base magicmethods argument parser.

    By default, the returned ArgumentParser is created with ``add_help=False``
    to avoid conflicts when used as a *parent* for a parser more local to the caller.
    If *add_help* is provided, it is passed along to the ArgumentParser created
    in this function.

    See Also:
         https://docs.python.org/3/library/argparse.html#parents
    """
    from . import __version__ as _version

    _parser = argparse.ArgumentParser(add_help=add_help)

    _parser.add_argument("--version", action="version", version=f"magicmethods version {_version}")

    _parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Optionally configure console logging to the indicated level.",
    )

    return _parser


def make_parser(module: str, parents: typing.Iterable[argparse.ArgumentParser] = None):
    """Make a command line argument parser for a runnable module.

    Args:
        module: Name of the module, as given to ``python -m``.
        parents: Optional list of parent parsers.

    If *parents* is not provided, :py:func:`base_parser` is used to generate a default.
    """
    if parents is None:
        parents = [base_parser()]
    _parser = argparse.ArgumentParser(
        prog=module,
        description=f"Run the worked examples of `{module}` and print what they observe.",
        parents=parents,
    )
    _parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        help="List the available chapters and exit.",
    )
    _parser.add_argument(
        "chapters",
        metavar="chapter",
        nargs="*",
        help="Chapter(s) to run. Run all chapters if none are named.",
    )
    return _parser


parser = make_parser("magicmethods")


def configure_logging(level: str) -> logging.Handler:
    """Attach a console handler to the package logger."""
    character_stream = logging.StreamHandler()
    logging.getLogger("magicmethods").setLevel(level)
    character_stream.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    character_stream.setFormatter(formatter)
    logging.getLogger("magicmethods").addHandler(character_stream)
    return character_stream


def run(argv: typing.Sequence[str] = None, stream: typing.TextIO = None) -> int:
    """Execute the command line interface.

    Args:
        argv: Command line arguments, excluding the program name. Defaults to ``sys.argv[1:]``.
        stream: Output file. Defaults to ``sys.stdout``.

    Returns:
        Exit status. Argument errors (including unknown chapter names) exit
        through :py:meth:`argparse.ArgumentParser.error` with status 2.
    """
    if argv is None:
        argv = sys.argv[1:]
    if stream is None:
        stream = sys.stdout

    args = parser.parse_args(argv)

    if args.log_level is not None:
        configure_logging(args.log_level)

    if args.list:
        for item in catalog.chapters():
            print(f"{item.name:<14} {item.title}", file=stream)
        return 0

    if args.chapters:
        selected = []
        for name in args.chapters:
            try:
                selected.append(catalog.get_chapter(name))
            except KeyError as e:
                parser.error(e.args[0])
    else:
        selected = catalog.chapters()

    for item in selected:
        print(f"== {item.name}: {item.title}", file=stream)
        for label, value in item.run():
            print(f"{label}: {value!r}", file=stream)
    return 0
