"""Python logging facilities use the built-in logging module.

Upon import, the magicmethods package sets a placeholder "NullHandler" to block
propagation of log messages to the `handler of last resort
<https://docs.python.org/3/howto/logging.html#what-happens-if-no-configuration-is-provided>`__
(and to `sys.stderr`).

If you want to see logging output on `sys.stderr`, attach a
`logging.StreamHandler` to the 'magicmethods' logger, or pass ``--log-level``
to ``python -m magicmethods``.

Example::

    character_stream = logging.StreamHandler()
    # Optional: Set log level.
    logging.getLogger('magicmethods').setLevel(logging.DEBUG)
    character_stream.setLevel(logging.DEBUG)
    # Optional: create formatter and add to character stream handler
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    character_stream.setFormatter(formatter)
    # add handler to logger
    logging.getLogger('magicmethods').addHandler(character_stream)

Every chapter module uses a hierarchical sub-logger
(e.g. ``logging.getLogger('magicmethods.descriptors')``), so the demos of a
single chapter can be made more or less chatty independently.
"""

__all__ = ["logger"]

from logging import DEBUG
from logging import getLogger
from logging import NullHandler

# Define `logger` attribute that is used by submodules to create sub-loggers.
logger = getLogger("magicmethods")
# By default, prevent magicmethods logs from propagating to the root logger (and to sys.stderr)
# if the user does not take action to handle logging.
logger.addHandler(NullHandler(level=DEBUG))
