"""Package version, kept in one place for setup.cfg and ``--version``."""

__version__ = "0.1.0"
