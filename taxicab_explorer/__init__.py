"""Flight vs street distance explorer on a blockable grid."""

__version__ = "0.1.0"
