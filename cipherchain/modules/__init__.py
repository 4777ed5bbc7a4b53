"""
Built-in transform modules. Importing this package registers every kind;
the import order below is the order available_modules() reports.
"""

from . import transform, alphabet, classical, polybius, enigma, encoding, bootstring, modern  # noqa: F401
