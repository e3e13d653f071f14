"""Hardener — host compliance auditing agent"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("hardener")
except PackageNotFoundError:
    __version__ = "dev"
