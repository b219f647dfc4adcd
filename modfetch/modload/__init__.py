"""
Module manifest loading, classification and canonical rewriting.
"""

from .adapter import ManifestAdapter, writable
from .gomod import GoMod, GopMod, ModSyntaxError, Project, Replace, Require
from .loader import LoadMode, Manifest, load

__all__ = [
    "GoMod",
    "GopMod",
    "LoadMode",
    "Manifest",
    "ManifestAdapter",
    "ModSyntaxError",
    "Project",
    "Replace",
    "Require",
    "load",
    "writable",
]
