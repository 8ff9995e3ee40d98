"""
dummie - a couple of small command line conveniences:
directory tree printing and text translation.
"""

__version__ = "1.2.0"

from .strucview import DEFAULT_SKIP_DIRS, DirectoryNotFoundError, TreeRenderer, print_tree
from .translate import TranslationError, translate_text

__all__ = [
    "DEFAULT_SKIP_DIRS",
    "DirectoryNotFoundError",
    "TranslationError",
    "TreeRenderer",
    "print_tree",
    "translate_text",
]
