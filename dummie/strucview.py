"""
strucview - print a directory as a tree, limited in depth and with noisy
directories (node_modules, build output, VCS metadata) collapsed.
"""

import logging
import math
import os
import stat
import sys
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

# Directories collapsed behind a placeholder unless the user says otherwise
DEFAULT_SKIP_DIRS = frozenset({
    'node_modules', 'next', 'dist', 'build', '.git', '.github'
})

PLACEHOLDER = "[...]"
ALL_LEVELS = "la"
BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


class DirectoryNotFoundError(FileNotFoundError):
    """The directory a tree was requested for does not exist."""


class DirectoryEntry(NamedTuple):
    name: str
    path: str
    is_dir: bool
    stat: os.stat_result


def parse_depth(value):
    """A non-negative integer, or 'la' meaning every level"""
    if value == ALL_LEVELS or value == math.inf:
        return math.inf
    level = -1
    if not isinstance(value, (bool, float)):
        try:
            level = int(value)
        except (TypeError, ValueError):
            pass
    if level < 0:
        raise ValueError(f"Level must be a non-negative number or '{ALL_LEVELS}', got {value!r}")
    return level


def ask_skip(name: str) -> bool:
    """Ask on the console whether directories called `name` should be collapsed"""
    # stderr keeps the question out of the tree on stdout
    print(f"Skip contents of '{name}' directories? [Y/n] ", end="", file=sys.stderr, flush=True)
    answer = sys.stdin.readline()
    if not answer:
        return True
    return answer.strip().lower() not in ('n', 'no')


def sort_key(entry: DirectoryEntry):
    # lowercase first when names differ only in case
    return (not entry.is_dir, entry.name.casefold(), entry.name.swapcase())


def scan_directory(path: str) -> List[DirectoryEntry]:
    """
    List the children of `path`, directories first.
    An unreadable directory yields no entries and an entry that cannot be
    stat-ed is left out.
    """
    try:
        names = os.listdir(path)
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return []

    entries = []
    for name in names:
        full_path = os.path.join(path, name)
        try:
            st = os.stat(full_path)
        except OSError as e:
            logger.debug("Cannot stat %s: %s", full_path, e)
            continue
        entries.append(DirectoryEntry(name, full_path, stat.S_ISDIR(st.st_mode), st))

    return sorted(entries, key=sort_key)


class TreeRenderer:
    """
    Prints a directory tree one line per entry.

    Directories named in `skip_dirs` are always collapsed to a `[...]` line.
    Directories named in `default_skip_dirs` are collapsed too, unless
    `interactive` is set, in which case `prompt(name)` decides once per name
    and the answer holds for the rest of the run.
    """

    def __init__(self,
                 skip_dirs: Optional[Iterable[str]] = None,
                 default_skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS,
                 interactive: bool = False,
                 prompt: Callable[[str], bool] = ask_skip,
                 output: Callable[[str], None] = print):
        self.skip_dirs = frozenset(skip_dirs or ())
        self.default_skip_dirs = frozenset(default_skip_dirs)
        self.interactive = interactive
        self.prompt = prompt
        self.output = output

    def render(self, root_path: str, max_depth=math.inf):
        """Print the tree under `root_path`, at most `max_depth` levels deep"""
        try:
            root = os.path.abspath(root_path)
            root_stat = os.stat(root)
        except FileNotFoundError:
            raise DirectoryNotFoundError(f"Directory not found: {root_path}") from None
        except (TypeError, ValueError, OSError) as e:
            raise DirectoryNotFoundError(f"Cannot access directory {root_path!r}: {e}") from e

        self.output(os.path.basename(root) or root)
        # Skip answers keyed by directory name, owned by this run
        decisions: Dict[str, bool] = {}
        self._walk(root, max_depth, "", 0, decisions, frozenset({_inode(root_stat)}))

    def should_skip(self, name: str, decisions: Dict[str, bool]) -> bool:
        if name in self.skip_dirs:
            return True
        if name not in self.default_skip_dirs:
            return False
        if not self.interactive:
            return True
        if name not in decisions:
            decisions[name] = bool(self.prompt(name))
        return decisions[name]

    def _walk(self, path, max_depth, prefix, depth, decisions, ancestors):
        if depth >= max_depth:
            return

        entries = scan_directory(path)
        for index, entry in enumerate(entries):
            is_last = index == len(entries) - 1
            self.output(prefix + (LAST_BRANCH if is_last else BRANCH) + entry.name)
            if not entry.is_dir:
                continue

            child_prefix = prefix + (SPACE if is_last else PIPE)
            inode = _inode(entry.stat)
            # ask only when the answer can change the output
            if (depth + 1 == max_depth
                    or inode in ancestors
                    or self.should_skip(entry.name, decisions)):
                self.output(child_prefix + LAST_BRANCH + PLACEHOLDER)
            else:
                self._walk(entry.path, max_depth, child_prefix, depth + 1,
                           decisions, ancestors | {inode})


def _inode(st: os.stat_result):
    return (st.st_dev, st.st_ino)


def print_tree(dir_path: str, max_depth=3, skip_dirs=None, interactive: bool = False,
               prompt: Callable[[str], bool] = ask_skip, output: Callable[[str], None] = print,
               default_skip_dirs: Iterable[str] = DEFAULT_SKIP_DIRS):
    renderer = TreeRenderer(skip_dirs=skip_dirs,
                            default_skip_dirs=default_skip_dirs,
                            interactive=interactive,
                            prompt=prompt,
                            output=output)
    renderer.render(dir_path, max_depth)
