"""Directory tree rendering tests.

Covers depth limits, collapsed directories, interactive skip answers and
best-effort handling of unreadable entries.
"""

from __future__ import annotations

import io
import math
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from dummie.strucview import (
    DirectoryEntry,
    DirectoryNotFoundError,
    TreeRenderer,
    ask_skip,
    parse_depth,
    print_tree,
    sort_key,
)


def render(root: Path, max_depth=math.inf, **options) -> list[str]:
    lines: list[str] = []
    print_tree(str(root), max_depth, output=lines.append, **options)
    return lines


def make_root(tmp: str, name: str = "root") -> Path:
    root = Path(tmp).resolve() / name
    root.mkdir()
    return root


class TreeRenderingTests(unittest.TestCase):
    def test_empty_directory_renders_only_its_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            self.assertEqual(render(root), ["root"])

    def test_zero_depth_prints_root_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "sub").mkdir()
            (root / "file.txt").write_text("x", encoding="utf-8")

            self.assertEqual(render(root, 0), ["root"])

    def test_directories_sort_before_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "b.txt").write_text("b", encoding="utf-8")
            (root / "A").mkdir()
            (root / "a.txt").write_text("a", encoding="utf-8")
            (root / "B").mkdir()

            self.assertEqual(
                render(root),
                ["root", "├── A", "├── B", "├── a.txt", "└── b.txt"],
            )

    def test_depth_limit_collapses_next_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "sub").mkdir()
            (root / "sub" / "f.txt").write_text("f", encoding="utf-8")

            self.assertEqual(render(root, 1), ["root", "└── sub", "    └── [...]"])

    def test_prefixes_keep_columns_aligned(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "x" / "inner").mkdir(parents=True)
            (root / "x" / "inner" / "deep.txt").write_text("d", encoding="utf-8")
            (root / "x" / "y.txt").write_text("y", encoding="utf-8")
            (root / "z.txt").write_text("z", encoding="utf-8")

            self.assertEqual(
                render(root),
                [
                    "root",
                    "├── x",
                    "│   ├── inner",
                    "│   │   └── deep.txt",
                    "│   └── y.txt",
                    "└── z.txt",
                ],
            )

    def test_unlimited_depth_reaches_every_level(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            deep = root / "a" / "b" / "c" / "d"
            deep.mkdir(parents=True)
            (deep / "e.txt").write_text("e", encoding="utf-8")

            lines = render(root, math.inf)
            self.assertEqual(lines[-1].strip(), "└── e.txt")
            self.assertNotIn("[...]", "".join(lines))

    def test_missing_root_raises_directory_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "nope"
            with self.assertRaises(DirectoryNotFoundError) as ctx:
                render(missing)
            self.assertIsInstance(ctx.exception, FileNotFoundError)

    def test_root_is_traversed_even_with_a_skipped_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp, "node_modules")
            (root / "index.js").write_text("", encoding="utf-8")

            self.assertEqual(render(root), ["node_modules", "└── index.js"])


class SkipDirectoryTests(unittest.TestCase):
    def test_default_skip_dirs_are_collapsed_without_prompting(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "node_modules" / "pkg").mkdir(parents=True)
            (root / "src").mkdir()
            (root / "src" / "main.py").write_text("", encoding="utf-8")
            prompt = mock.Mock(return_value=False)

            lines = render(root, prompt=prompt)

            prompt.assert_not_called()
            self.assertEqual(
                lines,
                ["root", "├── node_modules", "│   └── [...]", "└── src", "    └── main.py"],
            )

    def test_caller_skip_dirs_are_collapsed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "coverage").mkdir()
            (root / "coverage" / "index.html").write_text("", encoding="utf-8")

            lines = render(root, skip_dirs={"coverage"})
            self.assertEqual(lines, ["root", "└── coverage", "    └── [...]"])

    def test_interactive_prompt_is_asked_once_per_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            for parent, name in (("a", "x.txt"), ("b", "y.txt")):
                (root / parent / "dist").mkdir(parents=True)
                (root / parent / "dist" / name).write_text("", encoding="utf-8")
            prompt = mock.Mock(return_value=False)

            lines = render(root, interactive=True, prompt=prompt)

            prompt.assert_called_once_with("dist")
            self.assertIn("│       └── x.txt", lines)
            self.assertIn("        └── y.txt", lines)

    def test_interactive_skip_answer_applies_to_every_match(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            for parent in ("a", "b"):
                (root / parent / "build").mkdir(parents=True)
                (root / parent / "build" / "out.o").write_text("", encoding="utf-8")
            prompt = mock.Mock(return_value=True)

            lines = render(root, interactive=True, prompt=prompt)

            prompt.assert_called_once_with("build")
            self.assertEqual(lines.count("│   └── build"), 1)
            self.assertEqual(lines.count("    └── build"), 1)
            self.assertEqual(sum(line.endswith("[...]") for line in lines), 2)
            self.assertFalse(any("out.o" in line for line in lines))

    def test_interactive_does_not_ask_for_caller_skip_dirs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "dist").mkdir()
            prompt = mock.Mock(return_value=False)

            lines = render(root, interactive=True, prompt=prompt, skip_dirs={"dist"})

            prompt.assert_not_called()
            self.assertEqual(lines, ["root", "└── dist", "    └── [...]"])

    def test_skip_answers_do_not_leak_between_runs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / ".git").mkdir()
            prompt = mock.Mock(return_value=True)
            renderer = TreeRenderer(interactive=True, prompt=prompt, output=lambda line: None)

            renderer.render(str(root))
            renderer.render(str(root))

            self.assertEqual(prompt.call_count, 2)


    def test_no_prompt_at_the_depth_limit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "node_modules" / "pkg").mkdir(parents=True)
            prompt = mock.Mock(return_value=False)

            lines = render(root, 1, interactive=True, prompt=prompt)

            prompt.assert_not_called()
            self.assertEqual(lines, ["root", "└── node_modules", "    └── [...]"])

    def test_console_prompt_goes_to_stderr(self) -> None:
        stdout, stderr = io.StringIO(), io.StringIO()
        with mock.patch("sys.stdin", io.StringIO("no\n")), \
                redirect_stdout(stdout), redirect_stderr(stderr):
            self.assertFalse(ask_skip("dist"))

        self.assertEqual(stdout.getvalue(), "")
        self.assertIn("Skip contents of 'dist' directories? [Y/n]", stderr.getvalue())

    def test_console_prompt_defaults_to_skip(self) -> None:
        for answer in ("\n", "y\n", ""):
            with self.subTest(answer=answer), mock.patch("sys.stdin", io.StringIO(answer)), \
                    redirect_stderr(io.StringIO()):
                self.assertTrue(ask_skip("build"))


class SortOrderTests(unittest.TestCase):
    def test_lowercase_sorts_before_uppercase_on_ties(self) -> None:
        names = ["B", "a", "A", "b", "Ab", "aB"]
        entries = [DirectoryEntry(name, name, False, None) for name in names]

        ordered = [entry.name for entry in sorted(entries, key=sort_key)]

        self.assertEqual(ordered, ["a", "A", "aB", "Ab", "b", "B"])

    def test_depth_values(self) -> None:
        self.assertEqual(parse_depth("la"), math.inf)
        self.assertEqual(parse_depth("4"), 4)
        self.assertEqual(parse_depth(0), 0)
        for bad in ("-1", "abc", 1.5, True, None):
            with self.subTest(value=bad), self.assertRaises(ValueError):
                parse_depth(bad)


class UnreadableEntryTests(unittest.TestCase):
    def test_entry_failing_stat_is_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            for name in ("a.txt", "broken.txt", "c.txt"):
                (root / name).write_text(name, encoding="utf-8")
            broken = str(root / "broken.txt")
            real_stat = os.stat

            def flaky_stat(path, *args, **kwargs):
                if str(path) == broken:
                    raise PermissionError(path)
                return real_stat(path, *args, **kwargs)

            with mock.patch("dummie.strucview.os.stat", side_effect=flaky_stat):
                lines = render(root)

            self.assertEqual(lines, ["root", "├── a.txt", "└── c.txt"])

    def test_unlistable_directory_renders_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "locked").mkdir()
            (root / "locked" / "secret.txt").write_text("s", encoding="utf-8")
            (root / "open").mkdir()
            (root / "open" / "readme.md").write_text("r", encoding="utf-8")
            locked = str(root / "locked")
            real_listdir = os.listdir

            def guarded_listdir(path):
                if str(path) == locked:
                    raise PermissionError(path)
                return real_listdir(path)

            with mock.patch("dummie.strucview.os.listdir", side_effect=guarded_listdir):
                lines = render(root)

            self.assertEqual(lines, ["root", "├── locked", "└── open", "    └── readme.md"])

    @unittest.skipUnless(hasattr(os, "symlink") and os.name != "nt", "needs POSIX symlinks")
    def test_symlink_to_ancestor_is_collapsed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = make_root(tmp)
            (root / "a").mkdir()
            os.symlink(root, root / "a" / "loop")

            self.assertEqual(
                render(root),
                ["root", "└── a", "    └── loop", "        └── [...]"],
            )


if __name__ == "__main__":
    unittest.main()
