#!/usr/bin/env python3
"""
Tighten loose Markdown lists (no blank lines between list items).

Rules applied outside the YAML front matter:
- Blank lines between list items are removed
- A single blank line is kept before a list that follows text and after a list followed by text
- When the top-level marker changes inside a list region, a blank line separates the two lists
  and the top-level marker alternates between '-' and '*'
- Nested unordered items always use '-'
- Two trailing spaces (hard line break) become a backslash, other trailing whitespace is trimmed

Front matter ('---' on the first line up to the next '---') is copied through untouched.

Usage:
  python3 scripts/tighten_lists.py docs/index.md docs/faq.md
  cat README.md | python3 scripts/tighten_lists.py > README_clean.md
"""
from __future__ import annotations

import argparse
import os
import re
import shutil
import string
import sys
import tempfile
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Tuple

FRONT_MATTER_DELIM = "---"
MD_SUFFIX = ".md"

# indent, marker, rest of the line (absent for a bare unordered marker)
LIST_ITEM_RE = re.compile(r"^(\s*)(\d+\.(?=\s)|[-*+])(\s.*)?$", re.ASCII)
TRAILING_WS_RE = re.compile(r"\s+$", re.ASCII)

HEADER = "header"
LIST_ITEM = "list_item"
PLAIN = "plain"

ORDERED_KEY = "ordered"

EXAMPLES = """\
examples:
  # rewrite files in place
  tighten_lists.py document1.md document2.md

  # every .md file in the current directory
  tighten_lists.py *.md

  # pipe filter
  cat README.md | tighten_lists.py > README_clean.md
  pbpaste | tighten_lists.py | pbcopy
"""


class ListItem(NamedTuple):
    indent: int
    ordered: bool
    marker: str
    body: str
    line: str

    @property
    def key(self) -> str:
        """Marker identity used to decide whether a new list starts."""
        return ORDERED_KEY if self.ordered else self.marker

    @property
    def bare(self) -> bool:
        return is_blank(self.body)


def parse_list_item(line: str) -> Optional[ListItem]:
    m = LIST_ITEM_RE.match(line)
    if not m:
        return None
    indent, marker, body = m.groups()
    return ListItem(
        indent=len(indent),
        ordered=marker[0].isdigit(),
        marker=marker,
        body=body or "",
        line=line,
    )


def is_blank(line: str) -> bool:
    return not line.strip(string.whitespace)


def fix_trailing_whitespace(line: str) -> str:
    m = TRAILING_WS_RE.search(line)
    if not m:
        return line
    # exactly two spaces is a hard line break
    if m.group(0) == "  ":
        return line[:m.start()] + "\\"
    return line[:m.start()]


class Reformatter:
    """One-pass line transducer. Use a fresh instance per document."""

    def __init__(self):
        self.line_no = 0
        self.in_header = False
        self.header_closed = False
        self.in_list = False
        self.prev_marker = ""
        self.prev_indent = -1
        self.last_top_level_marker = ""
        self.output_marker = "-"
        self.last_line = ""

    def classify(self, line: str) -> Tuple[str, Optional[ListItem]]:
        if self.in_header or (self.line_no == 0 and line == FRONT_MATTER_DELIM):
            return HEADER, None
        item = parse_list_item(line)
        if item is not None:
            return LIST_ITEM, item
        return PLAIN, None

    def feed(self, line: str) -> List[str]:
        kind, item = self.classify(line)
        first = self.line_no == 0
        self.line_no += 1
        if kind == HEADER:
            return self._header_line(line, first)
        if kind == LIST_ITEM:
            return self._list_line(item, first)
        return self._plain_line(line)

    def transform(self, lines: Iterable[str]) -> List[str]:
        out: List[str] = []
        for line in lines:
            out.extend(self.feed(line))
        return out

    def _header_line(self, line: str, first: bool) -> List[str]:
        if first:
            self.in_header = True
        elif line == FRONT_MATTER_DELIM:
            self.in_header = False
            self.header_closed = True
        return [line]

    def _list_line(self, item: ListItem, first: bool) -> List[str]:
        out = []
        if not self.in_list:
            if not first and not is_blank(self.last_line):
                out.append("")
                self.output_marker = "-"
        elif item.indent == 0:
            if self.prev_indent == 0:
                new_list = item.key != self.prev_marker
            else:
                new_list = bool(self.last_top_level_marker) and item.key != self.last_top_level_marker
            if new_list:
                out.append("")
                self.output_marker = "*" if self.output_marker == "-" else "-"

        line = self._render(item)
        if not item.bare:
            line = fix_trailing_whitespace(line)
        out.append(line)

        if item.indent == 0:
            self.last_top_level_marker = item.key
        self.in_list = True
        self.prev_marker = item.key
        self.prev_indent = item.indent
        self.last_line = line
        return out

    def _render(self, item: ListItem) -> str:
        if item.ordered:
            if item.bare:
                # the space keeps it an ordered item on the next run
                return item.line[:item.indent] + item.marker + " "
            return item.line
        # nesting never alternates
        marker = self.output_marker if item.indent == 0 else "-"
        prefix = " " * item.indent + marker
        if item.bare:
            return prefix
        return prefix + item.body

    def _plain_line(self, line: str) -> List[str]:
        blank = is_blank(line)
        out = []
        if self.in_list:
            if blank:
                # separators between items are dropped
                self.last_line = ""
                return out
            out.append("")
            self.in_list = False
            self.prev_marker = ""
            self.last_top_level_marker = ""
            self.output_marker = "-"
        line = "" if blank else fix_trailing_whitespace(line)
        out.append(line)
        self.last_line = line
        return out


def transform(lines: Iterable[str]) -> List[str]:
    return Reformatter().transform(lines)


def split_lines(text: str) -> List[str]:
    # only \n separates lines; \x0c, \u2028 and friends stay in the text
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [l[:-1] if l.endswith("\r") else l for l in lines]


def format_text(text: str) -> str:
    out = transform(split_lines(text))
    if not out:
        return ""
    return "\n".join(out) + "\n"


def write_atomic(path: Path, text: str) -> None:
    """Replace path with text; the original is left as-is if anything fails."""
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def process_file(path: Path, dry_run: bool = False) -> bool:
    if not path.is_file():
        print(f"Warning: '{path}' not found, skipping...", file=sys.stderr)
        return False
    if not path.name.endswith(MD_SUFFIX):
        print(f"Warning: '{path}' is not a {MD_SUFFIX} file, skipping...", file=sys.stderr)
        return False
    try:
        s = path.read_text(encoding="utf-8")
        final = format_text(s)
        changed = final != s
        if dry_run:
            if changed:
                print(f"Would change: {path}", file=sys.stderr)
            return changed
        if changed:
            write_atomic(path, final)
            print(f"✓ Processed: {path}", file=sys.stderr)
        else:
            print(f"✓ Unchanged: {path}", file=sys.stderr)
        return changed
    except (OSError, UnicodeError) as e:
        print(f"✗ Error processing: {path} ({e})", file=sys.stderr)
        return False


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tighten_lists.py",
        description="Reformat Markdown files to have tight lists (no empty lines between list items). "
        "When no files are given, acts as a pipe filter reading from stdin.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("files", nargs="*", help="Markdown files to rewrite in place")
    p.add_argument("--dry-run", action="store_true", help="Report files that would change without writing them")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if not args.files:
        sys.stdout.write(format_text(sys.stdin.read()))
        return 0
    # a failed file is reported but does not fail the run
    for f in args.files:
        process_file(Path(f), dry_run=args.dry_run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
