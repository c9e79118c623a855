"""Makefile target parser.

This module turns Makefile text into an ordered list of Target records in a
single forward scan. It is a best-effort analyzer, not a Make evaluator:
variable expansion, includes, conditionals and pattern-rule instantiation are
approximated with heuristics.

What the scan recognizes:
    - Target headers (``name [name...]: deps ## description``), including
      several target names on one header line
    - Recipe lines (tab-prefixed lines following a header)
    - ``#`` and ``##`` comments, either on the line before a header or inline
      after the prerequisites

Dependency heuristics:
    Prerequisites after ``|`` (order-only) are dropped, as are fields that start
    with ``$`` (unexpanded variables), fields containing ``%`` (pattern rules)
    and fields that look like file paths (more than one ``/``, or both ``/``
    and ``.``). None of this is an error; unresolvable syntax is filtered out.

Example:
    targets = parse("./Makefile")
    for target in targets:
        print(target.name, target.dependencies)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from lazymake.errors import FileError, ScanError

logger = logging.getLogger(__name__)


# =============================================================================
# Data Models
# =============================================================================


class CommentType(str, Enum):
    """Kind of comment a target description came from."""

    NONE = "none"
    SINGLE = "single"  # "# comment"
    DOUBLE = "double"  # "## comment", the common documentation convention


@dataclass
class Target:
    """Represents a parsed Makefile target.

    Targets declared together on one header line (``build test: deps``) share
    the very same ``dependencies`` and ``recipe`` list objects.

    Attributes:
        name: The target name, unique key within a parse.
        description: Text of the nearest preceding or inline comment.
        comment_type: Which kind of comment the description came from.
        dependencies: Names of targets this target depends on, in order.
            Names may refer to targets that are not defined in the file.
        recipe: Recipe command lines, verbatim (including ``@``/``-`` markers).
    """

    name: str
    description: str = ""
    comment_type: CommentType = CommentType.NONE
    dependencies: list[str] = field(default_factory=list)
    recipe: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "comment_type": self.comment_type.value,
            "dependencies": list(self.dependencies),
            "recipe": list(self.recipe),
        }


@dataclass
class _Comment:
    text: str = ""
    comment_type: CommentType = CommentType.NONE


# =============================================================================
# Parsing
# =============================================================================


def parse(makefile_path: str | Path) -> list[Target]:
    """Parse a Makefile from disk.

    Args:
        makefile_path: Path to the Makefile.

    Returns:
        Targets in the order they appear in the file.

    Raises:
        FileError: If the file cannot be opened.
        ScanError: If reading the file fails part way through.
    """
    path = Path(makefile_path)

    try:
        handle = path.open(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileError(str(path), cause=e) from e

    with handle:
        try:
            targets = parse_lines(handle)
        except OSError as e:
            raise ScanError(str(path), cause=e) from e

    logger.info("targets_parsed: path=%s, count=%d", str(path), len(targets))
    return targets


def parse_string(content: str) -> list[Target]:
    """Parse Makefile text held in memory."""
    return parse_lines(content.splitlines())


def parse_lines(lines: Iterable[str]) -> list[Target]:
    """Scan Makefile lines and build Target records.

    Args:
        lines: Makefile lines, with or without trailing newlines.

    Returns:
        Targets in the order they appear.
    """
    targets: list[Target] = []
    last_comment = _Comment()
    current: list[Target] = []
    recipe: list[str] = []

    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        trimmed = line.strip()

        # Blank line ends the block: commit and forget the pending comment
        if not trimmed:
            _commit(current, recipe)
            current = []
            recipe = []
            last_comment = _Comment()
            continue

        if line.startswith("\t"):
            if current:
                recipe.append(line[1:])
            continue

        comment = _parse_comment_line(trimmed)
        if comment is not None:
            _commit(current, recipe)
            current = []
            recipe = []
            last_comment = comment
            continue

        # Only non-recipe lines can be headers, so "@echo a: b" never is
        if ":" in line and not is_variable_assignment(line):
            _commit(current, recipe)
            current = _process_header(line, targets, last_comment)
            recipe = []
            last_comment = _Comment()

    # A file without a trailing blank line still owns its last recipe
    _commit(current, recipe)

    return targets


def is_variable_assignment(line: str) -> bool:
    """Check whether a line is a Make variable assignment.

    ``:=``, ``?=`` and ``+=`` always mean assignment. A plain ``=`` only counts
    when it appears before the first ``:``, so ``VAR = a:b`` is an assignment
    while ``target: FOO=bar`` is a header.
    """
    if ":=" in line or "?=" in line or "+=" in line:
        return True
    eq = line.find("=")
    return eq >= 0 and eq < line.find(":")


def parse_dependencies(dep_text: str) -> list[str]:
    """Extract dependency target names from the prerequisite part of a header.

    Examples:
        "deps compile"       -> ["deps", "compile"]
        "deps | order-only"  -> ["deps"]
        "$(OBJS) target"     -> ["target"]
        "%.c"                -> []
        "src/pkg/main.go"    -> []
    """
    text = dep_text.strip()
    if not text:
        return []

    # Order-only prerequisites affect rebuild triggering, not ordering
    pipe = text.find("|")
    if pipe >= 0:
        text = text[:pipe]

    deps: list[str] = []
    for item in text.split():
        if item.startswith("$"):
            continue
        if "%" in item:
            continue
        if item.count("/") > 1:
            continue
        if "/" in item and "." in item:
            continue
        deps.append(item)

    return deps


def _commit(current: list[Target], recipe: list[str]) -> None:
    for target in current:
        target.recipe = recipe


def _parse_comment_line(trimmed: str) -> _Comment | None:
    if trimmed.startswith("##"):
        return _Comment(trimmed[2:].strip(), CommentType.DOUBLE)
    if trimmed.startswith("#"):
        return _Comment(trimmed[1:].strip(), CommentType.SINGLE)
    return None


def _extract_inline_comment(text: str) -> _Comment:
    idx = text.find("##")
    if idx >= 0:
        return _Comment(text[idx + 2 :].strip(), CommentType.DOUBLE)

    idx = text.find("#")
    if idx >= 0:
        return _Comment(text[idx + 1 :].strip(), CommentType.SINGLE)

    return _Comment()


def _process_header(
    line: str,
    targets: list[Target],
    last_comment: _Comment,
) -> list[Target]:
    """Append the targets declared by a header line.

    Returns:
        The newly created targets, which become the pending targets.
    """
    names_part, rest = line.split(":", 1)
    names_part = names_part.strip()

    # Special targets (.PHONY, .SILENT, ...) describe other targets
    if names_part.startswith("."):
        return []

    # "a:: b" double-colon rules
    if rest.startswith(":"):
        rest = rest[1:]

    inline = _extract_inline_comment(rest)

    hash_idx = rest.find("#")
    dep_text = rest[:hash_idx] if hash_idx >= 0 else rest
    dependencies = parse_dependencies(dep_text)

    description = last_comment.text
    comment_type = last_comment.comment_type
    if inline.text:
        description = inline.text
        comment_type = inline.comment_type

    created = [
        Target(
            name=name,
            description=description,
            comment_type=comment_type,
            dependencies=dependencies,
        )
        for name in names_part.split()
    ]
    targets.extend(created)
    return created
