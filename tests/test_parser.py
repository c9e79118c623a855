"""Tests for the Makefile target parser.

Tests cover:
    - Variable assignment detection (TestIsVariableAssignment)
    - Dependency extraction heuristics (TestParseDependencies)
    - Headers, comments and recipes (TestParseLines)
    - Reading from disk and error handling (TestParseFile)
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lazymake.errors import ErrorCode, FileError
from lazymake.parser import (
    CommentType,
    is_variable_assignment,
    parse,
    parse_dependencies,
    parse_string,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "makefiles"


# =============================================================================
# TestIsVariableAssignment
# =============================================================================


class TestIsVariableAssignment:
    """Tests for is_variable_assignment()."""

    @pytest.mark.parametrize(
        "line",
        [
            "CC := gcc",
            "CFLAGS ?= -O2",
            "LDFLAGS += -lm",
            "OBJS = $(SRCS:.c=.o)",
            "URL = http://example.com",
        ],
    )
    def test_assignments(self, line: str) -> None:
        """Verify assignment forms are recognized."""
        assert is_variable_assignment(line) is True

    @pytest.mark.parametrize(
        "line",
        [
            "build: deps",
            "build:",
            "test: FOO=bar",
        ],
    )
    def test_headers(self, line: str) -> None:
        """Verify target headers are not mistaken for assignments."""
        assert is_variable_assignment(line) is False


# =============================================================================
# TestParseDependencies
# =============================================================================


class TestParseDependencies:
    """Tests for parse_dependencies()."""

    def test_plain_names_keep_order(self) -> None:
        """Verify plain names are returned in order."""
        assert parse_dependencies(" deps compile  link ") == ["deps", "compile", "link"]

    def test_empty_text(self) -> None:
        """Verify empty prerequisite text yields no dependencies."""
        assert parse_dependencies("   ") == []

    def test_order_only_prerequisites_are_dropped(self) -> None:
        """Verify everything after '|' is ignored."""
        assert parse_dependencies("deps | bindir") == ["deps"]

    def test_variables_are_dropped(self) -> None:
        """Verify unexpanded variable references are ignored."""
        assert parse_dependencies("$(OBJS) ${LIBS} target") == ["target"]

    def test_pattern_placeholders_are_dropped(self) -> None:
        """Verify pattern-rule fields are ignored."""
        assert parse_dependencies("%.c lib%") == []

    def test_file_paths_are_dropped(self) -> None:
        """Verify path-like fields are ignored."""
        assert parse_dependencies("src/pkg/main.go include/config.h dir/sub") == ["dir/sub"]


# =============================================================================
# TestParseLines
# =============================================================================


class TestParseLines:
    """Tests for the line scanner."""

    def test_double_hash_comment_becomes_description(self) -> None:
        """Verify a '##' comment before a header describes the target."""
        targets = parse_string("## Build the app\nbuild:\n\tgo build\n")

        assert len(targets) == 1
        assert targets[0].name == "build"
        assert targets[0].description == "Build the app"
        assert targets[0].comment_type == CommentType.DOUBLE
        assert targets[0].recipe == ["go build"]

    def test_single_hash_comment(self) -> None:
        """Verify a '#' comment is recorded with the single kind."""
        targets = parse_string("# Remove output\nclean:\n\trm -rf out\n")

        assert targets[0].description == "Remove output"
        assert targets[0].comment_type == CommentType.SINGLE

    def test_no_comment(self) -> None:
        """Verify targets without comments have an empty description."""
        targets = parse_string("build:\n\tgo build\n")

        assert targets[0].description == ""
        assert targets[0].comment_type == CommentType.NONE

    def test_blank_line_clears_pending_comment(self) -> None:
        """Verify a comment separated by a blank line does not describe the target."""
        targets = parse_string("## Stale comment\n\nbuild:\n\tgo build\n")

        assert targets[0].description == ""
        assert targets[0].comment_type == CommentType.NONE

    def test_inline_comment_overrides_preceding_comment(self) -> None:
        """Verify an inline comment wins over the line above."""
        targets = parse_string("# Above\nbuild: deps ## Inline\n\tgo build\n")

        assert targets[0].description == "Inline"
        assert targets[0].comment_type == CommentType.DOUBLE
        assert targets[0].dependencies == ["deps"]

    def test_inline_single_hash_comment(self) -> None:
        """Verify a single-hash inline comment is used and excluded from deps."""
        targets = parse_string("lint: fmt # Run linters\n")

        assert targets[0].description == "Run linters"
        assert targets[0].comment_type == CommentType.SINGLE
        assert targets[0].dependencies == ["fmt"]

    def test_empty_inline_comment_keeps_preceding_comment(self) -> None:
        """Verify an empty inline comment does not erase the description."""
        targets = parse_string("## Real description\nbuild: ##\n")

        assert targets[0].description == "Real description"

    def test_multiple_targets_share_dependencies_and_recipe(self) -> None:
        """Verify several names on one header share their lists."""
        targets = parse_string("## Static checks\nlint fmt: config\n\techo $@\n")

        assert [t.name for t in targets] == ["lint", "fmt"]
        lint, fmt = targets
        assert lint.dependencies == fmt.dependencies == ["config"]
        assert lint.recipe == fmt.recipe == ["echo $@"]
        assert lint.dependencies is fmt.dependencies
        assert lint.recipe is fmt.recipe
        assert fmt.description == "Static checks"

    def test_recipe_line_with_colon_is_not_a_header(self) -> None:
        """Verify '@echo "a: b"' stays a recipe line."""
        targets = parse_string('build:\n\t@echo "a: b"\n\techo x:y\n')

        assert [t.name for t in targets] == ["build"]
        assert targets[0].recipe == ['@echo "a: b"', "echo x:y"]

    def test_recipe_without_trailing_blank_line_is_kept(self) -> None:
        """Verify the last target's recipe survives end of input."""
        targets = parse_string("build:\n\tgo build\n\tgo vet")

        assert targets[0].recipe == ["go build", "go vet"]

    def test_special_targets_produce_no_target(self) -> None:
        """Verify .PHONY and friends are not targets."""
        targets = parse_string(".PHONY: build\n.SILENT:\nbuild:\n\tgo build\n")

        assert [t.name for t in targets] == ["build"]

    def test_recipe_lines_without_target_are_ignored(self) -> None:
        """Verify orphan tab lines do not attach to anything."""
        targets = parse_string("\techo orphan\n\nbuild:\n\tgo build\n")

        assert targets[0].recipe == ["go build"]

    def test_comment_line_ends_recipe(self) -> None:
        """Verify a comment between recipe lines closes the target."""
        targets = parse_string("build:\n\tgo build\n# note\n\techo dropped\n")

        assert targets[0].recipe == ["go build"]

    def test_variable_assignments_are_skipped(self) -> None:
        """Verify assignments never become targets."""
        targets = parse_string("CC := gcc\nOBJS = $(SRCS:.c=.o)\nbuild:\n\t$(CC) main.c\n")

        assert [t.name for t in targets] == ["build"]

    def test_double_colon_rule(self) -> None:
        """Verify 'a:: b' is parsed like 'a: b'."""
        targets = parse_string("install:: all\n\tcp app /usr/local/bin\n")

        assert targets[0].name == "install"
        assert targets[0].dependencies == ["all"]

    def test_crlf_line_endings(self) -> None:
        """Verify Windows line endings are handled."""
        targets = parse_string("## Build\r\nbuild: deps\r\n\tgo build\r\n")

        assert targets[0].description == "Build"
        assert targets[0].dependencies == ["deps"]
        assert targets[0].recipe == ["go build"]

    def test_duplicate_definitions_are_kept_in_order(self) -> None:
        """Verify both definitions of a name are returned."""
        targets = parse_string("build:\n\techo one\n\nbuild:\n\techo two\n")

        assert [t.recipe for t in targets] == [["echo one"], ["echo two"]]

    def test_to_dict(self) -> None:
        """Verify targets serialize with their comment kind."""
        target = parse_string("## Build\nbuild: deps\n\tgo build\n")[0]

        assert target.to_dict() == {
            "name": "build",
            "description": "Build",
            "comment_type": "double",
            "dependencies": ["deps"],
            "recipe": ["go build"],
        }


# =============================================================================
# TestParseFile
# =============================================================================


class TestParseFile:
    """Tests for parse() with fixture files."""

    def test_simple_fixture(self) -> None:
        """Verify the simple fixture's targets and recipes."""
        targets = {t.name: t for t in parse(FIXTURES_DIR / "simple.mk")}

        assert list(targets) == ["all", "build", "test", "deps", "clean"]
        assert targets["all"].dependencies == ["build", "test"]
        assert targets["all"].recipe == []
        assert targets["test"].recipe == ["go test ./...", '@echo "tests: done"']
        assert targets["clean"].comment_type == CommentType.SINGLE

    def test_complex_fixture(self) -> None:
        """Verify heuristics on variables, patterns and paths."""
        targets = {t.name: t for t in parse(FIXTURES_DIR / "complex.mk")}

        assert "CC" not in targets
        assert targets["all"].description == "Build everything"
        assert targets["app"].dependencies == ["config"]
        assert targets["%.o"].dependencies == []
        assert targets["config"].dependencies == []
        assert targets["lint"].description == "Static analysis"
        assert targets["fmt"].recipe == ['@echo "running: $@"']
        assert targets["install"].dependencies == ["all"]
        assert targets["check"].dependencies == ["lint", "external-tool"]

    def test_missing_file_raises_file_error(self, tmp_path: Path) -> None:
        """Verify a missing Makefile raises FileError chained to OSError."""
        with pytest.raises(FileError) as exc_info:
            parse(tmp_path / "Makefile")

        assert exc_info.value.code == ErrorCode.FILE_ERROR
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_non_utf8_bytes_are_tolerated(self, tmp_path: Path) -> None:
        """Verify invalid UTF-8 bytes do not stop the parse."""
        makefile = tmp_path / "Makefile"
        makefile.write_bytes(b"build:\n\techo \xff\xfe\n")

        targets = parse(makefile)

        assert [t.name for t in targets] == ["build"]
        assert targets[0].recipe == ["echo \ufffd\ufffd"]

    def test_latin1_comment(self, tmp_path: Path) -> None:
        """Verify a Latin-1 encoded comment keeps the following targets."""
        makefile = tmp_path / "Makefile"
        makefile.write_bytes(
            b"# (c) Jos\xe9 2024\n"
            b"build: deps ## Compile for Jos\xe9\n"
            b"\tgo build\n"
            b"\n"
            b"deps:\n"
            b"\tgo mod download\n"
        )

        targets = {t.name: t for t in parse(makefile)}

        assert list(targets) == ["build", "deps"]
        assert targets["build"].dependencies == ["deps"]
        assert targets["build"].description == "Compile for Jos\ufffd"
        assert targets["deps"].recipe == ["go mod download"]

    def test_empty_file(self, tmp_path: Path) -> None:
        """Verify an empty Makefile yields no targets."""
        makefile = tmp_path / "Makefile"
        makefile.write_text("")

        assert parse(makefile) == []
