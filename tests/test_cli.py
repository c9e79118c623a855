"""Tests for the lazymake CLI.

Tests cover:
    - list command (TestListCommand)
    - graph command (TestGraphCommand)
    - check command (TestCheckCommand)
    - rules, init and version commands (TestRulesCommand, TestInitCommand,
      TestVersionCommand)
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lazymake.cli.main import app
from lazymake.config import DEFAULT_CONFIG_TEMPLATE
from lazymake.safety import BUILTIN_RULES

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "makefiles"

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory with an empty HOME."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("LAZYMAKE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def fixture(name: str) -> str:
    return str(FIXTURES_DIR / name)


# =============================================================================
# TestListCommand
# =============================================================================


class TestListCommand:
    """Tests for `lazymake list`."""

    def test_lists_targets(self) -> None:
        """Verify targets and descriptions are shown."""
        result = runner.invoke(app, ["list", fixture("simple.mk")])

        assert result.exit_code == 0
        assert "TARGET" in result.stdout
        assert "Compile the application" in result.stdout
        assert "clean" in result.stdout

    def test_shows_safety_badges(self) -> None:
        """Verify dangerous targets carry their level."""
        result = runner.invoke(app, ["list", fixture("dangerous.mk")])

        assert result.exit_code == 0
        nuke_line = next(line for line in result.stdout.splitlines() if line.startswith("nuke-db"))
        assert "CRITICAL" in nuke_line
        build_line = next(line for line in result.stdout.splitlines() if line.startswith("build"))
        assert "CRITICAL" not in build_line
        assert "WARNING" not in build_line

    def test_json_output(self) -> None:
        """Verify JSON output includes each target's danger level."""
        result = runner.invoke(app, ["list", fixture("dangerous.mk"), "--json"])

        assert result.exit_code == 0
        data = {entry["name"]: entry for entry in json.loads(result.stdout)}
        assert data["nuke-db"]["danger_level"] == "CRITICAL"
        assert data["docker-clean"]["danger_level"] == "INFO"
        assert data["build"]["danger_level"] is None
        assert data["build"]["comment_type"] == "double"

    def test_uses_configured_makefile(self, isolated_env: Path) -> None:
        """Verify the makefile setting is used when no path is given."""
        shutil.copy(FIXTURES_DIR / "simple.mk", isolated_env / "project.mk")
        (isolated_env / ".lazymake.yaml").write_text("makefile: project.mk\n")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "Download dependencies" in result.stdout

    def test_missing_makefile(self) -> None:
        """Verify an unreadable Makefile exits with status 1."""
        result = runner.invoke(app, ["list", "does-not-exist.mk"])

        assert result.exit_code == 1
        assert "failed to open Makefile" in result.output

    def test_empty_makefile(self, isolated_env: Path) -> None:
        """Verify a Makefile without targets is reported."""
        (isolated_env / "Makefile").write_text("CC := gcc\n")

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "No targets found" in result.stdout


# =============================================================================
# TestGraphCommand
# =============================================================================


class TestGraphCommand:
    """Tests for `lazymake graph`."""

    def test_renders_tree_and_legend(self) -> None:
        """Verify the annotated tree and legend are printed."""
        result = runner.invoke(app, ["graph", fixture("simple.mk")])

        assert result.exit_code == 0
        assert "└── all [4] ★ — Build and test everything" in result.stdout
        assert "        └── build (see above)" in result.stdout
        assert "Legend: [N] = execution order, ★ = critical path" in result.stdout

    def test_hides_annotations(self) -> None:
        """Verify the --no-* flags remove markers and the legend."""
        result = runner.invoke(
            app,
            ["graph", fixture("simple.mk"), "--no-order", "--no-critical", "--no-parallel"],
        )

        assert result.exit_code == 0
        assert "└── all — Build and test everything" in result.stdout
        assert "★" not in result.stdout
        assert "Legend" not in result.stdout

    def test_lists_missing_dependencies(self) -> None:
        """Verify unresolved dependencies are listed after the tree."""
        result = runner.invoke(app, ["graph", fixture("complex.mk")])

        assert result.exit_code == 0
        assert "Missing dependencies:" in result.stdout
        assert "check → external-tool (external or file dependency)" in result.stdout

    def test_cycle_exits_with_error(self) -> None:
        """Verify a cyclic graph prints the cycle and exits 1."""
        result = runner.invoke(app, ["graph", fixture("cycle.mk")])

        assert result.exit_code == 1
        assert "Circular dependency detected" in result.stdout
        assert "Cycle: a → b → c → a" in result.stdout

    def test_target_and_depth(self) -> None:
        """Verify --target and --depth select a subgraph."""
        result = runner.invoke(
            app, ["graph", fixture("simple.mk"), "--target", "test", "--depth", "1"]
        )

        assert result.exit_code == 0
        assert result.stdout.startswith("└── test [3] ★ — Run the test suite\n")
        assert "build [2]" in result.stdout
        assert "deps" not in result.stdout
        assert "clean" not in result.stdout

    def test_depth_without_target_is_rejected(self) -> None:
        """Verify --depth on its own is a usage error."""
        result = runner.invoke(app, ["graph", fixture("simple.mk"), "--depth", "1"])

        assert result.exit_code == 2
        assert "requires --target" in result.output

    def test_unknown_target(self) -> None:
        """Verify an unknown --target exits 1."""
        result = runner.invoke(app, ["graph", fixture("simple.mk"), "--target", "nope"])

        assert result.exit_code == 1
        assert "Unknown target: nope" in result.output

    def test_json_output(self) -> None:
        """Verify JSON output includes analysis fields."""
        result = runner.invoke(app, ["graph", fixture("simple.mk"), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        nodes = {node["name"]: node for node in data["nodes"]}
        assert nodes["all"]["order"] == 4
        assert nodes["deps"]["is_critical"] is True
        assert data["roots"] == ["all", "clean"]
        assert data["has_cycle"] is False
        assert data["execution_levels"]["1"] == ["deps", "clean"]


# =============================================================================
# TestCheckCommand
# =============================================================================


class TestCheckCommand:
    """Tests for `lazymake check`."""

    def test_critical_target_fails(self) -> None:
        """Verify a critical target is reported and exits 1."""
        result = runner.invoke(app, ["check", fixture("dangerous.mk")])

        assert result.exit_code == 1
        assert "nuke-db: CRITICAL (requires confirmation)" in result.stdout
        assert "database-drop" in result.stdout
        assert "deploy-prod: WARNING" in result.stdout
        assert "docker-clean: INFO" in result.stdout
        assert "3 dangerous target(s): 1 critical, 1 warning, 1 info" in result.stdout

    def test_safe_makefile_passes(self) -> None:
        """Verify a Makefile without dangerous commands exits 0."""
        result = runner.invoke(app, ["check", fixture("simple.mk")])

        assert result.exit_code == 0
        assert "No dangerous commands found" in result.stdout

    def test_excluded_critical_target_passes(self, isolated_env: Path) -> None:
        """Verify excluding the critical target via --config clears the failure."""
        config = isolated_env / "safety.yaml"
        config.write_text("safety:\n  exclude_targets: [nuke-db]\n")

        result = runner.invoke(app, ["check", fixture("dangerous.mk"), "--config", str(config)])

        assert result.exit_code == 0
        assert "nuke-db" not in result.stdout

    def test_disabled_safety(self, isolated_env: Path) -> None:
        """Verify disabled checks report nothing and pass."""
        (isolated_env / ".lazymake.yaml").write_text("safety:\n  enabled: false\n")

        result = runner.invoke(app, ["check", fixture("dangerous.mk")])

        assert result.exit_code == 0
        assert "disabled" in result.stdout

    def test_json_output(self) -> None:
        """Verify JSON output is keyed by target name."""
        result = runner.invoke(app, ["check", fixture("dangerous.mk"), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert set(data) == {"deploy-prod", "nuke-db", "docker-clean"}
        assert data["nuke-db"]["requires_confirmation"] is True

    def test_invalid_config_exits_2(self, isolated_env: Path) -> None:
        """Verify configuration errors use exit status 2."""
        (isolated_env / ".lazymake.yaml").write_text("safety: [unclosed\n")

        result = runner.invoke(app, ["check", fixture("simple.mk")])

        assert result.exit_code == 2
        assert "CONFIG_INVALID" in result.output


# =============================================================================
# TestRulesCommand
# =============================================================================


class TestRulesCommand:
    """Tests for `lazymake rules`."""

    def test_lists_builtin_rules(self) -> None:
        """Verify every rule ID is printed."""
        result = runner.invoke(app, ["rules"])

        assert result.exit_code == 0
        for rule in BUILTIN_RULES:
            assert rule.id in result.stdout

    def test_json_output(self) -> None:
        """Verify JSON output contains the whole catalog."""
        result = runner.invoke(app, ["rules", "--json"])

        data = json.loads(result.stdout)
        assert len(data) == len(BUILTIN_RULES)
        assert data[0]["id"] == "rm-rf-root"
        assert data[0]["severity"] == "CRITICAL"


# =============================================================================
# TestInitCommand
# =============================================================================


class TestInitCommand:
    """Tests for `lazymake init`."""

    def test_creates_config_file(self, isolated_env: Path) -> None:
        """Verify the starter file is written."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (isolated_env / ".lazymake.yaml").read_text() == DEFAULT_CONFIG_TEMPLATE

    def test_refuses_to_overwrite(self, isolated_env: Path) -> None:
        """Verify an existing file is kept without --force."""
        existing = isolated_env / ".lazymake.yaml"
        existing.write_text("makefile: mine.mk\n")

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 2
        assert "already exists" in result.output
        assert existing.read_text() == "makefile: mine.mk\n"

    def test_force_overwrites(self, isolated_env: Path) -> None:
        """Verify --force replaces an existing file."""
        existing = isolated_env / ".lazymake.yaml"
        existing.write_text("makefile: mine.mk\n")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert existing.read_text() == DEFAULT_CONFIG_TEMPLATE

    def test_custom_output_path(self, isolated_env: Path) -> None:
        """Verify --output chooses where the file goes."""
        target = isolated_env / "conf" / "lazymake.yaml"
        target.parent.mkdir()

        result = runner.invoke(app, ["init", "--output", str(target)])

        assert result.exit_code == 0
        assert target.exists()


# =============================================================================
# TestVersionCommand
# =============================================================================


class TestVersionCommand:
    """Tests for `lazymake version`."""

    def test_version(self) -> None:
        """Verify the version line is printed."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert result.stdout.startswith("lazymake ")

    def test_verbose_version(self) -> None:
        """Verify --verbose lists dependencies."""
        result = runner.invoke(app, ["version", "--verbose"])

        assert result.exit_code == 0
        assert "Python version:" in result.stdout
        assert "structlog:" in result.stdout
