"""Integration tests for the twig commands, run through the CLI."""

from collections.abc import Callable
from pathlib import Path

import pytest

TwigCli = Callable[..., None]


def run_quietly(capsys: pytest.CaptureFixture[str], cli: TwigCli, *args: str) -> str:
    """Run a command and return what it printed, discarding earlier output."""
    _ = capsys.readouterr()
    cli(*args)
    return capsys.readouterr().out


def write(root: Path, relative: str, content: str) -> None:
    target = root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")


def commit_ids(log_output: str) -> list[str]:
    return [
        line.removeprefix("commit ")
        for line in log_output.splitlines()
        if line.startswith("commit ")
    ]


@pytest.fixture
def repo(twig_cli: TwigCli, workdir: Path) -> Path:
    """Initialize a repository in the working directory."""
    twig_cli("init")
    return workdir


class TestDiagnostics:
    def test_no_command(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli
    ) -> None:
        assert run_quietly(capsys, twig_cli) == "Please enter a command.\n"

    def test_unknown_command(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli
    ) -> None:
        output = run_quietly(capsys, twig_cli, "hello")

        assert output == "No command with that name exists.\n"

    def test_not_initialized(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, workdir: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "status")

        assert output == "Not in an initialized Twig directory.\n"
        assert not (workdir / ".twig").exists()

    @pytest.mark.parametrize(
        "args",
        [
            pytest.param(("add",), id="missing-operand"),
            pytest.param(("add", "a.txt", "b.txt"), id="extra-operand"),
            pytest.param(("status", "now"), id="unexpected-operand"),
            pytest.param(("checkout",), id="checkout-without-operands"),
        ],
    )
    def test_incorrect_operands(
        self,
        capsys: pytest.CaptureFixture[str],
        twig_cli: TwigCli,
        repo: Path,
        args: tuple[str, ...],
    ) -> None:
        assert run_quietly(capsys, twig_cli, *args) == "Incorrect operands.\n"

    @pytest.mark.parametrize(
        "args",
        [
            pytest.param((), id="no-command"),
            pytest.param(("hello",), id="unknown-command"),
            pytest.param(("add",), id="incorrect-operands"),
            pytest.param(("commit", "nothing staged"), id="precondition"),
        ],
    )
    def test_diagnostics_exit_successfully(
        self,
        twig_cli_with_exit_code: Callable[..., int],
        args: tuple[str, ...],
    ) -> None:
        assert twig_cli_with_exit_code("init") == 0
        assert twig_cli_with_exit_code(*args) == 0


class TestInit:
    def test_creates_repository(self, twig_cli: TwigCli, workdir: Path) -> None:
        twig_cli("init")

        assert (workdir / ".twig").is_dir()
        assert (workdir / ".twig" / "active-branch").read_text() == "master"

    def test_already_initialized(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "init")

        assert output == (
            "A Twig version-control system already exists in the current directory.\n"
        )

    def test_writes_log_file(self, repo: Path) -> None:
        log_file = repo / ".twig" / "logs" / "cli.log"

        assert "repository_initialized" in log_file.read_text()

    def test_initial_log(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "log")

        lines = output.splitlines()
        assert lines[0] == "==="
        assert lines[1].startswith("commit ")
        assert len(lines[1]) == len("commit ") + 40
        assert lines[2] == "Date: Thu Jan 01 00:00:00 1970 +0000"
        assert lines[3] == "initial commit"


class TestStagingCommands:
    def test_add_missing_file(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        assert run_quietly(capsys, twig_cli, "add", "nope.txt") == "File does not exist.\n"

    def test_commit_without_message(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")

        output = run_quietly(capsys, twig_cli, "commit")

        assert output == "Please enter a commit message.\n"

    def test_commit_nothing_staged(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "commit", "msg")

        assert output == "No changes added to the commit.\n"

    def test_rm_without_reason(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")

        assert run_quietly(capsys, twig_cli, "rm", "f") == "No reason to remove the file.\n"

    def test_status_report(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "tracked.txt", "t")
        twig_cli("add", "tracked.txt")
        twig_cli("commit", "base")
        twig_cli("branch", "other")
        write(repo, "staged.txt", "s")
        twig_cli("add", "staged.txt")
        write(repo, "tracked.txt", "changed")
        write(repo, "loose.txt", "l")

        output = run_quietly(capsys, twig_cli, "status")

        assert output == (
            "=== Branches ===\n"
            "*master\n"
            "other\n"
            "\n"
            "=== Staged Files ===\n"
            "staged.txt\n"
            "\n"
            "=== Removed Files ===\n"
            "\n"
            "=== Modifications Not Staged For Commit ===\n"
            "tracked.txt (modified)\n"
            "\n"
            "=== Untracked Files ===\n"
            "loose.txt\n"
        )

    def test_nested_paths(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "src/pkg/mod.txt", "m")
        twig_cli("add", "src/pkg/mod.txt")
        twig_cli("commit", "nested")

        output = run_quietly(capsys, twig_cli, "status")

        assert "src/pkg/mod.txt" not in output


class TestHistoryCommands:
    def test_find(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")
        log_ids = commit_ids(run_quietly(capsys, twig_cli, "log"))

        output = run_quietly(capsys, twig_cli, "find", "first")

        assert output == f"{log_ids[0]}\n"

    def test_find_nothing(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "find", "missing")

        assert output == "Found no commit with that message.\n"

    def test_global_log_lists_all_branches(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        twig_cli("branch", "other")
        twig_cli("checkout", "other")
        write(repo, "g", "G")
        twig_cli("add", "g")
        twig_cli("commit", "on other")
        twig_cli("checkout", "master")

        log_output = run_quietly(capsys, twig_cli, "log")
        global_output = run_quietly(capsys, twig_cli, "global-log")

        assert len(commit_ids(log_output)) == 1
        assert len(commit_ids(global_output)) == 2
        assert "on other" in global_output


class TestBranchCommands:
    def test_branch_exists(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "branch", "master")

        assert output == "A branch with that name already exists.\n"

    def test_rm_branch_missing(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "rm-branch", "nope")

        assert output == "A branch with that name does not exist.\n"

    def test_rm_current_branch(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "rm-branch", "master")

        assert output == "Cannot remove the current branch.\n"

    def test_checkout_missing_branch(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "checkout", "nope")

        assert output == "No such branch exists.\n"

    def test_checkout_current_branch(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "checkout", "master")

        assert output == "No need to checkout the current branch.\n"

    def test_checkout_file_from_head(self, twig_cli: TwigCli, repo: Path) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")
        write(repo, "f", "edited")

        twig_cli("checkout", "--", "f")

        assert (repo / "f").read_text() == "A"

    def test_checkout_file_not_in_commit(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "checkout", "--", "f")

        assert output == "File does not exist in that commit.\n"

    def test_checkout_unknown_commit(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "checkout", "0123456", "--", "f")

        assert output == "No commit with that id exists.\n"

    def test_untracked_file_in_the_way(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        twig_cli("branch", "other")
        twig_cli("checkout", "other")
        write(repo, "f", "on other")
        twig_cli("add", "f")
        twig_cli("commit", "other f")
        twig_cli("checkout", "master")
        write(repo, "f", "untracked")

        output = run_quietly(capsys, twig_cli, "checkout", "other")

        assert output == (
            "There is an untracked file in the way; "
            "delete it, or add and commit it first.\n"
        )
        assert (repo / "f").read_text() == "untracked"

    def test_reset(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")
        first = commit_ids(run_quietly(capsys, twig_cli, "log"))[0]
        write(repo, "f", "B")
        write(repo, "g", "G")
        twig_cli("add", "f")
        twig_cli("add", "g")
        twig_cli("commit", "second")

        twig_cli("reset", first[:8])

        assert (repo / "f").read_text() == "A"
        assert not (repo / "g").exists()
        assert commit_ids(run_quietly(capsys, twig_cli, "log"))[0] == first


class TestMergeCommand:
    def test_merge_with_itself(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        output = run_quietly(capsys, twig_cli, "merge", "master")

        assert output == "Cannot merge a branch with itself.\n"

    def test_merge_ancestor(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        twig_cli("branch", "old")
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "ahead")

        output = run_quietly(capsys, twig_cli, "merge", "old")

        assert output == "Given branch is an ancestor of the current branch.\n"

    def test_merge_uncommitted_changes(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        twig_cli("branch", "other")
        write(repo, "f", "A")
        twig_cli("add", "f")

        output = run_quietly(capsys, twig_cli, "merge", "other")

        assert output == "You have uncommitted changes.\n"


class TestScenarios:
    def test_commit_shows_in_log(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")

        output = run_quietly(capsys, twig_cli, "log")

        entries = output.split("===\n")[1:]
        assert len(entries) == 2
        assert entries[0].splitlines()[2] == "first"
        assert entries[1].splitlines()[2] == "initial commit"

    def test_merge_branch_change(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "base")
        twig_cli("branch", "b1")
        twig_cli("checkout", "b1")
        write(repo, "f", "B")
        twig_cli("add", "f")
        twig_cli("commit", "change f")
        twig_cli("checkout", "master")

        output = run_quietly(capsys, twig_cli, "merge", "b1")

        assert output == "Current branch fast-forwarded.\n"
        assert (repo / "f").read_text() == "B"
        status_output = run_quietly(capsys, twig_cli, "status")
        assert status_output.startswith("=== Branches ===\n*b1\nmaster\n")

    def test_merge_conflict(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A\n")
        twig_cli("add", "f")
        twig_cli("commit", "base")
        twig_cli("branch", "b1")
        write(repo, "f", "X\n")
        twig_cli("add", "f")
        twig_cli("commit", "master side")
        twig_cli("checkout", "b1")
        write(repo, "f", "Y\n")
        twig_cli("add", "f")
        twig_cli("commit", "b1 side")
        twig_cli("checkout", "master")

        output = run_quietly(capsys, twig_cli, "merge", "b1")

        assert output == "Encountered a merge conflict.\n"
        assert (repo / "f").read_text() == "<<<<<<< HEAD\nX\n=======\nY\n>>>>>>>\n"
        log_output = run_quietly(capsys, twig_cli, "log")
        first_entry = log_output.split("===\n")[1].splitlines()
        assert first_entry[1].startswith("Merge: ")
        assert first_entry[3] == "Merged b1 into master."

    def test_rm_tracked_file(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")

        twig_cli("rm", "f")

        assert not (repo / "f").exists()
        output = run_quietly(capsys, twig_cli, "status")
        removed = output.split("=== Removed Files ===\n")[1].split("\n\n")[0]
        assert removed == "f"

    def test_checkout_file_by_abbreviated_id(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")
        first = commit_ids(run_quietly(capsys, twig_cli, "log"))[0]
        write(repo, "f", "B")
        twig_cli("add", "f")
        twig_cli("commit", "second")

        twig_cli("checkout", first[:6], "--", "f")

        assert (repo / "f").read_text() == "A"


class TestGlobalOptions:
    def test_verbose_prints_details(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")

        output = run_quietly(capsys, twig_cli, "--verbose", "commit", "first")

        assert output.startswith("[")
        assert output.rstrip().endswith("] first")

    def test_quiet_suppresses_details(
        self, capsys: pytest.CaptureFixture[str], twig_cli: TwigCli, repo: Path
    ) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")

        output = run_quietly(capsys, twig_cli, "--verbose", "--quiet", "commit", "first")

        assert output == ""

    def test_verbose_enables_debug_logging(self, twig_cli: TwigCli, repo: Path) -> None:
        twig_cli("--verbose", "status")

        log_text = (repo / ".twig" / "logs" / "cli.log").read_text()
        assert "command_invoked" in log_text
        assert "config_loaded" in log_text

    def test_root_option(
        self, twig_cli: TwigCli, workdir: Path, tmp_path: Path
    ) -> None:
        other = tmp_path / "elsewhere"
        other.mkdir()

        twig_cli("--root", str(other), "init")

        assert (other / ".twig").is_dir()
        assert not (workdir / ".twig").exists()

    def test_commands_are_logged(self, twig_cli: TwigCli, repo: Path) -> None:
        write(repo, "f", "A")
        twig_cli("add", "f")
        twig_cli("commit", "first")

        log_text = (repo / ".twig" / "logs" / "cli.log").read_text()
        assert "file_staged" in log_text
        assert "commit_created" in log_text


class TestFatalErrors:
    def test_corrupt_commit_exits_with_error(
        self,
        capsys: pytest.CaptureFixture[str],
        twig_cli_with_exit_code: Callable[..., int],
        workdir: Path,
    ) -> None:
        assert twig_cli_with_exit_code("init") == 0
        commits_dir = workdir / ".twig" / "objects" / "commits"
        for record in commits_dir.iterdir():
            record.write_text('{"unexpected": true}')
        _ = capsys.readouterr()

        code = twig_cli_with_exit_code("log")

        assert code == 1
        assert "Error:" in capsys.readouterr().out
