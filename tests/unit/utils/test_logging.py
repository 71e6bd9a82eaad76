"""Unit tests for logging utilities."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
import pytest

from twig.utils import create_cli_logger, create_null_logger
from twig.utils._logging import _create_logger, _log_level_from_string

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestLogLevelFromString:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("nonsense", logging.INFO),
        ],
    )
    def test_mapping(self, level: str, expected: int) -> None:
        assert _log_level_from_string(level) == expected

    def test_debug_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TWIG_DEBUG", "1")

        assert _log_level_from_string("error", respect_env=True) == logging.DEBUG

    def test_debug_env_ignored_unless_requested(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TWIG_DEBUG", "1")

        assert _log_level_from_string("error") == logging.ERROR


class TestCreateLogger:
    def test_creates_log_directory_if_missing(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/repo/.twig/logs/cli.log")
        assert not log_path.parent.exists()

        _ = _create_logger(log_path, log_level=logging.INFO)

        assert log_path.parent.exists()

    def test_default_format_is_json(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/logs/test.log")
        logger = _create_logger(log_path, log_level=logging.INFO)

        logger.info("commit_created", commit="abc")

        record = orjson.loads(log_path.read_text().splitlines()[0])
        assert record["event"] == "commit_created"
        assert record["commit"] == "abc"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_text_format(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/logs/test.log")
        logger = _create_logger(log_path, log_level=logging.INFO, log_format="text")

        logger.info("branch_created", branch="feature")

        content = log_path.read_text()
        assert "branch_created" in content
        assert "branch=feature" in content

    def test_filters_below_level(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/logs/test.log")
        logger = _create_logger(log_path, log_level=logging.WARNING)

        logger.info("quiet")
        logger.warning("merge_conflict")

        content = log_path.read_text()
        assert "quiet" not in content
        assert "merge_conflict" in content

    def test_appends_to_existing_file(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/logs/test.log")
        _ = fs.create_file(log_path, contents='{"event": "earlier"}\n')

        _create_logger(log_path, log_level=logging.INFO).info("later")

        assert len(log_path.read_text().splitlines()) == 2


class TestCreateCliLogger:
    def test_binds_command(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/logs/cli.log")
        logger = create_cli_logger(log_file=log_path, command="merge")

        logger.info("merge_completed")

        assert orjson.loads(log_path.read_text())["command"] == "merge"

    def test_accepts_string_path(self, fs: "FakeFilesystem") -> None:
        logger = create_cli_logger(log_file="/logs/cli.log")

        logger.info("event")

        assert Path("/logs/cli.log").exists()

    def test_without_file_writes_nothing(self, fs: "FakeFilesystem") -> None:
        logger = create_cli_logger(log_file=None)

        logger.info("event")

        assert not Path("/logs").exists()

    def test_debug_level(self, fs: "FakeFilesystem") -> None:
        log_path = Path("/logs/cli.log")
        logger = create_cli_logger(level="debug", log_file=log_path)

        logger.debug("command_invoked")

        assert "command_invoked" in log_path.read_text()


class TestCreateNullLogger:
    def test_discards_events(self) -> None:
        logger = create_null_logger()

        logger.error("anything", key="value")
        logger.bind(command="x").info("more")
