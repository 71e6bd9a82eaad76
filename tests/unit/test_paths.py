from pathlib import Path
from typing import TYPE_CHECKING

from twig.utils import (
    TWIG_DIR_NAME,
    get_twig_cli_log_file,
    get_twig_config_file,
    get_twig_dir,
    get_twig_log_dir,
    is_initialized,
)

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestLayout:
    def test_twig_dir(self) -> None:
        assert get_twig_dir(Path("/work")) == Path("/work") / TWIG_DIR_NAME

    def test_log_file(self) -> None:
        assert get_twig_cli_log_file(Path("/work")) == Path("/work/.twig/logs/cli.log")
        assert get_twig_log_dir(Path("/work")) == Path("/work/.twig/logs")

    def test_config_file(self) -> None:
        assert get_twig_config_file(Path("/work")) == Path("/work/.twig/config.toml")


class TestIsInitialized:
    def test_missing_directory(self, fs: "FakeFilesystem") -> None:
        fs.create_dir("/work")

        assert not is_initialized(Path("/work"))

    def test_existing_directory(self, fs: "FakeFilesystem") -> None:
        fs.create_dir("/work/.twig")

        assert is_initialized(Path("/work"))

    def test_file_named_like_directory(self, fs: "FakeFilesystem") -> None:
        fs.create_file("/work/.twig")

        assert not is_initialized(Path("/work"))
