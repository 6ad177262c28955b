# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from shovel_lib.archive import Archiver
from shovel_lib.core.config import CFG
from shovel_lib.core.error import ShovelError
from shovel_lib.extract.cli import _extract_archive, _make_archiver, extract

TIMESTAMP = 1518044860
DEPLOY = "deploy_2018.02.07.230740"


@pytest.fixture
def archive(tmp_path):
    source = tmp_path / "app"
    (source / "config").mkdir(parents=True)
    (source / "config" / "app.ini").write_text("[app]\nname = shovel\n")
    (source / "index.php").write_text("<?php echo 'hi';")

    archiver = Archiver(TIMESTAMP)
    return archiver.createArchive(source, tmp_path).path


def test_make_archiver_with_timestamp(archive):
    assert _make_archiver(archive, 42, False).timestamp == 42


def test_make_archiver_match_archive(archive):
    assert _make_archiver(archive, None, True).timestamp == TIMESTAMP


def test_make_archiver_match_archive_and_timestamp_conflict(archive):
    with pytest.raises(ShovelError, match="mutually exclusive"):
        _make_archiver(archive, 42, True)


def test_make_archiver_match_archive_without_timestamp(tmp_path):
    with pytest.raises(ShovelError, match="Could not find a timestamp"):
        _make_archiver(tmp_path / "release.zip", None, True)


@patch("shovel_lib.extract.cli.logger")
def test_extract_archive_logs_result(mock_logger, archive, tmp_path):
    _extract_archive(Archiver(TIMESTAMP), archive, tmp_path / "out", False, None)

    deploy = tmp_path / "out" / DEPLOY
    assert (deploy / "config" / "app.ini").read_text() == "[app]\nname = shovel\n"
    assert (deploy / "index.php").is_file()
    message = mock_logger.info.call_args[0][0]
    assert message.startswith(f"Extracted 2 files into '{deploy.resolve()}'")


@patch("shovel_lib.extract.cli.logger")
@patch("shovel_lib.extract.cli.yes_or_no_prompt", return_value=False)
def test_extract_archive_aborts_on_negative_prompt(
    mock_prompt, mock_logger, archive, tmp_path
):
    (tmp_path / "out" / DEPLOY).mkdir(parents=True)

    _extract_archive(Archiver(TIMESTAMP), archive, tmp_path / "out", False, None)

    mock_prompt.assert_called_once()
    mock_logger.info.assert_called_once_with("Operation aborted.")
    assert list((tmp_path / "out" / DEPLOY).iterdir()) == []


@patch("shovel_lib.extract.cli.yes_or_no_prompt", return_value=True)
def test_extract_archive_positive_prompt_overwrites(mock_prompt, archive, tmp_path):
    deploy = tmp_path / "out" / DEPLOY
    deploy.mkdir(parents=True)
    (deploy / "index.php").write_text("stale")

    _extract_archive(Archiver(TIMESTAMP), archive, tmp_path / "out", False, None)

    mock_prompt.assert_called_once()
    assert (deploy / "index.php").read_text() == "<?php echo 'hi';"


def test_extract_archive_writes_report(archive, tmp_path):
    report = tmp_path / "report.yaml"

    _extract_archive(Archiver(TIMESTAMP), archive, tmp_path / "out", True, report)

    data = yaml.safe_load(report.read_text())
    assert data["operation"] == "extract"
    assert data["files"] == 2
    assert data["path"] == str((tmp_path / "out" / DEPLOY).resolve())


def test_extract_command_match_archive(archive, tmp_path):
    runner = CliRunner()

    with patch("shovel_lib.extract.cli.logger"):
        result = runner.invoke(
            extract, [str(archive), "-d", str(tmp_path / "out"), "--match-archive"]
        )

    assert result.exit_code == 0
    assert (tmp_path / "out" / DEPLOY / "index.php").is_file()


def test_extract_command_timestamp(archive, tmp_path):
    runner = CliRunner()

    with patch("shovel_lib.extract.cli.logger"):
        result = runner.invoke(
            extract, [str(archive), "-d", str(tmp_path / "out"), "-t", "0"]
        )

    assert result.exit_code == 0
    assert (tmp_path / "out" / "deploy_1970.01.01.000000" / "index.php").is_file()


def test_extract_command_missing_archive_exits(tmp_path):
    runner = CliRunner()

    with patch("shovel_lib.extract.cli.logger") as mock_logger:
        result = runner.invoke(
            extract, [str(tmp_path / "missing.zip"), "-d", str(tmp_path)]
        )

    assert result.exit_code == CFG.exit_codes.default
    mock_logger.error.assert_called_once()


def test_extract_command_corrupt_archive_exits(tmp_path):
    broken = tmp_path / "source_2018.02.07.230740.zip"
    broken.write_text("garbage")
    runner = CliRunner()

    with patch("shovel_lib.extract.cli.logger") as mock_logger:
        result = runner.invoke(extract, [str(broken), "-d", str(tmp_path), "-m"])

    assert result.exit_code == CFG.exit_codes.default
    assert "not a valid zip archive" in str(mock_logger.error.call_args[0][0])


def test_extract_command_unexpected_error_exits_99(archive, tmp_path):
    runner = CliRunner()

    with (
        patch(
            "shovel_lib.extract.cli._extract_archive",
            side_effect=RuntimeError("boom"),
        ),
        patch("shovel_lib.extract.cli.logger") as mock_logger,
    ):
        result = runner.invoke(extract, [str(archive), "-d", str(tmp_path)])

    assert result.exit_code == CFG.exit_codes.unexpected_error
    mock_logger.critical.assert_called_once()
