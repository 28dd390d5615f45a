from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from filament_inventory.cli import app
from filament_inventory.logging_config import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def _reset_package_logger(plain_console) -> Iterator[None]:
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _run(runner: CliRunner, data_dir: Path, *answers: str):
    script = "\n".join(answers) + "\n"
    result = runner.invoke(app, ["--data-dir", str(data_dir)], input=script)
    assert result.exit_code == 0, result.output
    return result


def _write_inventory(data_dir: Path, content: str) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / "Inventory.txt"
    path.write_text(content, encoding="utf-8")
    return path


def test_exit_creates_seed_and_warning_files(runner: CliRunner, tmp_path: Path) -> None:
    result = _run(runner, tmp_path, "f")

    assert "Low inventory notifications" in result.output
    assert "Thank you for using Filament Manager!" in result.output
    assert (tmp_path / "Inventory.txt").read_text(encoding="utf-8") == "PLA,WHITE,1000,\n"
    assert (tmp_path / "Sentinel.txt").read_text(encoding="utf-8") == "250"


def test_menu_accepts_uppercase_option(runner: CliRunner, tmp_path: Path) -> None:
    result = _run(runner, tmp_path, "F")

    assert "Thank you for using Filament Manager!" in result.output


def test_check_inventory_lists_records(runner: CliRunner, tmp_path: Path) -> None:
    _write_inventory(tmp_path, "PLA,WHITE,1000,\nPETG,BLACK,500,\n")

    result = _run(runner, tmp_path, "a", "", "f")

    assert "Current Filament Inventory" in result.output
    assert "PETG" in result.output
    assert "BLACK" in result.output


def test_add_new_filament(runner: CliRunner, tmp_path: Path) -> None:
    result = _run(runner, tmp_path, "b", "y", "petg", "black", "500", "y", "n", "f")

    assert "Filament added." in result.output
    assert (tmp_path / "Inventory.txt").read_text(encoding="utf-8") == (
        "PLA,WHITE,1000,\nPETG,BLACK,500,\n"
    )


def test_add_reprompts_invalid_input(runner: CliRunner, tmp_path: Path) -> None:
    result = _run(
        runner,
        tmp_path,
        "b", "y", "", "pla,plus", "pla", "red", "-5", "heavy", "100", "y", "n", "f",
    )

    assert "Field was left blank." in result.output
    assert "Commas are not allowed." in result.output
    assert "Please enter a non-negative number of grams." in result.output
    assert (tmp_path / "Inventory.txt").read_text(encoding="utf-8") == (
        "PLA,WHITE,1000,\nPLA,RED,100,\n"
    )


def test_add_declined_confirmation_stores_nothing(runner: CliRunner, tmp_path: Path) -> None:
    result = _run(runner, tmp_path, "b", "y", "abs", "red", "10", "n", "n", "f")

    assert "Information not stored." in result.output
    assert (tmp_path / "Inventory.txt").read_text(encoding="utf-8") == "PLA,WHITE,1000,\n"


def test_add_declined_returns_to_menu(runner: CliRunner, tmp_path: Path) -> None:
    result = _run(runner, tmp_path, "b", "n", "", "f")

    assert "Returning to the previous menu." in result.output


def test_modify_subtracts_grams(runner: CliRunner, tmp_path: Path) -> None:
    path = _write_inventory(tmp_path, "PLA,WHITE,1000,\nPETG,BLACK,500,\n")

    result = _run(runner, tmp_path, "c", "y", "petg", "black", "y", "s", "200", "n", "f")

    assert "Data successfully modified." in result.output
    assert path.read_text(encoding="utf-8") == "PLA,WHITE,1000,\nPETG,BLACK,300,\n"


def test_modify_adds_grams(runner: CliRunner, tmp_path: Path) -> None:
    path = _write_inventory(tmp_path, "PLA,WHITE,1000,\n")

    _run(runner, tmp_path, "c", "y", "pla", "white", "y", "a", "250", "n", "f")

    assert path.read_text(encoding="utf-8") == "PLA,WHITE,1250,\n"


def test_modify_reports_missing_record(runner: CliRunner, tmp_path: Path) -> None:
    path = _write_inventory(tmp_path, "PLA,WHITE,1000,\n")

    result = _run(runner, tmp_path, "c", "y", "abs", "red", "y", "a", "1", "n", "f")

    assert "Data to modify not found." in result.output
    assert path.read_text(encoding="utf-8") == "PLA,WHITE,1000,\n"


def test_remove_line(runner: CliRunner, tmp_path: Path) -> None:
    path = _write_inventory(tmp_path, "PLA,WHITE,1000,\nPETG,BLACK,300,\n")

    result = _run(runner, tmp_path, "d", "y", "pla", "white", "y", "n", "f")

    assert "Data successfully removed." in result.output
    assert path.read_text(encoding="utf-8") == "PETG,BLACK,300,\n"


def test_remove_missing_line_then_decline(runner: CliRunner, tmp_path: Path) -> None:
    path = _write_inventory(tmp_path, "PLA,WHITE,1000,\n")

    result = _run(
        runner,
        tmp_path,
        "d", "y", "abs", "red", "y", "y", "pla", "white", "n", "n", "f",
    )

    assert "Data to remove not found." in result.output
    assert "Data not removed." in result.output
    assert path.read_text(encoding="utf-8") == "PLA,WHITE,1000,\n"


def test_set_warning_level(runner: CliRunner, tmp_path: Path) -> None:
    _write_inventory(tmp_path, "PLA,WHITE,1000,\nPETG,BLACK,300,\n")

    result = _run(runner, tmp_path, "e", "400", "", "f")

    assert "The warning level has been changed to 400 grams." in result.output
    assert (tmp_path / "Sentinel.txt").read_text(encoding="utf-8") == "400"
    assert "At or below 400 g" in result.output


def test_malformed_inventory_is_reported(runner: CliRunner, tmp_path: Path) -> None:
    path = _write_inventory(tmp_path, "garbage\n")

    result = _run(runner, tmp_path, "a", "", "f")

    assert "Error:" in result.output
    assert "Malformed record" in result.output
    assert path.read_text(encoding="utf-8") == "garbage\n"


def test_undecodable_inventory_does_not_crash_menu(runner: CliRunner, tmp_path: Path) -> None:
    (tmp_path / "Inventory.txt").write_bytes(b"PLA,WH\xffITE,1000,\n")
    (tmp_path / "Sentinel.txt").write_bytes(b"\xff250")

    result = _run(runner, tmp_path, "a", "", "f")

    assert "Malformed record" in result.output
    assert "Thank you for using Filament Manager!" in result.output
