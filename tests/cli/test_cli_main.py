# Copyright 2026 cidl2rs Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the cidl2rs CLI entry point."""

import json
import sys
from pathlib import Path

import pytest

from cidl2rs.cli.main import main
from cidl2rs.codegen.generate import GENERATED_MARKER

# ###############
# Helpers
# ###############


def _write_description(tmp_path: Path, method_attributes: list[dict] | None = None) -> Path:
    library = {
        "name": "MyLib",
        "uuid": "00000000-0000-0000-0000-000000000001",
        "interfaces": [
            {
                "name": "ICalc",
                "uuid": "00000000-0000-0000-0000-000000000002",
                "methods": [
                    {
                        "name": "Value",
                        "attributes": method_attributes or [],
                        "arguments": [
                            {
                                "name": "Value",
                                "data_type": {"category": "CapeReal"},
                                "attributes": [{"name": "out"}, {"name": "retval"}],
                            }
                        ],
                    }
                ],
            }
        ],
    }
    path = tmp_path / "mylib.json"
    path.write_text(json.dumps({"version": "1", "libraries": [library]}), encoding="utf-8")
    return path


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["cidl2rs", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


# ###############
# Normal Cases
# ###############


def test_generate_to_stdout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description)) == 0
    out = capsys.readouterr().out
    assert out.startswith(GENERATED_MARKER)
    assert "fn value(&mut self) -> Result<CapeReal, COBIAError>;" in out


def test_generate_to_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path)
    output = tmp_path / "src" / "mylib.rs"
    assert _run(monkeypatch, str(description), "-o", str(output)) == 0
    assert output.read_text(encoding="utf-8").startswith(GENERATED_MARKER)
    assert "Generated bindings for library 'MyLib'" in capsys.readouterr().out


def test_library_reference(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description), "MyLib") == 0
    assert "pub struct Calc {" in capsys.readouterr().out


def test_options_are_applied(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path)
    code = _run(monkeypatch, str(description), "-c", "crate", "-n", "ffi", "-s", "ML", "-m", "mylib")
    assert code == 0
    out = capsys.readouterr().out
    assert "use crate::*;" in out
    assert "pub(crate) interface: *mut ffi::ML_ICalc," in out


def test_config_file_in_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".cidl2rs.yaml").write_text("cobia-module: crate\nnative-module: ffi\n", encoding="utf-8")
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description)) == 0
    out = capsys.readouterr().out
    assert "use crate::*;" in out
    assert "*mut ffi::MyLib_ICalc" in out


def test_command_line_overrides_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "gen.yaml"
    config.write_text("cobia-module: crate\n", encoding="utf-8")
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description), "--config", str(config), "-c", "cobia") == 0
    out = capsys.readouterr().out
    assert "use cobia::*;" in out
    assert "use crate::*;" not in out


# ###############
# Error Cases
# ###############


def test_no_inputs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch) == 1
    err = capsys.readouterr().err
    assert "usage: cidl2rs" in err
    assert "Error: " in err


def test_repeated_option(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description), "-o", "a.rs", "-o", "b.rs") == 1
    assert "multiple specifications of output file name" in capsys.readouterr().err


def test_option_without_value(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description), "-c") == 1


def test_no_libraries_found(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    """Inputs that are neither description files nor known libraries fail the run."""
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "missing.json") == 1
    assert "Error: No libraries found" in capsys.readouterr().err


def test_invalid_description(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    assert _run(monkeypatch, str(path)) == 1
    assert "Invalid CIDL description" in capsys.readouterr().err


def test_generation_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    """A generation failure reports the location and writes no output."""
    monkeypatch.chdir(tmp_path)
    description = _write_description(tmp_path, [{"name": "property_gett"}])
    output = tmp_path / "out.rs"
    assert _run(monkeypatch, str(description), "-o", str(output)) == 1
    assert "Error: method Value of interface ICalc: invalid attribute 'property_gett'" in capsys.readouterr().err
    assert not output.exists()


def test_invalid_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".cidl2rs.yaml").write_text("unknown: value\n", encoding="utf-8")
    description = _write_description(tmp_path)
    assert _run(monkeypatch, str(description)) == 1
    assert "unknown key 'unknown'" in capsys.readouterr().err
