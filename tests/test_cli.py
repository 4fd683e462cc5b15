from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from main import build_parser, config_from_args, run_headless


class RecordingEngine:
    def __init__(self):
        self.calls = []

    def process_wagon_movements(self, *args):
        self.calls.append(args)


def test_run_requires_a_source():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "--dest", "/out"])


def test_input_and_sql_are_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "--input", "w.csv", "--sql"])


def test_bad_date_is_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["run", "--sql", "--from", "01/07/2023"])


def test_config_from_args_for_sql():
    args = build_parser().parse_args(
        ["run", "--sql", "--dest", "/out", "--from", "2023-07-01", "--to", "2024-07-01", "--volume-model"]
    )
    cfg = config_from_args(args)

    assert cfg.use_sql_source is True
    assert cfg.input_path is None
    assert cfg.destination_dir == "/out"
    assert (cfg.from_date, cfg.to_date) == (date(2023, 7, 1), date(2024, 7, 1))
    assert cfg.produce_volume_model_output is True
    assert cfg.combine_intermodal_and_steel is False


def test_headless_run_exit_codes(tmp_path: Path, capsys):
    data = tmp_path / "w.csv"
    data.write_text("x", encoding="utf-8")
    engine = RecordingEngine()

    ok = build_parser().parse_args(["run", "--input", str(data), "--dest", str(tmp_path)])
    assert run_headless(ok, engine_factory=lambda: engine) == 0
    assert engine.calls[0][0] == str(data)
    assert "Program Complete" in capsys.readouterr().out

    missing = build_parser().parse_args(["run", "--input", str(tmp_path / "gone.csv")])
    assert run_headless(missing, engine_factory=lambda: engine) == 1
    assert len(engine.calls) == 1
