from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from wagonflow.core.form import FormController
from wagonflow.core.models import AnalysisConfig, FILE_PLACEHOLDER, SQL_PLACEHOLDER
from wagonflow.core.ticker import ElapsedTicker


# -----------------------------
# Test doubles
# -----------------------------
class FakePicker:
    def __init__(self, answers: List[Optional[str]]):
        self._answers = list(answers)
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        return self._answers.pop(0)


def make_controller(file_answers=(None,), folder_answers=(None,), today=date(2024, 3, 15)):
    launched = []
    controller = FormController(
        config=AnalysisConfig(destination_dir="/default/out"),
        ticker=ElapsedTicker(),
        pick_file=FakePicker(list(file_answers)),
        pick_folder=FakePicker(list(folder_answers)),
        launch=launched.append,
        default_directory="/default/out",
        today=lambda: today,
    )
    return controller, launched


# -----------------------------
# Tests
# -----------------------------
def test_initial_label_is_placeholder():
    controller, _ = make_controller()
    assert controller.source_label.text == FILE_PLACEHOLDER
    assert controller.source_label.active is False


def test_select_file_sets_path_and_shows_file_name(tmp_path: Path):
    data = tmp_path / "wagons_2024.csv"
    controller, _ = make_controller(file_answers=[str(data)])

    assert controller.select_file() == str(data)
    assert controller.config.input_path == str(data)
    assert controller.source_label.text == "wagons_2024.csv"
    assert controller.source_label.active is True
    assert controller.pick_file.calls == [("/default/out",)]


def test_cancelled_file_pick_resets_label_but_keeps_previous_path(tmp_path: Path):
    data = tmp_path / "wagons.csv"
    controller, _ = make_controller(file_answers=[str(data), None])
    controller.select_file()

    assert controller.select_file() is None
    assert controller.source_label.text == FILE_PLACEHOLDER
    assert controller.source_label.active is False
    assert controller.config.input_path == str(data)


def test_select_folder_sets_destination():
    controller, _ = make_controller(folder_answers=["/reports/fy24"])
    controller.select_folder()
    assert controller.config.destination_dir == "/reports/fy24"


def test_cancelled_folder_pick_keeps_destination():
    controller, _ = make_controller(folder_answers=[None])
    controller.select_folder()
    assert controller.config.destination_dir == "/default/out"


def test_use_sql_clears_input_path_and_is_not_restored(tmp_path: Path):
    controller, _ = make_controller(file_answers=[str(tmp_path / "w.csv")])
    controller.select_file()

    controller.toggle_use_sql(True)
    assert controller.config.use_sql_source is True
    assert controller.config.input_path is None
    assert controller.source_label.text == SQL_PLACEHOLDER

    controller.toggle_use_sql(False)
    assert controller.config.use_sql_source is False
    assert controller.config.input_path is None
    assert controller.source_label.text == FILE_PLACEHOLDER


def test_financial_year_before_july():
    controller, _ = make_controller(today=date(2024, 3, 15))
    controller.toggle_financial_year(True)
    assert controller.config.from_date == date(2022, 7, 1)
    assert controller.config.to_date == date(2023, 7, 1)


def test_financial_year_after_june_accepts_datetime_today():
    controller, _ = make_controller(today=datetime(2024, 9, 10, 14, 30))
    controller.toggle_financial_year(True)
    assert controller.config.from_date == date(2023, 7, 1)
    assert controller.config.to_date == date(2024, 7, 1)


def test_unticking_financial_year_leaves_dates_alone():
    controller, _ = make_controller()
    controller.set_from_date(date(2020, 1, 1))
    controller.set_to_date(datetime(2020, 12, 31, 23, 59))
    controller.toggle_financial_year(False)
    assert controller.config.from_date == date(2020, 1, 1)
    assert controller.config.to_date == date(2020, 12, 31)


def test_option_toggles():
    controller, _ = make_controller()
    controller.toggle_volume_model(True)
    controller.toggle_combine_commodities(True)
    assert controller.config.produce_volume_model_output is True
    assert controller.config.combine_intermodal_and_steel is True

    controller.toggle_volume_model(False)
    controller.toggle_combine_commodities(False)
    assert controller.config.produce_volume_model_output is False
    assert controller.config.combine_intermodal_and_steel is False


def test_process_starts_ticker_and_launches_independent_snapshot():
    controller, launched = make_controller()
    controller.toggle_use_sql(True)

    snapshot = controller.process()

    assert controller.ticker.running
    assert launched == [snapshot]
    assert snapshot is not controller.config

    # Later edits do not leak into the in-flight run
    controller.toggle_volume_model(True)
    assert snapshot.produce_volume_model_output is False


def test_defaults_cover_open_ended_range():
    config = AnalysisConfig()
    assert config.from_date == date.min
    assert config.to_date == date.max
    assert config.input_path is None
    assert config.use_sql_source is False
