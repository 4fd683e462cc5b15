from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .models import AnalysisConfig, FILE_PLACEHOLDER, SQL_PLACEHOLDER, as_date
from .periods import last_completed_financial_year


@dataclass
class SourceLabel:
    text: str = FILE_PLACEHOLDER
    active: bool = False        # False renders in the inactive caption colour


class FormController:
    """
    Event handlers for the launcher form, free of Qt so they can be driven
    from tests. Pickers and the job launcher are injected:

      pick_file(initial_directory) -> Optional[str]
      pick_folder() -> Optional[str]
      launch(config_snapshot) -> None   (starts the background run)
    """

    def __init__(self, config: AnalysisConfig, ticker, pick_file, pick_folder, launch,
                 default_directory=None, today=date.today):
        self.config = config
        self.ticker = ticker
        self.pick_file = pick_file
        self.pick_folder = pick_folder
        self.launch = launch
        self.default_directory = default_directory or config.destination_dir
        self.today = today
        self.source_label = SourceLabel()

    def select_file(self):
        chosen = self.pick_file(self.default_directory)
        if chosen is None:
            self.source_label = SourceLabel(FILE_PLACEHOLDER, False)
            return None
        self.config.input_path = chosen
        self.source_label = SourceLabel(Path(chosen).name, True)
        return chosen

    def select_folder(self):
        chosen = self.pick_folder()
        if chosen:
            self.config.destination_dir = chosen
        return chosen

    def toggle_financial_year(self, checked):
        if not checked: return None
        start, end = last_completed_financial_year(as_date(self.today()))
        self.config.set_date_range(start, end)
        return start, end

    def toggle_volume_model(self, checked):
        self.config.produce_volume_model_output = bool(checked)

    def toggle_combine_commodities(self, checked):
        self.config.combine_intermodal_and_steel = bool(checked)

    def toggle_use_sql(self, checked):
        self.config.set_use_sql_source(checked)
        if checked:
            self.source_label = SourceLabel(SQL_PLACEHOLDER, False)
        else:
            self.source_label = SourceLabel(FILE_PLACEHOLDER, False)

    def set_from_date(self, value):
        self.config.from_date = as_date(value)

    def set_to_date(self, value):
        self.config.to_date = as_date(value)

    def process(self):
        snapshot = self.config.snapshot()
        self.ticker.start()
        self.launch(snapshot)
        return snapshot

    def finish(self):
        self.ticker.request_stop()
