import os
import shutil
import time
import traceback
from pathlib import Path
from datetime import datetime

# Local Package Imports
from .config import CFG, SystemUtils, log_app, LOG_PATH, JSON_LOG_PATH
from .core.events import AppEvent
from .core.errors import InputSelectionError
from .core.models import AnalysisConfig, RunResult, DEFAULT_DESTINATION_SENTINEL, as_date
from .processing import resolve_engine

FINISHED_TITLE = "Finished Execution"
FINISHED_MSG = "Program Complete"

# ==============================================================================
#   WORKER CLASS
# ==============================================================================
class Worker:
    def __init__(self, callback, engine_factory=resolve_engine, default_directory=None):
        self.callback = callback
        self.engine_factory = engine_factory
        self.default_directory = default_directory

    def emit(self, event: AppEvent):
        """Bridge to the observer (UI/CLI)"""
        if self.callback:
            self.callback(event)

    def log(self, m, level="INFO", **data):
        self.emit(AppEvent.log(m, level))
        log_app(m, level, structured_data=data or None)

    def resolve_destination(self, destination):
        d = (destination or "").strip()
        if not d or d == DEFAULT_DESTINATION_SENTINEL:
            return self.default_directory or CFG.get("default_directory")
        return d

    @staticmethod
    def select_source(config: AnalysisConfig):
        if config.input_path and Path(config.input_path).is_file(): return "file"
        if config.use_sql_source: return "sql"
        return "none"

    def run_analysis(self, config: AnalysisConfig) -> RunResult:
        """Runs one analysis on the calling thread. Emits DONE, then the completion notice."""
        destination = self.resolve_destination(config.destination_dir)
        from_date, to_date = as_date(config.from_date), as_date(config.to_date)
        source = self.select_source(config)
        start_time = time.time()
        status, error = "ok", ""

        try:
            if source == "none":
                raise InputSelectionError("Select an existing wagon data file or tick 'Use SQL' before processing.")

            self.log(f"Run Start: source={source} dest={destination} range={from_date}..{to_date}",
                     source=source, destination=destination,
                     from_date=from_date, to_date=to_date,
                     volume_model=config.produce_volume_model_output,
                     combine_intermodal_and_steel=config.combine_intermodal_and_steel)
            self.emit(AppEvent.status("RUNNING", "Processing wagon movements...", "blue"))

            engine = self.engine_factory()
            if source == "file":
                engine.process_wagon_movements(
                    config.input_path, destination, from_date, to_date,
                    config.produce_volume_model_output, config.combine_intermodal_and_steel, False)
            else:
                engine.process_wagon_movements(
                    "", destination, from_date, to_date,
                    config.produce_volume_model_output, config.combine_intermodal_and_steel, True)

        except InputSelectionError as e:
            status, error = "skipped", str(e)
            self.log(f"Run Skipped: {e}", "WARN")
            self.emit(AppEvent.status("IDLE", "Nothing to process.", "orange"))
            notice = AppEvent.notify("No input selected", error, "WARN")
        except Exception as e:
            status, error = "failed", str(e)
            self.log(f"Run Failed: {e}", "ERROR", trace=traceback.format_exc())
            self.emit(AppEvent.status("FAILED", "Run failed.", "red"))
            notice = AppEvent.notify("Run Failed", error, "ERROR")
        else:
            self.log(f"Run Complete in {int(time.time() - start_time)}s")
            self.emit(AppEvent.status("DONE", "Completed", "green"))
            open_path = destination if CFG.get("open_destination_on_finish") else None
            notice = AppEvent.notify(FINISHED_TITLE, FINISHED_MSG, "INFO", open_path)

        result = RunResult(
            status=status,
            source=source,
            destination_dir=destination,
            from_date=from_date,
            to_date=to_date,
            duration_seconds=int(time.time() - start_time),
            error=error,
        )
        # Ticker reset first, then the modal notice
        self.emit(AppEvent.done(result))
        self.emit(notice)
        return result

    def run_debug_export(self):
        try:
            ts = datetime.now().strftime('%Y%m%d_%H%M%S')
            base_dir = SystemUtils.get_user_data_dir()

            try:
                test_file = base_dir / "write_test.tmp"
                test_file.touch()
                test_file.unlink()
            except PermissionError:
                base_dir = Path.home() / "Downloads" if SystemUtils.IS_MAC else Path(os.getenv('TEMP', '/tmp'))

            dest_zip = base_dir / f"Debug_Bundle_{ts}.zip"
            temp_dir = base_dir / f"temp_debug_{ts}"
            temp_dir.mkdir(parents=True, exist_ok=True)

            def safe_copy(src, dst_name):
                if not src or not Path(src).exists(): return
                try:
                    shutil.copy2(src, temp_dir / dst_name)
                except OSError as e:
                    (temp_dir / f"{dst_name}_ERROR.txt").write_text(str(e), encoding="utf-8")

            safe_copy(LOG_PATH, "app_debug.log")
            safe_copy(JSON_LOG_PATH, "app_events.jsonl")
            safe_copy(CFG.path, "config.json")

            shutil.make_archive(str(dest_zip.with_suffix("")), 'zip', temp_dir)
            shutil.rmtree(temp_dir, ignore_errors=True)

            self.emit(AppEvent.notify("Debug Export", f"Saved to {dest_zip.name}", "INFO", str(base_dir)))
            return dest_zip
        except OSError as e:
            self.log(f"Debug export failed: {e}", "ERROR")
            self.emit(AppEvent.notify("Debug Export", f"Export failed: {e}", "ERROR"))
            return None
