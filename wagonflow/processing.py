import importlib
import subprocess
from pathlib import Path

from .config import CFG, SystemUtils, logger
from .core.errors import EngineError, EngineNotConfigured

# ==============================================================================
#   ENGINE ADAPTERS
#   Contract: process_wagon_movements(input_path, destination_dir, from_date,
#   to_date, produce_volume_model_output, combine_intermodal_and_steel,
#   use_sql_source) -> None, raising on failure.
# ==============================================================================
CREATE_NO_WINDOW = 0x08000000

def build_engine_args(input_path, destination_dir, from_date, to_date,
                      volume_model, combine_intermodal_and_steel, use_sql):
    args = ["--destination", str(destination_dir),
            "--from", from_date.isoformat(), "--to", to_date.isoformat()]
    if use_sql: args.append("--sql")
    else: args += ["--input", str(input_path)]
    if volume_model: args.append("--volume-model")
    if combine_intermodal_and_steel: args.append("--combine-intermodal-steel")
    return args

class ExecutableEngine:
    """Runs the analysis as an external executable."""
    def __init__(self, exe_path, timeout_seconds=None):
        self.exe_path = Path(exe_path)
        self.timeout_seconds = timeout_seconds or None

    def process_wagon_movements(self, input_path, destination_dir, from_date, to_date,
                                produce_volume_model_output, combine_intermodal_and_steel,
                                use_sql_source):
        if not self.exe_path.exists():
            raise EngineError(f"Engine executable not found: {self.exe_path}")
        cmd = [str(self.exe_path)] + build_engine_args(
            input_path, destination_dir, from_date, to_date,
            produce_volume_model_output, combine_intermodal_and_steel, use_sql_source)
        logger.debug(f"Engine command: {cmd}")

        kwargs = {}
        if SystemUtils.IS_WIN: kwargs["creationflags"] = CREATE_NO_WINDOW
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=str(self.exe_path.parent),
                timeout=self.timeout_seconds,
                **kwargs,
            )
        except subprocess.TimeoutExpired as e:
            raise EngineError(f"Engine timed out after {self.timeout_seconds}s.") from e
        except OSError as e:
            raise EngineError(f"Failed to execute engine: {e}") from e

        if proc.returncode != 0:
            tail = "\n".join((proc.stderr or "").splitlines()[-20:])
            raise EngineError(f"Engine exited with code {proc.returncode}.\n{tail}".strip())
        return proc

class EntryPointEngine:
    """Calls an in-process function given as 'package.module:function'."""
    def __init__(self, entry_point):
        module_name, sep, attr = (entry_point or "").partition(":")
        if not sep or not module_name.strip() or not attr.strip():
            raise EngineNotConfigured(f"Invalid engine entry point '{entry_point}' (expected 'module:function').")
        self.module_name = module_name.strip()
        self.attr = attr.strip()
        self._func = None

    def _load(self):
        if self._func is None:
            try:
                module = importlib.import_module(self.module_name)
                self._func = getattr(module, self.attr)
            except (ImportError, AttributeError) as e:
                raise EngineError(f"Cannot load engine '{self.module_name}:{self.attr}': {e}") from e
        return self._func

    def process_wagon_movements(self, input_path, destination_dir, from_date, to_date,
                                produce_volume_model_output, combine_intermodal_and_steel,
                                use_sql_source):
        func = self._load()
        return func(input_path, destination_dir, from_date, to_date,
                    produce_volume_model_output, combine_intermodal_and_steel, use_sql_source)

def resolve_engine(cfg=None):
    cfg = cfg or CFG
    entry = (cfg.get("engine_entry_point") or "").strip()
    if entry: return EntryPointEngine(entry)
    exe = (cfg.get("engine_exe") or "").strip()
    if exe:
        timeout = int(cfg.get("engine_timeout_seconds") or 0)
        return ExecutableEngine(Path(exe).expanduser(), timeout_seconds=timeout)
    raise EngineNotConfigured("No analysis engine configured. Set one under Preferences.")
