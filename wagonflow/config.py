import sys
import os
import subprocess
import json
import logging
import platform
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime

# ==============================================================================
#   SYSTEM UTILITIES
# ==============================================================================
class SystemUtils:
    IS_WIN = platform.system() == 'Windows'
    IS_MAC = platform.system() == 'Darwin'
    CURRENT_VERSION = "v2.4.0"

    @staticmethod
    def get_user_data_dir():
        override = (os.getenv("WAGONFLOW_HOME") or "").strip()
        if override:
            p = Path(override).expanduser()
            p.mkdir(parents=True, exist_ok=True)
            return p
        if SystemUtils.IS_MAC or SystemUtils.IS_WIN:
            p = Path.home() / "Documents" / "WagonFlow_Data"
            p.mkdir(parents=True, exist_ok=True)
            return p
        if getattr(sys, 'frozen', False): return Path(sys.executable).parent
        return Path(__file__).parent.parent

    @staticmethod
    def open_file(path):
        p = str(path)
        try:
            if not Path(p).exists(): return
            if SystemUtils.IS_WIN: os.startfile(p)
            elif SystemUtils.IS_MAC: subprocess.call(['open', p])
            else: subprocess.call(['xdg-open', p])
        except OSError as e: logger.warning(f"Error opening {p}: {e}")

# ==============================================================================
#   CONFIGURATION
# ==============================================================================
DEFAULT_DIRECTORY = r"S:\Corporate Strategy\Market Analysis & Forecasts\Volume\Wagon movement analysis"

class Config:
    DEFAULTS = {
        "default_directory": DEFAULT_DIRECTORY,
        "log_level": "INFO",
        "engine_entry_point": "",
        "engine_exe": "",
        "engine_timeout_seconds": 0,
        "open_destination_on_finish": False,
        "last_geometry": "",
    }

    def __init__(self, path=None):
        self.data = self.DEFAULTS.copy()
        self.path = Path(path) if path else SystemUtils.get_user_data_dir() / "config.json"
        self.load_error = None
        if self.path.exists():
            try:
                with open(self.path, 'r', encoding='utf-8') as f: self.data.update(json.load(f))
            except (OSError, ValueError) as e:
                # Corrupt or locked file: run on defaults, report once logging is up
                self.load_error = f"{self.path}: {e}"

    def get(self, key): return self.data.get(key, self.DEFAULTS.get(key))
    def set(self, key, val): self.data[key] = val; self.save()
    def reset(self): self.data = self.DEFAULTS.copy(); self.save()
    def save(self):
        try:
            with open(self.path, 'w', encoding='utf-8') as f: json.dump(self.data, f, indent=4)
        except OSError as e: logger.error(f"Config Save Error: {e}")

# Global Config Instance
CFG = Config()

# ==============================================================================
#   LOGGING
# ==============================================================================
USER_DIR = SystemUtils.get_user_data_dir()
LOG_PATH = USER_DIR / "app_debug.log"
JSON_LOG_PATH = USER_DIR / "app_events.jsonl"

logger = logging.getLogger("WagonFlow")
logger.setLevel(getattr(logging, str(CFG.get("log_level")).upper(), logging.INFO))
if not logger.handlers:
    c_handler = logging.StreamHandler()
    c_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(c_handler)

    try:
        f_handler = RotatingFileHandler(LOG_PATH, maxBytes=1024*1024, backupCount=5, encoding='utf-8')
        f_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
        logger.addHandler(f_handler)
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")

if CFG.load_error:
    logger.warning(f"Config unreadable, using defaults ({CFG.load_error})")

def set_log_level(level):
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

def log_app(msg, level="INFO", structured_data=None):
    if level == "ERROR": logger.error(msg)
    elif level == "WARN": logger.warning(msg)
    else: logger.info(msg)
    try:
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "message": msg,
            "os": platform.system(),
            "version": SystemUtils.CURRENT_VERSION
        }
        if structured_data: entry.update(structured_data)
        with open(JSON_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        logger.debug(f"Event log write failed: {e}")
