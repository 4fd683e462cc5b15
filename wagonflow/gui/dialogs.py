from pathlib import Path
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QPushButton, QFileDialog,
    QSpinBox, QComboBox, QGroupBox, QGridLayout, QLineEdit,
    QHBoxLayout, QTextEdit, QDialogButtonBox, QCheckBox
)
from PySide6.QtGui import QFont, QTextCursor
from wagonflow.config import CFG, set_log_level

# --- PICKERS ---

def pick_file(parent, initial_directory=None):
    start = initial_directory if initial_directory and Path(initial_directory).exists() else ""
    path, _ = QFileDialog.getOpenFileName(
        parent, "Select Wagon Data File", start,
        "Data Files (*.csv *.txt *.xlsx *.xls);;All Files (*)")
    return str(Path(path).resolve()) if path else None

def pick_folder(parent):
    d = QFileDialog.getExistingDirectory(parent, "Select Destination Folder")
    return str(Path(d).resolve()) if d else None

# --- DIALOGS ---

class LogViewerDialog(QDialog):
    """Read-only view of the app log, opened at the newest entries."""
    def __init__(self, log_path, parent=None):
        super().__init__(parent)
        self.log_path = Path(log_path)
        self.setWindowTitle(f"App Log - {self.log_path.name}")
        self.resize(800, 600)

        layout = QVBoxLayout(self)

        self.txt = QTextEdit()
        self.txt.setReadOnly(True)
        self.txt.setLineWrapMode(QTextEdit.NoWrap)
        font = QFont("Consolas", 10)
        font.setStyleHint(QFont.Monospace)
        self.txt.setFont(font)
        layout.addWidget(self.txt)

        btns = QDialogButtonBox(QDialogButtonBox.Close)
        self.btn_refresh = btns.addButton("Refresh", QDialogButtonBox.ActionRole)
        self.btn_refresh.clicked.connect(self.reload)
        btns.rejected.connect(self.close)
        layout.addWidget(btns)

        self.reload()

    def reload(self):
        if self.log_path.exists():
            self.txt.setPlainText(self.log_path.read_text(encoding='utf-8', errors='ignore'))
        else:
            self.txt.setPlainText("(no log yet)")
        self.txt.moveCursor(QTextCursor.End)
        self.txt.ensureCursorVisible()

class SettingsDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        self.resize(560, 420)

        layout = QVBoxLayout(self)

        # Defaults
        gb_def = QGroupBox("Defaults")
        gl_def = QGridLayout(gb_def)
        gl_def.addWidget(QLabel("Default Directory:"), 0, 0)
        self.txt_default_dir = QLineEdit(CFG.get("default_directory"))
        gl_def.addWidget(self.txt_default_dir, 0, 1)
        btn_browse_dir = QPushButton("...")
        btn_browse_dir.clicked.connect(self.browse_default_dir)
        gl_def.addWidget(btn_browse_dir, 0, 2)
        self.chk_open_dest = QCheckBox("Open destination folder when a run finishes")
        self.chk_open_dest.setChecked(bool(CFG.get("open_destination_on_finish")))
        gl_def.addWidget(self.chk_open_dest, 1, 0, 1, 3)
        layout.addWidget(gb_def)

        # Engine
        gb_eng = QGroupBox("Analysis Engine")
        gl_eng = QGridLayout(gb_eng)
        gl_eng.addWidget(QLabel("Entry Point (module:function):"), 0, 0)
        self.txt_entry = QLineEdit(CFG.get("engine_entry_point"))
        gl_eng.addWidget(self.txt_entry, 0, 1, 1, 2)
        gl_eng.addWidget(QLabel("Executable:"), 1, 0)
        self.txt_exe = QLineEdit(CFG.get("engine_exe"))
        gl_eng.addWidget(self.txt_exe, 1, 1)
        btn_browse_exe = QPushButton("...")
        btn_browse_exe.clicked.connect(self.browse_exe)
        gl_eng.addWidget(btn_browse_exe, 1, 2)
        gl_eng.addWidget(QLabel("Timeout (s, 0=None):"), 2, 0)
        self.spin_timeout = QSpinBox()
        self.spin_timeout.setRange(0, 24 * 3600)
        self.spin_timeout.setValue(int(CFG.get("engine_timeout_seconds") or 0))
        gl_eng.addWidget(self.spin_timeout, 2, 1)
        layout.addWidget(gb_eng)

        # Support
        gb_supp = QGroupBox("Support & Diagnostics")
        gl_supp = QVBoxLayout(gb_supp)
        row_lvl = QHBoxLayout()
        row_lvl.addWidget(QLabel("Log Level:"))
        self.cb_level = QComboBox()
        self.cb_level.addItems(["DEBUG", "INFO", "WARNING", "ERROR"])
        self.cb_level.setCurrentText(str(CFG.get("log_level")).upper())
        row_lvl.addWidget(self.cb_level)
        gl_supp.addLayout(row_lvl)
        self.btn_export_debug = QPushButton("Export Debug Bundle (Zipped Logs)")
        gl_supp.addWidget(self.btn_export_debug) # Connected in parent
        layout.addWidget(gb_supp)

        layout.addStretch()
        btn_save = QPushButton("Save && Close")
        btn_save.setStyleSheet("font-weight: bold; padding: 8px;")
        btn_save.clicked.connect(self.save)
        layout.addWidget(btn_save)

    def browse_default_dir(self):
        d = pick_folder(self)
        if d: self.txt_default_dir.setText(d)

    def browse_exe(self):
        path, _ = QFileDialog.getOpenFileName(self, "Select Engine Executable")
        if path: self.txt_exe.setText(path)

    def save(self):
        CFG.set("default_directory", self.txt_default_dir.text().strip() or CFG.DEFAULTS["default_directory"])
        CFG.set("open_destination_on_finish", self.chk_open_dest.isChecked())
        CFG.set("engine_entry_point", self.txt_entry.text().strip())
        CFG.set("engine_exe", self.txt_exe.text().strip())
        CFG.set("engine_timeout_seconds", self.spin_timeout.value())
        CFG.set("log_level", self.cb_level.currentText())
        set_log_level(self.cb_level.currentText())
        self.accept()
