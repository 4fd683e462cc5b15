from datetime import date
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QPushButton, QLabel, QTextEdit, QFrame, QCheckBox, QGroupBox,
    QLineEdit, QDateEdit
)
from PySide6.QtCore import Qt, Slot, QTimer, QDate

from wagonflow.config import SystemUtils
from wagonflow.core.ticker import ElapsedTicker, format_elapsed

ACTIVE_COLOR = "#202020"
INACTIVE_COLOR = "#808080"

def to_qdate(d: date, widget: QDateEdit) -> QDate:
    lo, hi = widget.minimumDate(), widget.maximumDate()
    if d.year < lo.year(): return lo
    if d.year > hi.year(): return hi
    q = QDate(d.year, d.month, d.day)
    return max(lo, min(hi, q))

def from_qdate(q: QDate) -> date:
    return date(q.year(), q.month(), q.day())

class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(f"Wagon Movement Analysis {SystemUtils.CURRENT_VERSION}")
        self.resize(620, 520)

        # Timer
        self.timer = QTimer(self)
        self.ticker = ElapsedTicker(halt=self.halt_timer)
        self.timer.timeout.connect(self.update_timer)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        # --- INPUT ---
        gb_src = QGroupBox("Wagon Data")
        gl_src = QGridLayout(gb_src)
        self.lbl_file = QLabel()
        self.lbl_file.setFrameShape(QFrame.StyledPanel)
        self.btn_select_file = QPushButton("Select File...")
        gl_src.addWidget(self.lbl_file, 0, 0)
        gl_src.addWidget(self.btn_select_file, 0, 1)
        self.chk_sql = QCheckBox("Use SQL (acquire data from the warehouse)")
        gl_src.addWidget(self.chk_sql, 1, 0, 1, 2)
        gl_src.setColumnStretch(0, 1)
        layout.addWidget(gb_src)

        # --- DESTINATION ---
        gb_dst = QGroupBox("Destination")
        hl_dst = QHBoxLayout(gb_dst)
        self.txt_destination = QLineEdit()
        self.btn_destination = QPushButton("Browse...")
        hl_dst.addWidget(self.txt_destination)
        hl_dst.addWidget(self.btn_destination)
        layout.addWidget(gb_dst)

        # --- PERIOD ---
        gb_period = QGroupBox("Analysis Period")
        gl_period = QGridLayout(gb_period)
        self.date_from = QDateEdit()
        self.date_from.setCalendarPopup(True)
        self.date_from.setDisplayFormat("dd/MM/yyyy")
        self.date_to = QDateEdit()
        self.date_to.setCalendarPopup(True)
        self.date_to.setDisplayFormat("dd/MM/yyyy")
        gl_period.addWidget(QLabel("From:"), 0, 0)
        gl_period.addWidget(self.date_from, 0, 1)
        gl_period.addWidget(QLabel("To:"), 0, 2)
        gl_period.addWidget(self.date_to, 0, 3)
        self.chk_financial_year = QCheckBox("Last full financial year")
        gl_period.addWidget(self.chk_financial_year, 1, 0, 1, 4)
        layout.addWidget(gb_period)

        # --- OPTIONS ---
        gb_opts = QGroupBox("Options")
        vl_opts = QVBoxLayout(gb_opts)
        self.chk_volume_model = QCheckBox("Produce volume model output")
        self.chk_combine = QCheckBox("Add Intermodal and Steel to Interstate")
        vl_opts.addWidget(self.chk_volume_model)
        vl_opts.addWidget(self.chk_combine)
        layout.addWidget(gb_opts)

        # --- MONITOR ---
        head_layout = QHBoxLayout()
        self.btn_settings = QPushButton("⚙ Preferences")
        self.btn_logs = QPushButton("📜 App Log")
        head_layout.addWidget(self.btn_settings)
        head_layout.addWidget(self.btn_logs)
        head_layout.addStretch()
        self.lbl_status = QLabel("Ready")
        self.lbl_status.setStyleSheet("color: #0078d7; font-weight: bold;")
        head_layout.addWidget(self.lbl_status)
        self.btn_process = QPushButton("Process")
        self.btn_process.setStyleSheet("font-weight: bold; padding: 6px 18px;")
        head_layout.addWidget(self.btn_process)

        # Fixed width keeps the label from jittering
        self.lbl_timer = QLabel("00:00:00")
        self.lbl_timer.setStyleSheet("font-family: Consolas; font-weight: bold; padding-left: 10px;")
        self.lbl_timer.setFixedWidth(80)
        self.lbl_timer.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        head_layout.addWidget(self.lbl_timer)
        layout.addLayout(head_layout)

        self.log_box = QTextEdit()
        self.log_box.setReadOnly(True)
        self.log_box.setMaximumHeight(120)
        layout.addWidget(self.log_box)

    # --- STATE ---
    def show_source_label(self, label):
        self.lbl_file.setText(label.text)
        c = ACTIVE_COLOR if label.active else INACTIVE_COLOR
        self.lbl_file.setStyleSheet(f"color: {c}; padding: 3px;")

    def show_destination(self, path):
        self.txt_destination.setText(path or "")

    def show_date_range(self, from_date, to_date):
        for w, d in ((self.date_from, from_date), (self.date_to, to_date)):
            w.blockSignals(True)
            w.setDate(to_qdate(d, w))
            w.blockSignals(False)

    def set_processing_state(self, active):
        self.btn_process.setEnabled(not active)
        self.btn_select_file.setEnabled(not active and not self.chk_sql.isChecked())
        self.btn_destination.setEnabled(not active)
        if active:
            self.lbl_timer.setText(format_elapsed(0))
            self.timer.start(1000)

    def halt_timer(self):
        self.timer.stop()
        self.lbl_timer.setText(format_elapsed(0))

    def update_timer(self):
        text = self.ticker.tick()
        if text: self.lbl_timer.setText(text)

    @Slot(str, str)
    def update_log(self, msg, level):
        c = "#ff5555" if level == "ERROR" else "#e67e22" if level == "WARN" else "#444"
        self.log_box.append(f'<span style="color:{c}">[{level}] {msg}</span>')

    @Slot(str, str, str)
    def update_status_label(self, stage, msg, color):
        self.lbl_status.setText(msg)
        c = {"blue": "#0078d7", "green": "#2e8b57", "red": "#ff5555", "orange": "#ffaa00"}.get(color, "#202020")
        self.lbl_status.setStyleSheet(f"color: {c}; font-weight: bold;")
