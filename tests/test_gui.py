from __future__ import annotations

import os
import threading
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtCore import QEventLoop, QTimer
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QApplication

from wagonflow.core.events import AppEvent
from wagonflow.gui.dialogs import LogViewerDialog
from wagonflow.gui.main_window import MainWindow
from wagonflow.gui.qt_adapter import WagonFlowAdapter


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(qapp):
    w = MainWindow()
    yield w
    w.timer.stop()
    w.deleteLater()


# -----------------------------
# Processing state
# -----------------------------
def test_select_file_stays_disabled_after_run_in_sql_mode(window: MainWindow):
    window.chk_sql.setChecked(True)
    window.btn_select_file.setEnabled(False)

    window.set_processing_state(True)
    window.set_processing_state(False)

    assert not window.btn_select_file.isEnabled()
    assert window.btn_process.isEnabled()
    assert window.btn_destination.isEnabled()


def test_select_file_reenabled_after_run_in_file_mode(window: MainWindow):
    window.set_processing_state(True)
    assert not window.btn_select_file.isEnabled()
    assert not window.btn_process.isEnabled()

    window.set_processing_state(False)
    assert window.btn_select_file.isEnabled()


# -----------------------------
# Elapsed timer
# -----------------------------
def test_timer_label_counts_then_resets_when_run_finishes(window: MainWindow):
    window.ticker.start()
    window.set_processing_state(True)
    assert window.timer.isActive()
    assert window.lbl_timer.text() == "00:00:00"

    window.update_timer()
    window.update_timer()
    assert window.lbl_timer.text() == "00:00:02"

    window.ticker.request_stop()
    window.update_timer()

    assert not window.timer.isActive()
    assert window.lbl_timer.text() == "00:00:00"

    # further ticks leave the label alone
    window.update_timer()
    assert window.lbl_timer.text() == "00:00:00"


def test_halt_timer_stops_qtimer(window: MainWindow):
    window.set_processing_state(True)
    window.lbl_timer.setText("00:01:05")

    window.halt_timer()

    assert not window.timer.isActive()
    assert window.lbl_timer.text() == "00:00:00"


# -----------------------------
# Worker -> GUI bridge
# -----------------------------
def test_events_from_worker_thread_are_delivered_on_gui_thread(qapp):
    adapter = WagonFlowAdapter()
    loop = QEventLoop()
    received = []

    def on_status(stage, msg, color):
        received.append(("status", msg, threading.current_thread().name))

    def on_done(result):
        received.append(("done", result, threading.current_thread().name))
        loop.quit()

    adapter.sig_status.connect(on_status)
    adapter.sig_done.connect(on_done)

    def emit_from_worker():
        adapter.ingest_event(AppEvent.status("RUN", "Processing wagon movements...", "blue"))
        adapter.ingest_event(AppEvent.done("result"))

    t = threading.Thread(target=emit_from_worker, name="worker")
    QTimer.singleShot(3000, loop.quit)
    t.start()
    loop.exec()
    t.join(timeout=5)

    main = threading.main_thread().name
    assert received == [
        ("status", "Processing wagon movements...", main),
        ("done", "result", main),
    ]


def test_adapter_maps_log_and_notification_payloads(qapp):
    adapter = WagonFlowAdapter()
    logs, notices = [], []
    adapter.sig_log.connect(lambda msg, level: logs.append((msg, level)))
    adapter.sig_notification.connect(notices.append)

    adapter.ingest_event(AppEvent.log("Engine started", "WARN"))
    adapter.ingest_event(AppEvent.notify("Finished Execution", "Program Complete"))

    assert logs == [("Engine started", "WARN")]
    assert notices == [{"title": "Finished Execution", "msg": "Program Complete", "level": "INFO"}]


# -----------------------------
# Log viewer
# -----------------------------
def test_log_viewer_opens_at_newest_entries(qapp, tmp_path: Path):
    log = tmp_path / "app.log"
    log.write_text("".join(f"line {i}\n" for i in range(500)), encoding="utf-8")

    dlg = LogViewerDialog(log)

    assert "line 499" in dlg.txt.toPlainText()
    assert dlg.txt.textCursor().atEnd()

    with log.open("a", encoding="utf-8") as f:
        f.write("line 500\n")
    dlg.txt.moveCursor(QTextCursor.Start)
    dlg.reload()

    assert dlg.txt.toPlainText().rstrip().endswith("line 500")
    assert dlg.txt.textCursor().atEnd()


def test_log_viewer_handles_missing_log(qapp, tmp_path: Path):
    dlg = LogViewerDialog(tmp_path / "missing.log")
    assert dlg.txt.toPlainText() == "(no log yet)"
