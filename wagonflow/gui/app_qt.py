import sys
import threading
from PySide6.QtWidgets import QApplication, QMessageBox
from PySide6.QtCore import QByteArray
from .main_window import MainWindow, from_qdate
from .dialogs import SettingsDialog, LogViewerDialog, pick_file, pick_folder
from .qt_adapter import WagonFlowAdapter
from wagonflow.core.form import FormController
from wagonflow.core.models import AnalysisConfig
from wagonflow.worker import Worker
from wagonflow.config import CFG, LOG_PATH, SystemUtils, log_app

def run():
    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    window = MainWindow()
    adapter = WagonFlowAdapter()
    worker = Worker(callback=adapter.ingest_event, default_directory=CFG.get("default_directory"))

    def launch(snapshot):
        window.set_processing_state(True)
        threading.Thread(target=worker.run_analysis, args=(snapshot,), daemon=True).start()

    controller = FormController(
        config=AnalysisConfig(destination_dir=CFG.get("default_directory")),
        ticker=window.ticker,
        pick_file=lambda start: pick_file(window, start),
        pick_folder=lambda: pick_folder(window),
        launch=launch,
        default_directory=CFG.get("default_directory"),
    )

    def refresh():
        window.show_source_label(controller.source_label)
        window.show_destination(controller.config.destination_dir)
        window.show_date_range(controller.config.from_date, controller.config.to_date)

    # --- UI UPDATES ---
    adapter.sig_log.connect(window.update_log)
    adapter.sig_status.connect(lambda s, m, c: window.update_status_label(s, m, c))

    def on_done(result):
        controller.finish()
        window.set_processing_state(False)
    adapter.sig_done.connect(on_done)

    def handle_notification(data):
        if data.get("level") == "ERROR": QMessageBox.critical(window, data['title'], data['msg'])
        elif data.get("level") == "WARN": QMessageBox.warning(window, data['title'], data['msg'])
        else: QMessageBox.information(window, data['title'], data['msg'])
        if 'open_path' in data: SystemUtils.open_file(data['open_path'])
    adapter.sig_notification.connect(handle_notification)

    # --- FORM EVENTS ---
    def on_select_file():
        controller.select_file(); refresh()
    window.btn_select_file.clicked.connect(on_select_file)

    def on_select_folder():
        controller.select_folder(); refresh()
    window.btn_destination.clicked.connect(on_select_folder)

    def on_destination_edited(text):
        controller.config.destination_dir = text
    window.txt_destination.textEdited.connect(on_destination_edited)

    def on_financial_year(checked):
        controller.toggle_financial_year(checked); refresh()
    window.chk_financial_year.toggled.connect(on_financial_year)

    def on_use_sql(checked):
        controller.toggle_use_sql(checked)
        window.btn_select_file.setEnabled(not checked)
        refresh()
    window.chk_sql.toggled.connect(on_use_sql)

    window.chk_volume_model.toggled.connect(controller.toggle_volume_model)
    window.chk_combine.toggled.connect(controller.toggle_combine_commodities)
    window.date_from.dateChanged.connect(lambda q: controller.set_from_date(from_qdate(q)))
    window.date_to.dateChanged.connect(lambda q: controller.set_to_date(from_qdate(q)))
    window.btn_process.clicked.connect(controller.process)

    # --- SUPPORT ---
    def view_log():
        LogViewerDialog(LOG_PATH, window).exec()
    window.btn_logs.clicked.connect(view_log)

    def open_settings():
        dlg = SettingsDialog(window)
        dlg.btn_export_debug.clicked.connect(lambda: threading.Thread(target=worker.run_debug_export, daemon=True).start())
        if dlg.exec():
            worker.default_directory = CFG.get("default_directory")
            controller.default_directory = CFG.get("default_directory")
    window.btn_settings.clicked.connect(open_settings)

    # --- GEOMETRY ---
    geo = CFG.get("last_geometry")
    if geo: window.restoreGeometry(QByteArray.fromBase64(geo.encode("ascii")))
    app.aboutToQuit.connect(lambda: CFG.set("last_geometry", bytes(window.saveGeometry().toBase64()).decode("ascii")))

    refresh()
    log_app("Launcher started")
    window.show()
    sys.exit(app.exec())
