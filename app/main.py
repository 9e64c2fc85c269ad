import sys
from PySide6 import QtWidgets, QtGui, QtCore
from app.print_hook import install_print_hook
from app.window import AppWindow
from core.config import load_cfg

_DARK = {
    QtGui.QPalette.Window: QtGui.QColor(36, 38, 41),
    QtGui.QPalette.WindowText: QtCore.Qt.white,
    QtGui.QPalette.Base: QtGui.QColor(24, 25, 27),
    QtGui.QPalette.AlternateBase: QtGui.QColor(36, 38, 41),
    QtGui.QPalette.Text: QtCore.Qt.white,
    QtGui.QPalette.Button: QtGui.QColor(48, 50, 54),
    QtGui.QPalette.ButtonText: QtCore.Qt.white,
    QtGui.QPalette.Highlight: QtGui.QColor(255, 200, 50),
    QtGui.QPalette.HighlightedText: QtCore.Qt.black,
}


def _apply_dark_theme(app: QtWidgets.QApplication) -> None:
    palette = QtGui.QPalette()
    for role, color in _DARK.items():
        palette.setColor(role, color)
    app.setPalette(palette)


def parse_args(argv):
    """recview [camera] [timestamp]"""
    camera = argv[0] if len(argv) > 0 and argv[0] else None
    start_time = None
    if len(argv) > 1:
        try:
            start_time = float(argv[1])
        except ValueError:
            print(f"[App] Ignoring invalid timestamp {argv[1]!r}")
    return camera, start_time


def main():
    cfg = load_cfg()
    install_print_hook(cfg.viewconfig.log_path)
    camera, start_time = parse_args(sys.argv[1:])
    app = QtWidgets.QApplication(sys.argv)
    app.setStyle("Fusion")
    _apply_dark_theme(app)
    w = AppWindow(cfg, camera, start_time)
    w.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
