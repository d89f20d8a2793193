from PySide6.QtCore import QObject, Signal


class UIBridge(QObject):
    sig_notice = Signal(str)
    sig_open_note = Signal(str)
