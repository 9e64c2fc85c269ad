from PySide6 import QtWidgets

REGISTRY = {}

def register_view(name: str):
    def deco(cls):
        REGISTRY[name] = cls
        return cls
    return deco

class TimelineView(QtWidgets.QWidget):
    def __init__(self, bus, session, parent=None):
        super().__init__(parent)
        self.bus = bus
        self.session = session

    def render_initial(self): ...
    def update_time(self, t: float): ...
    def update_chunk(self, idx: int): ...
    def update_events(self): ...
    def update_motion(self): ...
