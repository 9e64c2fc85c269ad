from PySide6 import QtCore

class EventBus(QtCore.QObject):
    # Playback state (core -> views)
    sig_time_changed = QtCore.Signal(float)      # current time (epoch sec)
    sig_mode_changed = QtCore.Signal(str)        # "playing" | "scrubbing"
    sig_chunk_changed = QtCore.Signal(int)       # active chunk index
    sig_chunks_changed = QtCore.Signal(object)   # ChunkSet
    sig_camera_changed = QtCore.Signal(str)      # active camera

    # Timeline gestures (views -> core)
    sig_handlebar_time_changed = QtCore.Signal(float)
    sig_dragging_changed = QtCore.Signal(bool)

    # Camera selection (views -> core)
    sig_camera_selected = QtCore.Signal(str)

    # Data
    sig_severity_changed = QtCore.Signal(str)
    sig_review_items_changed = QtCore.Signal()   # notification only; read from session
    sig_motion_updated = QtCore.Signal()         # notification only; read from session
