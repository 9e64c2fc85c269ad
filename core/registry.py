from __future__ import annotations

from typing import Dict, List, Optional

from PySide6 import QtCore

from core.handle import PlayerHandle


class ControllerRegistry(QtCore.QObject):
    """
    Table of player handles keyed by camera id, scoped to one session.

    Handles register whenever their player reports ready, in any order.
    Every operation tolerates a missing handle. Only the primary's
    time/boundary signals are forwarded.
    """
    sig_primary_time_update = QtCore.Signal(float)
    sig_primary_boundary_crossed = QtCore.Signal(str)
    sig_handle_registered = QtCore.Signal(str, bool)  # camera, is_primary

    def __init__(self, primary_camera: str, parent: QtCore.QObject | None = None):
        super().__init__(parent)
        self._primary_id: str = primary_camera
        self._handles: Dict[str, PlayerHandle] = {}
        self._connections: Dict[str, List[QtCore.QMetaObject.Connection]] = {}

    # queries
    @property
    def primary_id(self) -> str:
        return self._primary_id

    @property
    def primary(self) -> Optional[PlayerHandle]:
        return self._handles.get(self._primary_id)

    def get(self, camera: str) -> Optional[PlayerHandle]:
        return self._handles.get(camera)

    def secondaries(self) -> Dict[str, PlayerHandle]:
        return {cam: h for cam, h in self._handles.items() if cam != self._primary_id}

    def cameras(self) -> List[str]:
        return list(self._handles.keys())

    # registration
    def register_primary(self, handle: PlayerHandle) -> None:
        if self._register(self._primary_id, handle):
            self.sig_handle_registered.emit(self._primary_id, True)

    def register_secondary(self, camera: str, handle: PlayerHandle) -> None:
        if camera == self._primary_id:
            # a late preview for the main camera must not displace the primary
            if camera in self._handles and self._handles[camera] is not handle:
                print(f"[Registry] Ignoring secondary for primary camera {camera}")
                return
        if self._register(camera, handle):
            self.sig_handle_registered.emit(camera, camera == self._primary_id)

    def unregister(self, camera: str) -> None:
        handle = self._handles.pop(camera, None)
        self._disconnect(camera)
        if handle is not None:
            print(f"[Registry] Unregistered {camera}")

    def clear(self) -> None:
        for camera in list(self._handles.keys()):
            self._disconnect(camera)
        self._handles.clear()

    def promote(self, camera: str) -> None:
        """Relabel camera as primary; the previous primary stays registered as a secondary."""
        if camera == self._primary_id:
            return
        print(f"[Registry] Promote {camera} (was {self._primary_id})")
        demoted = self._handles.get(self._primary_id)
        self._primary_id = camera
        if demoted is not None:
            demoted.set_role(False)
        promoted = self._handles.get(camera)
        if promoted is not None:
            promoted.set_role(True)

    # commands
    def broadcast_scrub(self, ts: float, include_primary: bool = False) -> None:
        for camera, handle in list(self._handles.items()):
            if camera == self._primary_id and not include_primary:
                continue
            handle.scrub_to(ts)

    # internal helpers
    def _register(self, camera: str, handle: PlayerHandle) -> bool:
        previous = self._handles.get(camera)
        if previous is handle:
            return False
        if previous is not None:
            self._disconnect(camera)
            print(f"[Registry] Replacing handle for {camera}")
        self._handles[camera] = handle
        handle.set_role(camera == self._primary_id)
        self._connections[camera] = [
            handle.sig_time_update.connect(
                lambda ts, cam=camera, h=handle: self._forward_time(cam, h, ts)),
            handle.sig_boundary_crossed.connect(
                lambda direction, cam=camera, h=handle: self._forward_boundary(cam, h, direction)),
        ]
        return True

    def _disconnect(self, camera: str) -> None:
        for conn in self._connections.pop(camera, []):
            try:
                QtCore.QObject.disconnect(conn)
            except (RuntimeError, TypeError):
                pass

    def _is_primary(self, camera: str, handle: PlayerHandle) -> bool:
        return camera == self._primary_id and self._handles.get(camera) is handle

    def _forward_time(self, camera: str, handle: PlayerHandle, ts: float) -> None:
        if self._is_primary(camera, handle):
            self.sig_primary_time_update.emit(float(ts))

    def _forward_boundary(self, camera: str, handle: PlayerHandle, direction: str) -> None:
        if self._is_primary(camera, handle):
            self.sig_primary_boundary_crossed.emit(direction)
