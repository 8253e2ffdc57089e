"""
FrameTicker - Drives ThumbnailService once per frame from the Qt event loop
"""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..config import Config
from .thumbnail_service import ThumbnailService

logger = logging.getLogger(__name__)


class FrameTicker(QObject):
    """
    QTimer-based frame loop for the thumbnail engine

    Usage:
        ticker = FrameTicker(service)
        ticker.start()
    """

    ticked = pyqtSignal(int)  # frame number

    def __init__(self, service: ThumbnailService, interval_ms: int = Config.FRAME_INTERVAL_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._service = service
        self.frame_count = 0

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self):
        if not self._timer.isActive():
            logger.debug(f"Frame ticker started ({self._timer.interval()}ms)")
            self._timer.start()

    def stop(self):
        self._timer.stop()

    def step(self, frames: int = 1):
        """Run frames synchronously (headless hosts and tests)"""
        for _ in range(frames):
            self._on_timeout()

    def _on_timeout(self):
        self.frame_count += 1
        self._service.tick()
        self.ticked.emit(self.frame_count)


__all__ = ['FrameTicker']
