"""
EventBus - Central event system for cross-widget communication

Pattern: Singleton event bus for decoupled component communication
The file grid requests thumbnails through the bus; the thumbnail service
reports lifecycle transitions back through it.
"""

from typing import Optional
from PyQt6.QtCore import QObject, pyqtSignal


class EventBus(QObject):
    """
    Central event bus for application-wide signal coordination

    Usage:
        bus = get_event_bus()
        bus.thumbnail_ready.connect(on_thumbnail_ready)
        bus.emit_request_thumbnail(path)
    """

    # ==================== REQUEST SIGNALS ====================
    # These request actions to be performed by services
    request_thumbnail = pyqtSignal(str)  # path
    request_retry_thumbnail = pyqtSignal(str)  # path

    # ==================== THUMBNAIL SIGNALS ====================
    thumbnail_queued = pyqtSignal(str)  # path
    thumbnail_started = pyqtSignal(str)  # path
    thumbnail_ready = pyqtSignal(str)  # path
    thumbnail_failed = pyqtSignal(str, str)  # path, error_message

    # ==================== UI STATE SIGNALS ====================
    status_message = pyqtSignal(str)  # message
    status_error = pyqtSignal(str)  # error message

    def emit_request_thumbnail(self, path: str):
        """Ask the thumbnail service to generate a preview for path"""
        self.request_thumbnail.emit(path)

    def emit_request_retry_thumbnail(self, path: str):
        """Ask the thumbnail service to re-queue a failed preview"""
        self.request_retry_thumbnail.emit(path)

    def emit_status(self, message: str):
        """Emit status message"""
        self.status_message.emit(message)

    def emit_error(self, message: str):
        """Emit error message"""
        self.status_error.emit(message)


# Singleton instance
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """
    Get global EventBus singleton

    Returns:
        Global EventBus instance
    """
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance


__all__ = ['EventBus', 'get_event_bus']
