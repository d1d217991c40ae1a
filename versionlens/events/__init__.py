from versionlens.events.debouncer import Debouncer
from versionlens.events.watcher import BufferWatcher

__all__ = ["BufferWatcher", "Debouncer"]
