import threading

from lispreader import logconfig

_INIT_LOCK = threading.Lock()
_runtime_is_initialized = False


def init(force_reload: bool = False) -> None:
    """
    Initialize the process-wide environment for reading.

    The reader itself needs no setup; this only configures logging from the
    environment. ``init()`` may be called more than once. Only the first invocation
    will take effect unless ``force_reload=True``.
    """
    global _runtime_is_initialized

    with _INIT_LOCK:
        if _runtime_is_initialized and not force_reload:
            return

        logconfig.configure_root_logger()
        _runtime_is_initialized = True
