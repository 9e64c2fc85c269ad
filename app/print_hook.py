import logging
import multiprocessing as mp
import platform
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_LOG_PATH = Path.cwd() / "recview.log"
_LOGGER_NAME = "recview"
_TAG_RE = re.compile(r"^\[(?P<tag>[^\]]+)\]\s*(?P<msg>.*)$", re.DOTALL)


def _resolve_log_path(log_path) -> Path:
    try:
        return Path(log_path).expanduser().resolve() if log_path else _DEFAULT_LOG_PATH
    except (TypeError, OSError, RuntimeError):
        return _DEFAULT_LOG_PATH


def _open_logger(path: Path) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers and getattr(logger, "_log_path", None) == path:
        return logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-5s [%(tag)s] %(message)s",
                                           "%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger._log_path = path
    return logger


class _TaggedStream:
    """
    File-like tee: passes writes through to the console stream and logs
    every complete line. A leading "[Tag]" becomes the record's tag.
    """

    def __init__(self, logger: logging.Logger, level: int, tee_stream, default_tag: str):
        self.logger = logger
        self.level = level
        self.tee_stream = tee_stream
        self.default_tag = default_tag
        self._buf = ""

    def write(self, text: str) -> int:
        if self.tee_stream is not None:
            try:
                self.tee_stream.write(text)
            except (OSError, ValueError):
                pass
        self._buf += text
        while "\n" in self._buf:
            line, self._buf = self._buf.split("\n", 1)
            self._emit(line)
        return len(text)

    def flush(self) -> None:
        if self._buf:
            self._emit(self._buf)
            self._buf = ""
        if self.tee_stream is not None:
            try:
                self.tee_stream.flush()
            except (OSError, ValueError):
                pass

    def _emit(self, line: str) -> None:
        line = line.rstrip()
        if not line:
            return
        m = _TAG_RE.match(line)
        tag, msg = (m.group("tag"), m.group("msg")) if m else (self.default_tag, line)
        self.logger.log(self.level, msg, extra={"tag": tag})


def install_print_hook(log_path=None) -> Path:
    """Tee stdout/stderr into a rotating log file. Returns the log path in use."""
    path = _resolve_log_path(log_path)
    logger = _open_logger(path)
    # re-installing must wrap the real console streams, not a previous tee
    sys.stdout = _TaggedStream(logger, logging.INFO, getattr(sys.stdout, "tee_stream", sys.stdout), "stdout")
    sys.stderr = _TaggedStream(logger, logging.ERROR, getattr(sys.stderr, "tee_stream", sys.stderr), "stderr")
    if _is_main_process():
        log_environment_info(logger)
    return path


def uninstall_print_hook() -> None:
    for name in ("stdout", "stderr"):
        stream = getattr(sys, name)
        if isinstance(stream, _TaggedStream):
            stream.flush()
            setattr(sys, name, stream.tee_stream)
    logger = logging.getLogger(_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


def log_environment_info(logger: logging.Logger) -> None:
    """Record interpreter and library versions at the top of each run."""
    info = {"tag": "Env"}
    logger.info("=== recview start ===", extra=info)
    logger.info("Python %s on %s", sys.version.split()[0], platform.platform(), extra=info)
    for mod in ("PySide6", "pyqtgraph", "numpy", "requests"):
        try:
            version = getattr(__import__(mod), "__version__", "?")
        except ImportError as exc:
            version = f"unavailable ({exc})"
        logger.info("%s %s", mod, version, extra=info)


def _is_main_process() -> bool:
    return mp.current_process().name == "MainProcess" and mp.parent_process() is None
