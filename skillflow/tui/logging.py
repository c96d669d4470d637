"""
Logging configuration for TUI sessions.

The TUI owns the terminal, so log records go to a timestamped file
instead of the console for as long as a session runs.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


class EditorSessionLogger:
    """
    Manages logging for a single editor session.

    Creates a timestamped log file and routes the root logger to it,
    restoring the previous handlers on teardown.
    """

    LOG_DIR = Path("./data/logs")

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Initialize the session logger.

        Args:
            log_dir: Directory for log files (defaults to ./data/logs)
        """
        self.log_dir = log_dir or self.LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.session_id = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.log_file = self.log_dir / f"session_{self.session_id}.log"

        self._file_handler: Optional[logging.FileHandler] = None
        self._original_handlers: list[logging.Handler] = []
        self._original_level = logging.WARNING

    def setup(self) -> Path:
        """
        Set up logging for this session.

        Returns:
            Path to the log file
        """
        self._file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
        self._file_handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        self._file_handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        self._original_handlers = root_logger.handlers.copy()
        self._original_level = root_logger.level

        # Console output would corrupt the TUI; keep only the file
        root_logger.handlers = [self._file_handler]
        root_logger.setLevel(logging.DEBUG)

        logging.getLogger("asyncio").setLevel(logging.WARNING)
        logging.getLogger("markdown_it").setLevel(logging.WARNING)

        logger = logging.getLogger("tui.session")
        logger.info("=" * 80)
        logger.info(f"EDITOR SESSION STARTED: {self.session_id}")
        logger.info(f"Log file: {self.log_file}")
        logger.info("=" * 80)

        return self.log_file

    def teardown(self) -> None:
        """Clean up logging handlers."""
        logger = logging.getLogger("tui.session")
        logger.info("=" * 80)
        logger.info(f"EDITOR SESSION ENDED: {self.session_id}")
        logger.info("=" * 80)

        if self._file_handler:
            self._file_handler.close()

        root_logger = logging.getLogger()
        root_logger.handlers = self._original_handlers
        root_logger.setLevel(self._original_level)


class OperationLogger:
    """Logger for editing operations issued from the TUI."""

    def __init__(self):
        self.logger = logging.getLogger("editor.operation")

    def log_operation(
        self,
        operation: str,
        node_id: Optional[str] = None,
        detail: Optional[str] = None,
        applied: bool = True,
    ) -> None:
        """Log one editing operation."""
        parts = [f"OP: {operation}"]
        if node_id:
            parts.append(f"node={node_id}")
        if detail:
            parts.append(detail)
        if not applied:
            parts.append("(no change)")
        self.logger.info(" | ".join(parts))

    def log_export(self, path: str, success: bool, error: Optional[str] = None) -> None:
        """Log a save to disk."""
        if success:
            self.logger.info(f"EXPORT: {path}")
        else:
            self.logger.error(f"EXPORT FAILED: {path}: {error}")


# Logger for the running session
_current_session: Optional[EditorSessionLogger] = None


def setup_session_logging(log_dir: Optional[Path] = None) -> Path:
    """
    Set up logging for a new editor session.

    Args:
        log_dir: Optional custom log directory

    Returns:
        Path to the log file
    """
    global _current_session

    if _current_session:
        _current_session.teardown()

    _current_session = EditorSessionLogger(log_dir)
    return _current_session.setup()


def teardown_session_logging() -> None:
    """Clean up logging for the current session."""
    global _current_session

    if _current_session:
        _current_session.teardown()
        _current_session = None


def get_log_file() -> Optional[Path]:
    """Get the path to the current log file."""
    if _current_session:
        return _current_session.log_file
    return None
