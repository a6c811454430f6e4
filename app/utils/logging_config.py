import logging
import logging.handlers
from datetime import datetime
from pathlib import Path


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter, max_mb: int = 5, backups: int = 3):
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=max_mb*1024*1024,
        backupCount=backups,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_dir: str = "logs", log_level: str = "INFO"):
    """
    Configure logging for the timesheet service.
    Creates separate log files for the write path, the reconciler and errors, with rotation.
    """

    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    log_format = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers
    root_logger.handlers.clear()

    # Console handler (for Docker logs)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(log_format)
    root_logger.addHandler(console_handler)

    # Main application log file
    root_logger.addHandler(
        _rotating_handler(logs_dir / "app.log", level, log_format, max_mb=10, backups=5)
    )

    # Write path: entry submission, edits, recompute
    timesheet_logger = logging.getLogger('app.services.timesheet_service')
    timesheet_logger.addHandler(
        _rotating_handler(logs_dir / "timesheet_service.log", logging.DEBUG, log_format)
    )
    timesheet_logger.setLevel(logging.DEBUG)

    # Read path: calendar reconciliation and locale fallback
    reconciler_logger = logging.getLogger('app.services.reconciler')
    reconciler_logger.addHandler(
        _rotating_handler(logs_dir / "reconciler.log", logging.DEBUG, log_format)
    )
    reconciler_logger.setLevel(logging.DEBUG)

    # Error-only log file for critical issues
    root_logger.addHandler(
        _rotating_handler(logs_dir / "errors.log", logging.ERROR, log_format, backups=5)
    )

    # Suppress noisy third-party loggers
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Logging configuration completed")
    logger.info(f"Log files will be saved to: {logs_dir.absolute()}")

    return logs_dir


def get_log_files_info(log_dir: str = "logs"):
    """
    Get information about current log files for debugging.
    """
    logs_dir = Path(log_dir)
    if not logs_dir.exists():
        return {"status": "No logs directory found"}

    log_files = {}
    for log_file in logs_dir.glob("*.log"):
        try:
            stat = log_file.stat()
            log_files[log_file.name] = {
                "size_mb": round(stat.st_size / (1024*1024), 2),
                "modified": datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
            }
        except OSError as e:
            log_files[log_file.name] = {"error": str(e)}

    return log_files
