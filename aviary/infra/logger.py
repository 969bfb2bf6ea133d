# aviary/infra/logger.py
"""
Logging for farm record operations.

This module configures and exposes the loggers that record every
critical operation: records created, state transitions, database
operations, file imports/exports and system events.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional


# Global switch for file logging
ENABLE_LOGGING = os.environ.get("AVIARY_LOGGING", "0") == "1"
# Global switch for console prints
ENABLE_OUTPUT = os.environ.get("AVIARY_OUTPUT", "0") == "1"

def print_system(*args, **kwargs):
    """Print gated by ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Base logger format
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configure a logger writing to its own file.

    Args:
        name: Logger name
        log_file: Path of the log file
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    # delay=True: the file is only created on the first record
    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

# Log directory (next to the package unless AVIARY_LOGS_DIR is set)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = Path(os.environ.get("AVIARY_LOGS_DIR", BASE_DIR / "logs"))
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "records": LOGS_DIR / "records.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

transaction_logger = setup_logger('aviary.transactions', str(LOG_FILES["transactions"]))
record_logger = setup_logger('aviary.records', str(LOG_FILES["records"]))
database_logger = setup_logger('aviary.database', str(LOG_FILES["database"]))
system_logger = setup_logger('aviary.system', str(LOG_FILES["system"]))

def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Log a whole use-case run.

    Args:
        operation: Operation name (register_batch, record_feed, ...)
        data: Input of the operation
        result: Outcome (optional)
        error: Error message (optional)
    """
    if not ENABLE_LOGGING:
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_record(entity: str, action: str, **kwargs) -> None:
    """
    Log a change to one farm record.

    Args:
        entity: Record type (batch, feed, medication, debeaking, eggs, inventory)
        action: What happened (insert, sell, mortality, complete)
        **kwargs: Record fields worth keeping
    """
    if not ENABLE_LOGGING:
        return
    record_logger.info(f"{entity.upper()}_{action.upper()}: {kwargs}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    if not ENABLE_LOGGING:
        return
    log_data = {
        "table": table,
        "operation": operation,
        "affected_rows": affected_rows,
        **kwargs
    }
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log a system event.

    Args:
        event: Event name
        details: Extra details (optional)
        level: Log level (info, warning, error)
    """
    if not ENABLE_LOGGING:
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """Log a file import or export."""
    if not ENABLE_LOGGING:
        return
    log_data = {
        "operation": operation,
        "file_path": file_path,
        "rows_processed": rows_processed,
        "at": datetime.now().isoformat(timespec="seconds"),
        **kwargs
    }
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "transactions", lines: int = 100) -> str:
    """
    Return the tail of one log file.

    Args:
        log_type: transactions, records, database or system
        lines: Number of lines to return

    Returns:
        Log content as text
    """
    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} not found."

    with open(log_file, 'r', encoding='utf-8') as f:
        all_lines = f.readlines()
    return ''.join(all_lines[-lines:])
