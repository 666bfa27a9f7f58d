"""
Structured logging configuration using structlog.

Provides JSON-structured logs that are queryable and include:
- Timestamp
- Log level
- Component name
- Table snapshots (hashed rather than dumped)
- Memory usage
"""

import structlog
import logging
import sys
import hashlib
import psutil
import pandas as pd
from typing import Any, Dict, Optional


def hash_table(table: pd.DataFrame) -> str:
    """Hash a DataFrame's rows for logging without dumping all data."""
    if table.empty:
        return "empty"

    row_hashes = pd.util.hash_pandas_object(table, index=True).values
    data_hash = hashlib.md5(row_hashes.tobytes()).hexdigest()[:8]
    return f"{data_hash}_shape_{table.shape}"


def get_memory_usage() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process()
    return process.memory_info().rss / 1024 / 1024


class DataSnapshotProcessor:
    """Processor to capture data snapshots for logging."""

    @staticmethod
    def process_data(data: Any, max_size: int = 20) -> Dict[str, Any]:
        """
        Process data for logging, summarising tables.

        Args:
            data: Data to process
            max_size: Maximum collection size logged in full

        Returns:
            Processed data suitable for JSON logging
        """
        if data is None:
            return {"type": "none"}

        if isinstance(data, pd.DataFrame):
            return {
                "type": "DataFrame",
                "hash": hash_table(data),
                "rows": int(data.shape[0]),
                "columns": [str(c) for c in data.columns],
                "memory_usage": int(data.memory_usage(deep=True).sum()),
            }

        if isinstance(data, pd.Series):
            return {
                "type": "Series",
                "name": str(data.name),
                "size": int(data.size),
                "dtype": str(data.dtype),
            }

        if isinstance(data, (int, float, str, bool)):
            return {"type": type(data).__name__, "value": data}

        if isinstance(data, dict):
            if len(data) > max_size:
                return {
                    "type": "dict",
                    "size": len(data),
                    "keys_sample": [str(k) for k in list(data.keys())[:5]],
                }
            return {"type": "dict", "data": {str(k): v for k, v in data.items()}}

        if isinstance(data, (list, tuple)):
            if len(data) > max_size:
                return {
                    "type": type(data).__name__,
                    "size": len(data),
                    "sample": [str(x) for x in data[:5]],
                }
            return {"type": type(data).__name__, "data": [str(x) for x in data]}

        return {"type": type(data).__name__, "repr": str(data)[:100]}


def configure_structlog(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure structlog for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class InstrumentedLogger:
    """
    Logger with table snapshot and memory tracking.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self.snapshot_processor = DataSnapshotProcessor()

    def log_data_transform(
        self,
        stage: str,
        input_data: Any = None,
        output_data: Any = None,
        metadata: Optional[Dict] = None
    ):
        """
        Log a table transformation with snapshots.

        Args:
            stage: Stage name (e.g., "stratified_undersample", "discretize")
            input_data: Input to the transformation
            output_data: Output of the transformation
            metadata: Additional metadata to log
        """
        log_data = {
            "stage": stage,
            "memory_mb": get_memory_usage()
        }

        if input_data is not None:
            log_data["input"] = self.snapshot_processor.process_data(input_data)

        if output_data is not None:
            log_data["output"] = self.snapshot_processor.process_data(output_data)

        if metadata:
            log_data.update(metadata)

        self.logger.info("data_transform", **log_data)

    def log_validation_error(
        self,
        stage: str,
        error: str,
        data: Any = None,
        metadata: Optional[Dict] = None
    ):
        """
        Log a validation error with context.

        Args:
            stage: Stage where validation failed
            error: Error description
            data: Data that failed validation
            metadata: Additional context
        """
        log_data = {
            "stage": stage,
            "error": error,
            "memory_mb": get_memory_usage()
        }

        if data is not None:
            log_data["failed_data"] = self.snapshot_processor.process_data(data)

        if metadata:
            log_data.update(metadata)

        self.logger.error("validation_error", **log_data)
