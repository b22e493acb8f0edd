"""JSON audit trail of a hardening run, one log file per run."""

from __future__ import annotations
import json
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from lib.logging_utils import DEFAULT_LOG_DIR, get_rotating_logger, log_message

OPERATIONS_LOG_DIR = f"{DEFAULT_LOG_DIR}/operations"


class OperationLogger:
    """Records step events of one run as JSON lines."""
    
    def __init__(self, operation_id: str, log_file: str):
        """Initialize operation logger.
        
        Args:
            operation_id: Unique identifier for the run
            log_file: Path to log file
        """
        self.operation_id = operation_id
        self.log_file = log_file
        self.logger = get_rotating_logger(f"operation_{operation_id}", log_file)
        self.start_time = time.time()
        self.current_step: Optional[str] = None
        self.status = "running"
        
        self._log_event("operation_start", {
            "start_time": datetime.fromtimestamp(self.start_time).isoformat(),
            "log_file": log_file
        })
    
    def log_step(self, step: str, status: str, details: Optional[str] = None, duration: Optional[float] = None) -> None:
        """Log a step in the run.
        
        Args:
            step: Step name
            status: Status ('started', 'completed', 'failed', 'skipped')
            details: Optional details about the step
            duration: Optional duration in seconds
        """
        self.current_step = step
        
        event_data: dict[str, Any] = {
            "step": step,
            "status": status,
            "timestamp": datetime.now().isoformat()
        }
        
        if details:
            event_data["details"] = details
        
        if duration is not None:
            event_data["duration_seconds"] = round(duration, 2)
        
        self._log_event("step", event_data)
    
    def log_error(self, error_type: str, error_message: str, context: Optional[dict[str, Any]] = None) -> None:
        """Log an error with context.
        
        Args:
            error_type: Type of error
            error_message: Error message
            context: Additional context information
        """
        error_data: dict[str, Any] = {
            "error_type": error_type,
            "error_message": error_message,
            "timestamp": datetime.now().isoformat(),
            "current_step": self.current_step
        }
        
        if context:
            error_data["context"] = context
        
        self._log_event("error", error_data)
    
    def complete(self, status: str = "completed", summary: Optional[str] = None) -> None:
        """Complete the run with final status ('completed' or 'failed')."""
        self.status = status
        end_time = time.time()
        
        completion_data: dict[str, Any] = {
            "status": status,
            "end_time": datetime.fromtimestamp(end_time).isoformat(),
            "duration_seconds": round(end_time - self.start_time, 2),
        }
        
        if summary:
            completion_data["summary"] = summary
        
        self._log_event("operation_end", completion_data)

    def log_context(self, event_type: str, data: dict[str, Any]) -> None:
        """Public wrapper for logging contextual events (safe for external callers)."""
        self._log_event(event_type, data)

    def _log_event(self, event_type: str, data: dict[str, Any]) -> None:
        log_entry: dict[str, Any] = {
            "event_type": event_type,
            "operation_id": self.operation_id,
            **data
        }
        log_message(self.logger, json.dumps(log_entry, default=str))


def create_operation_logger(base_log_dir: Optional[str] = None, **context: Any) -> OperationLogger:
    """Create the audit logger for a new run.
    
    Args:
        base_log_dir: Directory for run logs (default: /var/log/harden_host/operations)
        **context: Run context recorded in the first event (e.g. the config)
        
    Returns:
        New OperationLogger instance
    """
    operation_id = str(uuid.uuid4())[:8]
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Path(base_log_dir or OPERATIONS_LOG_DIR) / f"harden_{timestamp}_{operation_id}.log"

    logger = OperationLogger(operation_id, str(log_file))
    logger.log_context("run_context", {"context": context})
    return logger
