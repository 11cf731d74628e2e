"""
pagemap_logs - Markdown run logs for pagemap workflows

Usage:
    from pagemap_logs import RunLogger

    run_logger = RunLogger(instruction=instruction, url=url, log_dir="./logs")
    run_logger.log_heading("Extract")
    run_logger.log_json(result, "Extracted")
    run_logger.finalize(success=True, duration_ms=4200)
"""

from .run_logger import RunLogger, create_run_logger

__all__ = [
    'RunLogger',
    'create_run_logger',
]

__version__ = '1.0.0'
