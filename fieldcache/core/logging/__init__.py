from .logger import (
    clear_worker_id,
    get_logger,
    get_worker_id,
    is_debug_enabled,
    log_stage,
    set_worker_id,
    setup_logging,
)

__all__ = [
    "clear_worker_id",
    "get_logger",
    "get_worker_id",
    "is_debug_enabled",
    "log_stage",
    "set_worker_id",
    "setup_logging",
]
