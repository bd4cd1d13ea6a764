from .id_generator import generate_id, id_for_table
from .logging import get_logger, setup_logging
from .time_utils import get_timestamp_ms

__all__ = [
    "generate_id",
    "id_for_table",
    "get_logger",
    "setup_logging",
    "get_timestamp_ms",
]
