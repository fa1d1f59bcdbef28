from .logger import Logger, SUPPORTED_LOG_LEVELS, get_log_level

__all__ = ["Logger", "SUPPORTED_LOG_LEVELS", "get_log_level"]
