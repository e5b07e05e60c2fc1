"""Application configuration"""

import logging
import os

from dotenv import load_dotenv

from .loader import load_raw_config
from .cache import Cache
from .sanitizer import Sanitizer

load_dotenv()

_RAW_CONFIG = load_raw_config()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL = str(_RAW_CONFIG.get("msgcache", {}).get("log_level", os.getenv("LOG_LEVEL", "INFO"))).upper()

logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=LOG_LEVEL)

cache = Cache(_RAW_CONFIG)
sanitizer = Sanitizer(_RAW_CONFIG)


class Config:
    cache = cache
    sanitizer = sanitizer


__all__ = ["cache", "sanitizer", "Config"]
