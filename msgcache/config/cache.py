import os

from .loader import section


class Cache:
    def __init__(self, config: dict | None = None) -> None:
        cache_cfg = section(config, "cache")
        # Seconds an entry stays readable after it was saved (absolute, never renewed).
        self.TTL: float = float(cache_cfg.get("ttl", os.getenv("MSG_CACHE_TTL", "60")))
        self.MAX_KEYS: int = int(cache_cfg.get("max_keys", os.getenv("MSG_CACHE_MAX_KEYS", "5000")))
        # Background sweep interval in seconds; 0 disables the sweeper and leaves purging to reads.
        self.CHECK_PERIOD: float = float(
            cache_cfg.get("check_period", os.getenv("MSG_CACHE_CHECK_PERIOD", "300"))
        )
