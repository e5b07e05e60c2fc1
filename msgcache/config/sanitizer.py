import os

from .loader import section


class Sanitizer:
    def __init__(self, config: dict | None = None) -> None:
        sanitizer_cfg = section(config, "sanitizer")
        self.MAX_DEPTH: int = int(sanitizer_cfg.get("max_depth", os.getenv("SANITIZER_MAX_DEPTH", "200")))
        if self.MAX_DEPTH < 1:
            raise ValueError(f"SANITIZER_MAX_DEPTH must be >= 1, got {self.MAX_DEPTH}")
