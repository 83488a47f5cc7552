"""Analysis settings shared by the core functions, the batch runner and the CLI."""
from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError
from .layout import LAYOUTS
from .logging import get_logger

logger = get_logger(__name__)

SCALES = ("log", "sqrt", "linear")
STRATEGIES = ("auto", "dense", "sparse")
MODES = ("digraph", "trigraph")

# 256**2 slots is the largest table we are willing to allocate up front
DENSE_MAX_ORDER = 2


@dataclass
class AnalysisConfig:
    max_order: int = 2            # entropy is reported for orders 1..max_order
    strategy: str = "auto"        # n-gram table layout: auto, dense or sparse
    scale: str = "log"            # tone-mapping curve for pixel brightness
    gamma: float = 0.4            # applied after the curve, < 1 lifts rare cells
    digraph_layout: str = "direct"
    trigraph_layout: str = "zorder"
    profile_window: int = 2048    # bytes per windowed-entropy sample
    profile_stride: int = 2048
    workers: int = 1              # > 1 fans files out to a process pool

    def __post_init__(self):
        self.scale = os.getenv("BINVIZ_SCALE", self.scale)
        if order_env := os.getenv("BINVIZ_MAX_ORDER"):
            try:
                self.max_order = int(order_env)
            except ValueError:
                logger.warning("ignoring malformed override", variable="BINVIZ_MAX_ORDER", value=order_env)
        if workers_env := os.getenv("BINVIZ_WORKERS"):
            try:
                self.workers = int(workers_env)
            except ValueError:
                logger.warning("ignoring malformed override", variable="BINVIZ_WORKERS", value=workers_env)

    def validate(self) -> "AnalysisConfig":
        check_order(self.max_order)
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(f"unknown counting strategy {self.strategy!r} (expected one of {STRATEGIES})")
        if self.scale not in SCALES:
            raise ConfigurationError(f"unknown scale {self.scale!r} (expected one of {SCALES})")
        if not self.gamma > 0:
            raise ConfigurationError(f"gamma must be positive, got {self.gamma}")
        for name in (self.digraph_layout, self.trigraph_layout):
            if name not in LAYOUTS:
                raise ConfigurationError(f"unknown layout {name!r} (expected one of {tuple(LAYOUTS)})")
        for field_name in ("profile_window", "profile_stride", "workers"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{field_name} must be a positive integer, got {value!r}")
        return self


def check_order(order) -> int:
    if isinstance(order, bool) or not isinstance(order, int) or order < 1:
        raise ConfigurationError(f"n-gram order must be an integer >= 1, got {order!r}")
    return order


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ConfigurationError(f"unknown visualization mode {mode!r} (expected one of {MODES})")
    return mode
