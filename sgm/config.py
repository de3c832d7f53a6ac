import math
from dataclasses import dataclass, fields, replace
from typing import Optional

import yaml


@dataclass(frozen=True)
class SGMConfig:
    """
    Parameters of one SGM run.

    P1 (float): Penalty for small disparity changes (|d_p - d_q| = 1).
    P2 (float): Penalty for larger disparity changes (|d_p - d_q| > 1).
    height/width: expected image geometry. Needed to reshape flat pixel
        streams, checked against 2D inputs when given.
    invalid_cost: cost of disparities that point left of column 0.
    unreachable_cost: candidate used for d-1 at d=0 and d+1 at d=D-1.
    """
    max_disparity: int = 16
    P1: float = 8.0
    P2: float = 128.0
    height: Optional[int] = None
    width: Optional[int] = None
    invalid_cost: float = 1000.0
    unreachable_cost: float = 2000.0
    parallel: bool = True

    def validate(self) -> "SGMConfig":
        if isinstance(self.max_disparity, bool) or not isinstance(self.max_disparity, int):
            raise ValueError(f"max_disparity must be an int, got {self.max_disparity!r}")
        if self.max_disparity <= 0:
            raise ValueError(f"max_disparity must be > 0, got {self.max_disparity}")

        for name in ("height", "width"):
            v = getattr(self, name)
            if v is None:
                continue
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueError(f"{name} must be an int, got {v!r}")
            if v <= 0:
                raise ValueError(f"{name} must be > 0, got {v}")

        for name in ("P1", "P2", "invalid_cost"):
            v = float(getattr(self, name))
            if not math.isfinite(v) or v < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {v}")

        if not float(self.unreachable_cost) > 0:
            raise ValueError(f"unreachable_cost must be > 0, got {self.unreachable_cost}")
        return self

    def with_overrides(self, **overrides) -> "SGMConfig":
        overrides = {k: v for k, v in overrides.items() if v is not None}
        _check_keys(overrides)
        return replace(self, **overrides).validate()


def _check_keys(d: dict):
    known = {f.name for f in fields(SGMConfig)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")


def load_config(config_path: str, **overrides) -> SGMConfig:
    """Load an SGMConfig from YAML, optionally nested under an `sgm:` key"""
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping, got {type(data).__name__}")
    if "sgm" in data:
        data = data["sgm"] or {}

    _check_keys(data)
    return SGMConfig(**data).with_overrides(**overrides)
