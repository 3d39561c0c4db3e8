"""Sampling options for batching prepared datasets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import torch


@dataclass
class SamplingConfig:
    batch_size: int = 32
    shuffle: bool = False
    seed: Optional[int] = None
    num_workers: int = 0


def to_sampling_config(config: Dict[str, object]) -> SamplingConfig:
    sampling_cfg = config.get("sampling", {}) or {}
    seed = sampling_cfg.get("seed")
    return SamplingConfig(
        batch_size=int(sampling_cfg.get("batch_size", 32)),
        shuffle=bool(sampling_cfg.get("shuffle", False)),
        seed=None if seed is None else int(seed),
        num_workers=int(sampling_cfg.get("num_workers", 0)),
    )


def set_seed(seed: int) -> None:
    import random

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
