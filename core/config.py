from dataclasses import dataclass
from typing import Literal
from dataclasses import asdict
import json
from pathlib import Path

CHUNK_ORDERS = ("chronological", "reverse")
LAYOUTS = ("desktop", "mobile")
SEVERITIES = ("alert", "detection", "significant_motion")

@dataclass
class timelineconfig:
    chunk_duration: int
    day_duration: int
    scrub_tolerance: float
    segment_duration: int
    timestamp_spread: int
    # index 0 is the oldest chunk for "chronological", the newest for "reverse"
    chunk_order: Literal["chronological", "reverse"]
    utc_offset: int

@dataclass
class apiconfig:
    base_url: str
    timeout: float

@dataclass
class viewconfig:
    layout: Literal["desktop", "mobile"]
    severity: Literal["alert", "detection", "significant_motion"]
    log_path: str


@dataclass
class config:
    timelineconfig: timelineconfig
    apiconfig: apiconfig
    viewconfig: viewconfig

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(self, d: dict):
        """dict → config dataclass"""
        cfg = self(
            timelineconfig=timelineconfig(**d["timelineconfig"]),
            apiconfig=apiconfig(**d["apiconfig"]),
            viewconfig=viewconfig(**d["viewconfig"]),
        )
        cfg.validate()
        return cfg

    def validate(self) -> None:
        tl = self.timelineconfig
        if tl.chunk_order not in CHUNK_ORDERS:
            raise ValueError(f"Unknown chunk_order: {tl.chunk_order}")
        if tl.chunk_duration <= 0 or tl.day_duration <= 0:
            raise ValueError("chunk_duration and day_duration must be positive")
        if self.viewconfig.layout not in LAYOUTS:
            raise ValueError(f"Unknown layout: {self.viewconfig.layout}")
        if self.viewconfig.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.viewconfig.severity}")

def default_cfg():
    tcfg = timelineconfig(chunk_duration=3600,
                          day_duration=86400,
                          scrub_tolerance=60.0,
                          segment_duration=30,
                          timestamp_spread=15,
                          chunk_order="chronological",
                          utc_offset=0)
    acfg = apiconfig(base_url="http://127.0.0.1:5000",
                     timeout=10.0)
    vcfg = viewconfig(layout="desktop",
                      severity="alert",
                      log_path="recview.log")
    return config(timelineconfig=tcfg, apiconfig=acfg, viewconfig=vcfg)

def load_cfg(path: str = "config.json") -> config:
    def _merge_defaults(default_dict: dict, loaded_dict: dict) -> dict:
        """Recursively merge loaded values onto defaults, preserving defaults when missing."""
        merged = dict(default_dict)
        for key, val in loaded_dict.items():
            if isinstance(val, dict) and isinstance(merged.get(key), dict):
                merged[key] = _merge_defaults(merged[key], val)
            else:
                merged[key] = val
        return merged

    cfg = default_cfg()
    cfg_path = Path(path)
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
            merged = _merge_defaults(cfg.to_dict(), loaded if isinstance(loaded, dict) else {})
            cfg = config.from_dict(merged)
    except (TypeError, ValueError, FileNotFoundError, json.JSONDecodeError) as exc:
        print(f"[Config] Using defaults ({type(exc).__name__}: {exc})")
        cfg = default_cfg()
        if not cfg_path.exists():
            with open(cfg_path, "w", encoding="utf-8") as f:
                json.dump(cfg.to_dict(), f)
    return cfg
