from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

Color = Tuple[int, int, int]

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "~/.local/share/mandala",
    "documents_dir": None,
    "log_level": "INFO",
    "paint": {
        "line_width": 5.0,
        "line_color": [0, 0, 0],
        "fill_color": None,
        "background": [255, 255, 255],
        "size_values": [3, 5, 10],
        "palette": [
            [0, 0, 0],
            [220, 20, 60],
            [255, 127, 0],
            [255, 215, 0],
            [34, 139, 34],
            [0, 128, 128],
            [30, 144, 255],
            [138, 43, 226],
            [255, 105, 180],
            [210, 105, 30],
            [105, 105, 105],
        ],
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("MANDALA_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("~/.config/mandala/config.yaml").expanduser(),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config


def coerce_color(value: Any, default: Optional[Color]) -> Optional[Color]:
    if value is None:
        return default
    try:
        red, green, blue = (int(channel) for channel in value)
    except (TypeError, ValueError):
        return default
    return (
        max(0, min(255, red)),
        max(0, min(255, green)),
        max(0, min(255, blue)),
    )
