from __future__ import annotations

from pathlib import Path
from typing import Dict, Any


def get_data_root(config: Dict[str, Any]) -> Path:
    root = config.get("data_root") or "~/.local/share/mandala"
    return Path(root).expanduser().resolve()


def ensure_directories(data_root: Path, config: Dict[str, Any]) -> Dict[str, Path]:
    documents = config.get("documents_dir")
    documents_dir = Path(documents).expanduser().resolve() if documents else data_root / "documents"
    logs_dir = data_root / "logs"

    documents_dir.mkdir(parents=True, exist_ok=True)
    logs_dir.mkdir(parents=True, exist_ok=True)

    return {
        "documents": documents_dir,
        "logs": logs_dir,
    }
