from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import Config, _repo_root


@dataclass
class Paths:
    root: Path
    documents_path: Path
    manifest_path: Path

    def ensure_dirs(self) -> None:
        self.documents_path.parent.mkdir(parents=True, exist_ok=True)
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)


def _resolve(base_dir: Path, path_str: str) -> Path:
    p = Path(path_str).expanduser()
    return p if p.is_absolute() else base_dir / p


def make_paths(config: Config) -> Paths:
    root = _repo_root()
    return Paths(
        root=root,
        documents_path=_resolve(root, config.output.documents_path),
        manifest_path=_resolve(root, config.output.manifest_path),
    )
