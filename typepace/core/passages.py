from __future__ import annotations

import logging
import random
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_PASSAGES_DIR = Path(__file__).resolve().parent.parent / "data" / "passages"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class PassageRepository:
    """Difficulty-tagged passage pools loaded from ``<difficulty>.yaml`` files.

    Each file holds a ``title`` and a ``content`` list of passages, or a
    multiline string with one passage per line.
    """

    def __init__(self, base_dir: Optional[Path] = None, rng: Optional[random.Random] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else DEFAULT_PASSAGES_DIR
        self._rng = rng or random.Random()
        self._pools = self._load_pools()

    def pool(self, difficulty: Difficulty) -> List[str]:
        return list(self._pools[Difficulty(difficulty)])

    def choose(self, difficulty: Difficulty) -> str:
        """Return one passage from the pool for ``difficulty``."""
        return self._rng.choice(self._pools[Difficulty(difficulty)])

    def _load_pools(self) -> Dict[Difficulty, List[str]]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Passages directory not found: {self._base_dir}")

        pools: Dict[Difficulty, List[str]] = {}
        for difficulty in Difficulty:
            path = self._base_dir / f"{difficulty.value}.yaml"
            if not path.exists():
                raise FileNotFoundError(f"Passage pool not found: {path}")
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not raw or not isinstance(raw, dict):
                raise ValueError(f"{path.name}: expected YAML with 'title' and 'content'")
            title = raw.get("title")
            if not title or not isinstance(title, str):
                raise ValueError(f"{path.name}: missing or invalid 'title'")
            content = raw.get("content")
            if content is None:
                raise ValueError(f"{path.name}: missing 'content'")
            if isinstance(content, list):
                passages = [" ".join(str(item).split()) for item in content if str(item).strip()]
            else:
                text = str(content).strip()
                passages = [line.strip() for line in text.splitlines() if line.strip()]
            if not passages:
                raise ValueError(f"{path.name}: 'content' has no passages")
            pools[difficulty] = passages
            logger.debug("Loaded %d %s passages from %s", len(passages), difficulty.value, path)
        return pools
