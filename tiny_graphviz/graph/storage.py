"""Graph snapshot saving and loading utilities."""

import json
import logging
from pathlib import Path

from .models import GraphSnapshot

LOG = logging.getLogger("tiny_graphviz.graph.storage")


class GraphStorage:
    """Save and load graph snapshots."""

    def save_json(self, snapshot: GraphSnapshot, path: str | Path) -> None:
        """Save snapshot to JSON file.

        Args:
            snapshot: GraphSnapshot to save
            path: File path to save to
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Serialize first so an unencodable value leaves the old file intact
        text = json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        LOG.info("Saved graph to %s", path)

    def load_json(self, path: str | Path) -> GraphSnapshot:
        """Load snapshot from JSON file.

        Args:
            path: File path to load from

        Returns:
            Loaded GraphSnapshot
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return GraphSnapshot.from_dict(data)
