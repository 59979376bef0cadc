"""Configuration management for tiny-graphviz."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()


def _env_or_default(env_name: str, default_value: object) -> str:
    """Return environment value or fallback as string."""
    value = os.environ.get(env_name)
    if value:
        return value
    return str(default_value)


@dataclass
class Config:
    """Configuration for rendering and compiling graphs."""

    graph_name: str = "G"
    output_dir: str = "."
    default_format: str = "pdf"
    dot_command: str = "dot"

    @staticmethod
    def _resolve_yaml_path(config_path: Optional[str] = None) -> Optional[Path]:
        """Resolve config.yaml path from explicit path or default search paths."""
        if config_path:
            path = Path(config_path)
            return path if path.exists() else None

        search_paths = [
            Path.cwd() / "config.yaml",
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                return path
        return None

    @classmethod
    def from_yaml(cls, config_path: Optional[str] = None) -> "Config":
        """Load configuration from YAML file and environment variables.

        Args:
            config_path: Path to config.yaml file. If None, searches in current
                        directory and package directory.

        Returns:
            Config instance with merged settings.
        """
        # Default values
        config_data = {
            "graph": {
                "name": "G",
            },
            "output": {
                "dir": ".",
                "format": "pdf",
            },
            "graphviz": {
                "dot_command": "dot",
            },
        }

        yaml_path = cls._resolve_yaml_path(config_path)

        # Load YAML if found
        if yaml_path and yaml_path.exists():
            with open(yaml_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
                for section, values in config_data.items():
                    values.update(loaded.get(section) or {})

        # Environment variables override YAML
        graph_config = config_data["graph"]
        output_config = config_data["output"]
        graphviz_config = config_data["graphviz"]
        return cls(
            graph_name=_env_or_default("GRAPH_NAME", graph_config["name"]),
            output_dir=_env_or_default("GRAPH_OUTPUT_DIR", output_config["dir"]),
            default_format=_env_or_default("GRAPH_FORMAT", output_config["format"]).lower(),
            dot_command=_env_or_default("GRAPHVIZ_DOT", graphviz_config["dot_command"]),
        )
