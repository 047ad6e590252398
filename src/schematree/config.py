import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from schematree.traversal import HiddenPath, TraverseOptions, Traversing
from schematree.tree import SchemaTreeOptions


class TreeConfig(BaseModel):
    """Tree and traversal settings, as read from a YAML file.

    Example:
        type_name: Query
        max_depth: 4
        traversing: breadthFirst
        hidden_paths:
          - query.viewer
        hidden_patterns:
          - '\\.totalCount$'
    """

    model_config = ConfigDict(extra="forbid")

    type_name: str = "Query"
    max_depth: int = Field(default=5, ge=0)
    traversing: Traversing = Traversing.DEPTH_FIRST
    hidden_paths: list[str] = Field(default_factory=list)
    hidden_patterns: list[str] = Field(default_factory=list)
    exclude_root: bool = False

    @field_validator("hidden_patterns")
    @classmethod
    def validate_patterns(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid hidden path pattern '{pattern}': {e}") from e
        return patterns

    def tree_options(self) -> SchemaTreeOptions:
        return SchemaTreeOptions(type_name=self.type_name, max_depth=self.max_depth)

    def traverse_options(self) -> TraverseOptions:
        hidden: list[HiddenPath] = [*self.hidden_paths, *(re.compile(p) for p in self.hidden_patterns)]
        return TraverseOptions(traversing=self.traversing, hidden_paths=hidden, exclude_root=self.exclude_root)


def load_tree_config(config_path: Path | None, **overrides: Any) -> TreeConfig:
    """
    Load a tree configuration file and apply overrides on top of it.

    Args:
        config_path: Optional YAML file
        **overrides: Values taking precedence over the file; None values are ignored

    Returns:
        TreeConfig: The validated configuration

    Raises:
        ValueError: If the file does not contain a mapping
    """
    data: dict[str, Any] = {}
    if config_path:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"Tree config '{config_path}' must contain a mapping")
        data.update(loaded or {})

    data.update({key: value for key, value in overrides.items() if value is not None})
    return TreeConfig(**data)
