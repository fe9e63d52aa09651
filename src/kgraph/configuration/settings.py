"""Typed settings management for kgraph.

Default options for community detection and path finding are kept in a JSON
settings file wrapped in Pydantic models, so CLI commands can rely on
validated values. Environment variables prefixed with ``KGRAPH_`` override
file values.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from kgraph.community.types import CommunityDetectionOptions
from kgraph.exceptions import SettingsError
from kgraph.graph.weights import EdgeWeightStrategy
from kgraph.pathfinding.types import PathDirection, PathFindingAlgorithm, PathFindingOptions


DEFAULT_CONFIG_PATH = Path.home() / ".kgraph" / "config.json"


class CommunitySettings(BaseModel):
    """Defaults for Louvain community detection."""

    resolution: float = Field(1.0, gt=0, description="Modularity resolution parameter")
    max_iterations: int = Field(10, ge=1, description="Local-moving passes per level")
    min_modularity_gain: float = Field(0.0001, ge=0)
    use_weights: bool = Field(True, description="Use edge weights when present")
    default_weight: float = Field(1.0, gt=0, description="Weight for unweighted edges")
    random_seed: Optional[int] = Field(42, description="Shuffle seed, null for a fresh seed")
    randomize_order: bool = Field(True, description="Shuffle node visit order")

    def to_options(self) -> CommunityDetectionOptions:
        return CommunityDetectionOptions(**self.model_dump())


class PathFindingSettings(BaseModel):
    """Defaults for path queries."""

    algorithm: PathFindingAlgorithm = Field(PathFindingAlgorithm.BFS)
    max_length: int = Field(10, ge=1, le=1000, description="Maximum path length in edges")
    direction: PathDirection = Field(PathDirection.BOTH)
    max_paths: int = Field(5, ge=1, description="Cap for all-paths queries")
    weight_strategy: EdgeWeightStrategy = Field(EdgeWeightStrategy.UNIFORM)
    preferred_predicates: List[str] = Field(default_factory=list)
    avoided_predicates: List[str] = Field(default_factory=list)
    timeout_ms: float = Field(5000.0, gt=0, description="Search budget in milliseconds")

    def to_options(self) -> PathFindingOptions:
        return PathFindingOptions(
            algorithm=self.algorithm,
            max_length=self.max_length,
            direction=self.direction,
            max_paths=self.max_paths,
            weight_strategy=self.weight_strategy,
            preferred_predicates=tuple(self.preferred_predicates),
            avoided_predicates=tuple(self.avoided_predicates),
            timeout_ms=self.timeout_ms,
        )


class Settings(BaseModel):
    """Root configuration state."""

    community: CommunitySettings = Field(default_factory=CommunitySettings)
    pathfinding: PathFindingSettings = Field(default_factory=PathFindingSettings)


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if invalid."""

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found at {path}")
    try:
        payload = json.loads(path.read_text())
    except OSError as exc:
        raise SettingsError(f"Settings file {path} cannot be read", cause=exc) from exc
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Settings file {path} is not valid JSON", cause=exc) from exc
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"Invalid configuration: {exc}", cause=exc) from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk."""

    payload = settings.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2))
    except OSError as exc:
        raise SettingsError(f"Settings file {path} cannot be written", cause=exc) from exc


def bootstrap_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Create or load settings respecting environment overrides.

    A default settings file is written when none exists. Explicit
    ``overrides`` (nested by section) apply before environment variables.
    """

    overrides = overrides or {}

    if path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()
        save_settings(settings, path)

    merged = settings.model_dump(mode="python")
    merged = _apply_overrides(merged, overrides)
    merged = _apply_env_overrides(merged)

    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise SettingsError(f"Invalid configuration override: {exc}", cause=exc) from exc


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            section = dict(merged[key])
            section.update(value)
            merged[key] = section
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    community = data.setdefault("community", {})
    _set_env_override(community, "resolution", "KGRAPH_RESOLUTION", cast_float=True)
    _set_env_override(community, "max_iterations", "KGRAPH_MAX_ITERATIONS", cast_int=True)
    _set_env_override(community, "random_seed", "KGRAPH_RANDOM_SEED", cast_int=True)
    _set_env_override(community, "use_weights", "KGRAPH_USE_WEIGHTS", cast_bool=True)

    pathfinding = data.setdefault("pathfinding", {})
    _set_env_override(pathfinding, "algorithm", "KGRAPH_ALGORITHM")
    _set_env_override(pathfinding, "direction", "KGRAPH_DIRECTION")
    _set_env_override(pathfinding, "max_length", "KGRAPH_MAX_LENGTH", cast_int=True)
    _set_env_override(pathfinding, "timeout_ms", "KGRAPH_TIMEOUT_MS", cast_float=True)
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_bool: bool = False,
    cast_int: bool = False,
    cast_float: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    try:
        if cast_bool:
            mapping[key] = raw.lower() in {"1", "true", "yes"}
        elif cast_int:
            mapping[key] = int(raw)
        elif cast_float:
            mapping[key] = float(raw)
        else:
            mapping[key] = raw
    except ValueError as exc:
        raise SettingsError(f"Environment variable {env_name}={raw!r} is not valid", cause=exc) from exc
