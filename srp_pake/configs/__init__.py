"""Configuration package for the SRP engine.

This package provides engine defaults and handshake scenarios.

Usage:
    from srp_pake.configs import engine_settings, load_scenario, list_scenarios

    # List available scenarios
    scenarios = list_scenarios()

    # Load a specific scenario
    config = load_scenario("wrong_password")
    settings = engine_settings(config)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from srp_pake.core.constants import (
    DEFAULT_DIGEST,
    DEFAULT_GROUP,
    DEFAULT_PRIVATE_BITS,
    DEFAULT_SALT_BYTES,
    MIN_PRIVATE_BITS,
    MIN_SALT_BYTES,
)
from srp_pake.groups.catalog import available_groups, lookup
from srp_pake.hashing.digest import get_digest

CONFIGS_DIR = Path(__file__).parent
SCENARIOS_DIR = CONFIGS_DIR / "scenarios"


@dataclass(frozen=True)
class EngineSettings:
    """Validated engine parameters.

    Attributes
    ----------
    group : str
        Catalog group name.
    digest : str
        Digest name.
    salt_bytes : int
        Length of generated salts.
    private_bits : int
        Size of the ephemeral private exponents.
    log_level : str
        Level applied to engine loggers.
    """

    group: str = DEFAULT_GROUP
    digest: str = DEFAULT_DIGEST
    salt_bytes: int = DEFAULT_SALT_BYTES
    private_bits: int = DEFAULT_PRIVATE_BITS
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        # Both raise on unknown names
        lookup(self.group)
        get_digest(self.digest)
        if self.salt_bytes < MIN_SALT_BYTES:
            raise ValueError(f"salt_bytes must be at least {MIN_SALT_BYTES}")
        if self.private_bits < MIN_PRIVATE_BITS:
            raise ValueError(f"private_bits must be at least {MIN_PRIVATE_BITS}")


def load_base_config() -> Dict[str, Any]:
    """Load the base configuration.

    Returns
    -------
    Dict[str, Any]
        Base configuration dictionary.
    """
    base_path = CONFIGS_DIR / "base.yaml"
    if not base_path.exists():
        return {}

    with open(base_path, "r") as f:
        return yaml.safe_load(f) or {}


def load_scenario(name: str) -> Dict[str, Any]:
    """Load a scenario configuration with base inheritance.

    Parameters
    ----------
    name : str
        Scenario name (without .yaml extension).

    Returns
    -------
    Dict[str, Any]
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If scenario file doesn't exist.
    """
    scenario_path = SCENARIOS_DIR / f"{name}.yaml"
    if not scenario_path.exists():
        raise FileNotFoundError(f"Scenario not found: {scenario_path}")

    config = load_base_config()

    with open(scenario_path, "r") as f:
        scenario = yaml.safe_load(f) or {}

    return _deep_merge(config, scenario)


def list_scenarios() -> List[str]:
    """List available scenarios.

    Returns
    -------
    List[str]
        List of scenario names.
    """
    if not SCENARIOS_DIR.exists():
        return []
    return sorted(f.stem for f in SCENARIOS_DIR.glob("*.yaml"))


def engine_settings(config: Optional[Dict[str, Any]] = None) -> EngineSettings:
    """Build validated engine settings from a configuration dictionary.

    Parameters
    ----------
    config : Optional[Dict[str, Any]], optional
        Full configuration (with an ``engine`` section). Defaults to the
        base configuration.

    Returns
    -------
    EngineSettings
        Frozen settings object.

    Raises
    ------
    InvalidGroup
        If the configured group is not in the catalog.
    ValueError
        If the digest is unknown or a size is below its minimum.
    """
    if config is None:
        config = load_base_config()
    engine = dict(config.get("engine") or {})
    if "group" in engine:
        engine["group"] = str(engine["group"])
    unknown = set(engine) - set(EngineSettings.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown engine settings: {sorted(unknown)}")
    return EngineSettings(**engine)


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries.

    Parameters
    ----------
    base : Dict
        Base dictionary.
    override : Dict
        Override dictionary (values take precedence).

    Returns
    -------
    Dict
        Merged dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


__all__ = [
    "EngineSettings",
    "engine_settings",
    "load_base_config",
    "load_scenario",
    "list_scenarios",
    "available_groups",
    "CONFIGS_DIR",
    "SCENARIOS_DIR",
]
