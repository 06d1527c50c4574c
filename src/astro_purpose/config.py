"""Configuration management for astro-purpose-mcp."""

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional

from .constants import HOUSE_SYSTEM_NAMES, NODE_BODIES
from .utils.aspects import NATAL_ORBS, TRANSIT_ORBS


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the configuration handed to the calculation engines."""

    ephe_path: Optional[str] = None
    data_dir: Optional[str] = None
    house_system: str = "P"
    include_chiron: bool = False
    node_type: str = "true"
    table_start_year: int = 1900
    table_end_year: int = 2100
    orbs: Dict[str, float] = field(default_factory=lambda: dict(NATAL_ORBS))
    transit_orbs: Dict[str, float] = field(default_factory=lambda: dict(TRANSIT_ORBS))
    transit_limit: int = 20
    eclipse_max_attempts: int = 10
    eclipse_step_days: float = 180.0
    eclipse_fallback_days: int = 400
    log_level: str = "INFO"


class ConfigManager:
    """Manages configuration for astrological calculations."""

    # Default config location
    DEFAULT_CONFIG_DIR = Path.home() / ".config" / "astro-purpose"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

    # Default configuration
    DEFAULT_CONFIG = {
        "ephe_path": None,
        "data_dir": None,
        "house_system": "P",  # Placidus
        "include_chiron": False,
        "node_type": "true",
        "table_years": {
            "start": 1900,
            "end": 2100
        },
        "orbs": {},
        "transit_orbs": {},
        "transit_limit": 20,
        "eclipse": {
            "max_attempts": 10,
            "step_days": 180,
            "fallback_days": 400
        },
        "log_level": "INFO"
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            config_path: Optional custom config file path. Falls back to the
                ASTRO_PURPOSE_CONFIG environment variable, then the default
                location under ~/.config.
        """
        env_path = os.environ.get("ASTRO_PURPOSE_CONFIG")
        self.config_path = Path(config_path or env_path or self.DEFAULT_CONFIG_FILE)
        self.config = self._load_or_create()

    def _load_or_create(self) -> Dict[str, Any]:
        """Load existing config or create default."""
        if self.config_path.exists():
            return self._load()
        else:
            # Create directory if needed
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            # Save default config
            self._save(self.DEFAULT_CONFIG)
            return copy.deepcopy(self.DEFAULT_CONFIG)

    def _load(self) -> Dict[str, Any]:
        """Load config from file."""
        try:
            with open(self.config_path, 'r') as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ValueError(f"Failed to load config from {self.config_path}: {e}")
        if not isinstance(config, dict):
            raise ValueError(f"Failed to load config from {self.config_path}: not a JSON object")
        # Merge with defaults (in case new keys were added)
        merged = copy.deepcopy(self.DEFAULT_CONFIG)
        merged.update(config)
        return merged

    def _save(self, config: Dict[str, Any]) -> None:
        """Save config to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            raise ValueError(f"Failed to save config to {self.config_path}: {e}")

    def save(self) -> None:
        """Save current config to file."""
        self._save(self.config)

    # Ephemeris

    def get_ephe_path(self) -> Optional[str]:
        """Return the .se1 directory; SE_EPHE_PATH overrides the stored value."""
        return os.environ.get("SE_EPHE_PATH") or self.config.get("ephe_path") or None

    def set_ephe_path(self, path: Optional[str]) -> None:
        """
        Set the Swiss Ephemeris data directory.

        Args:
            path: Directory containing .se1 files, or None for Moshier mode
        """
        if path is not None and not Path(path).is_dir():
            raise ValueError(f"Ephemeris path does not exist: {path}")
        self.config["ephe_path"] = path
        self.save()

    # Reference data

    def get_data_dir(self) -> Path:
        """Directory holding the derived VSP / Mars-phase tables."""
        configured = self.config.get("data_dir")
        if configured:
            return Path(configured).expanduser()
        return self.config_path.parent / "data"

    # House system

    def get_house_system(self) -> str:
        """Get house system code (e.g., 'P' for Placidus)."""
        return self.config.get("house_system", "P")

    def set_house_system(self, system: str) -> None:
        """
        Set house system.

        Args:
            system: House system code (P=Placidus, K=Koch, W=Whole Sign, etc.)
        """
        valid_systems = sorted(HOUSE_SYSTEM_NAMES)
        if system not in valid_systems:
            raise ValueError(f"Invalid house system: {system}. Valid: {valid_systems}")

        self.config["house_system"] = system
        self.save()

    # Bodies

    def set_node_type(self, node_type: str) -> None:
        """Choose the lunar node: 'true' (osculating) or 'mean'."""
        if node_type not in NODE_BODIES:
            raise ValueError(f"Invalid node type: {node_type}. Valid: {sorted(NODE_BODIES)}")
        self.config["node_type"] = node_type
        self.save()

    def set_include_chiron(self, enabled: bool) -> None:
        """Chiron needs the seas_18.se1 asteroid file; off by default."""
        self.config["include_chiron"] = bool(enabled)
        self.save()

    # Orbs

    def set_orb(self, aspect: str, orb: float, transit: bool = False) -> None:
        """Override the orb of one aspect for natal (default) or transit scans."""
        known = TRANSIT_ORBS if transit else NATAL_ORBS
        if aspect not in known:
            raise ValueError(f"Unknown aspect: {aspect}. Valid: {list(known)}")
        if orb < 0:
            raise ValueError(f"Orb must be non-negative, got {orb}")
        key = "transit_orbs" if transit else "orbs"
        self.config.setdefault(key, {})[aspect] = orb
        self.save()

    # Snapshot

    def to_settings(self) -> Settings:
        """Freeze the current configuration into a Settings value."""
        years = {**self.DEFAULT_CONFIG["table_years"], **self.config.get("table_years", {})}
        eclipse = {**self.DEFAULT_CONFIG["eclipse"], **self.config.get("eclipse", {})}
        return Settings(
            ephe_path=self.get_ephe_path(),
            data_dir=str(self.get_data_dir()),
            house_system=self.get_house_system(),
            include_chiron=bool(self.config.get("include_chiron", False)),
            node_type=self.config.get("node_type", "true"),
            table_start_year=int(years["start"]),
            table_end_year=int(years["end"]),
            orbs={**NATAL_ORBS, **self.config.get("orbs", {})},
            transit_orbs={**TRANSIT_ORBS, **self.config.get("transit_orbs", {})},
            transit_limit=int(self.config.get("transit_limit", 20)),
            eclipse_max_attempts=int(eclipse["max_attempts"]),
            eclipse_step_days=float(eclipse["step_days"]),
            eclipse_fallback_days=int(eclipse["fallback_days"]),
            log_level=str(self.config.get("log_level", "INFO")).upper(),
        )

    def get_status(self) -> Dict[str, Any]:
        """Get configuration status for display."""
        return {
            "config_path": str(self.config_path),
            "ephe_path": self.get_ephe_path(),
            "data_dir": str(self.get_data_dir()),
            "house_system": self.get_house_system(),
            "include_chiron": self.config.get("include_chiron", False),
            "node_type": self.config.get("node_type", "true"),
        }
