# config_utils.py - YAML Configuration System for Coursecart
"""
Coursecart configuration utilities with YAML file support.

Configuration Resolution Order (highest to lowest priority):
1. Environment variables (COURSE_ID, COURSECART_FLAVOR, etc.)
2. coursecart.yaml in the course directory
3. ~/.coursecart/config.yaml (global defaults)

Usage:
    from coursecart.config_utils import get_config

    config = get_config(course_dir)
    print(config.course_id)
    print(config._sources)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from coursecart.errors import ConfigurationError
from coursecart.migrator import FLAVORS

log = logging.getLogger(__name__)

CONFIG_FILENAME = "coursecart.yaml"
TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CoursecartConfig:
    """Complete Coursecart configuration"""
    # Canvas course the links are migrated for; COURSE_ID placeholder when unset
    course_id: Optional[str] = None

    # Export settings
    flavor: str = "canvas"
    migrate_links: bool = False
    convert_documents: bool = False
    output: Optional[Path] = None

    # Paths (resolved at load time)
    course_root: Optional[Path] = None

    # Extra settings from config file
    extra: Dict[str, Any] = field(default_factory=dict)

    # Track where values came from (for debugging)
    _sources: Dict[str, str] = field(default_factory=dict)

    def output_path(self, default_name: str) -> Path:
        """Where the cartridge goes: configured output or <course_root>/<default_name>"""
        if self.output:
            path = Path(self.output).expanduser()
            if not path.is_absolute() and self.course_root:
                path = self.course_root / path
            return path
        return (self.course_root or Path.cwd()) / default_name


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


class ConfigLoader:
    """Load configuration from multiple sources"""

    KNOWN_KEYS = {"course_id", "flavor", "migrate_links", "convert_documents", "output"}

    ENV_VARS = {
        "course_id": "COURSE_ID",
        "flavor": "COURSECART_FLAVOR",
        "migrate_links": "COURSECART_MIGRATE_LINKS",
        "convert_documents": "COURSECART_CONVERT_DOCUMENTS",
        "output": "COURSECART_OUTPUT",
    }

    def __init__(self, course_dir: Optional[Path] = None):
        self.course_dir = Path(course_dir) if course_dir else Path.cwd()
        self.config = CoursecartConfig(course_root=self.course_dir)

    def load(self) -> CoursecartConfig:
        """Load configuration from all sources in priority order"""
        # Lowest priority first; later sources overwrite
        self._load_global_config()
        self._load_yaml_config()
        self._load_env_vars()
        return self.config

    def _load_global_config(self):
        """Load ~/.coursecart/config.yaml if it exists"""
        global_config = Path.home() / ".coursecart" / "config.yaml"
        if global_config.exists():
            self._load_yaml_file(global_config, "global")

    def _load_yaml_config(self):
        """Load coursecart.yaml from the course directory"""
        yaml_path = self.course_dir / CONFIG_FILENAME
        if yaml_path.exists():
            self._load_yaml_file(yaml_path, CONFIG_FILENAME)

    def _load_yaml_file(self, path: Path, source_name: str):
        """Load settings from a YAML file"""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            log.warning("Failed to parse %s: %s", path, e)
            return

        if not isinstance(data, dict):
            log.warning("Ignoring %s: expected a mapping at the top level", path)
            return

        for key, value in data.items():
            if key in self.KNOWN_KEYS:
                self._set(key, value, source_name)
            else:
                self.config.extra[key] = value

    def _load_env_vars(self):
        """Load from environment variables (highest priority)"""
        for key, env_name in self.ENV_VARS.items():
            value = os.environ.get(env_name)
            if value:
                self._set(key, value, f"env:{env_name}")

    def _set(self, key: str, value: Any, source: str):
        if key in ("migrate_links", "convert_documents"):
            value = _as_bool(value)
        elif key == "output":
            value = Path(str(value)).expanduser() if value else None
        elif key == "course_id":
            value = str(value) if value not in (None, "") else None
        elif key == "flavor":
            value = str(value).strip().lower()
        setattr(self.config, key, value)
        self.config._sources[key] = source


# ============================================================================
# Public API
# ============================================================================

def get_config(course_dir: Optional[Path] = None) -> CoursecartConfig:
    """
    Get complete Coursecart configuration.

    Args:
        course_dir: Course directory (defaults to cwd)

    Returns:
        CoursecartConfig with all settings resolved

    Raises:
        ConfigurationError: If the configured link flavor is unknown
    """
    config = ConfigLoader(course_dir).load()
    if config.flavor not in FLAVORS:
        raise ConfigurationError(
            message=f"Unknown link flavor: {config.flavor}",
            suggestion=(
                f"Supported flavors: {', '.join(sorted(FLAVORS))}\n\n"
                f"Set it in {CONFIG_FILENAME}:\n"
                "   flavor: canvas"
            ),
            context={
                "flavor": config.flavor,
                "source": config._sources.get("flavor", "default"),
            }
        )
    return config


def create_config_template(include_comments: bool = True) -> str:
    """
    Generate a coursecart.yaml template.

    Args:
        include_comments: Whether to include explanatory comments

    Returns:
        YAML string ready to write to file
    """
    if include_comments:
        return '''# Coursecart Configuration File

# Canvas course ID used when rewriting links (optional)
# Without it, migrated links carry a COURSE_ID placeholder.
# course_id: 12345

# Target platform for migrated links
flavor: canvas

# Rewrite relative page/file links to Canvas URLs
migrate_links: false

# Convert uploaded .docx documents into page content
convert_documents: false

# Where to write the cartridge (relative to this directory)
# output: build/course.imscc
'''
    else:
        return '''flavor: canvas
migrate_links: false
convert_documents: false
'''
