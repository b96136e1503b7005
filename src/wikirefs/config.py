"""Configuration management for wikirefs.

Site configuration lives in ``_config.yml`` at the site root. Reference
handling is configured under its ``wikirefs:`` key; the remaining keys
(``permalink``, ``collections``) belong to the host site and are read only
so documents can be loaded and given urls.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

CONFIG_FILENAME = "_config.yml"

# Default class names; stylesheets and downstream tests match on these.
WIKI_LINK_CLASS = "wiki-link"
TYPED_LINK_CLASS = "typed"
INVALID_LINK_CLASS = "invalid-wiki-link"


class ConfigurationError(Exception):
    """Raised when the site configuration is missing or invalid."""

    pass


class CssConfig(BaseModel):
    """Class names used on rendered reference fragments."""

    wiki: str = WIKI_LINK_CLASS
    typed: str = TYPED_LINK_CLASS
    invalid: str = INVALID_LINK_CLASS


class WikiRefsConfig(BaseModel):
    """The ``wikirefs:`` section of the site configuration."""

    enabled: bool = True
    exclude: list[str] = Field(default_factory=list)  # Collections neither scanned nor indexed
    attributes: bool = True  # Detect whole-line attribute references
    downcase_titles: bool = True  # Lower-case titles used as link text
    css: CssConfig = Field(default_factory=CssConfig)

    def is_eligible(self, collection: str) -> bool:
        return collection not in self.exclude


class CollectionConfig(BaseModel):
    """Per-collection host settings."""

    output: bool = False


class SiteConfig(BaseModel):
    """Host site configuration, as read from ``_config.yml``."""

    permalink: str = "date"
    collections: dict[str, CollectionConfig] = Field(default_factory=dict)
    wikirefs: WikiRefsConfig = Field(default_factory=WikiRefsConfig)

    @property
    def pretty_urls(self) -> bool:
        return self.permalink == "pretty"


def load_site_config(site_root: Path) -> SiteConfig:
    """Load and validate ``_config.yml`` from a site root.

    A missing file yields the defaults.

    Args:
        site_root: Directory holding ``_config.yml`` and the ``_<collection>`` dirs.

    Returns:
        Validated SiteConfig.

    Raises:
        ConfigurationError: If the file cannot be read, is not YAML, or fails validation.
    """
    config_path = site_root / CONFIG_FILENAME
    if not config_path.exists():
        return SiteConfig()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"{config_path}: failed to read configuration: {e}") from e

    if raw is None:
        return SiteConfig()
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_path}: expected a mapping at the top level")

    # `collections: [a, b]` is shorthand for collections without output
    collections = raw.get("collections")
    if isinstance(collections, list):
        raw["collections"] = {name: {} for name in collections}
    elif isinstance(collections, dict):
        raw["collections"] = {name: value or {} for name, value in collections.items()}

    try:
        return SiteConfig.model_validate(raw)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ConfigurationError(f"{config_path}: invalid configuration:\n" + "\n".join(errors)) from e
