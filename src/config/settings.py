# src/config/settings.py — v3
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for project paths, locales, build mode and the
ambient logging/cache options. Relative paths resolve against project_root.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Locale codes as they appear in template suffixes ("about.fr.html").
LOCALE_CODE_RE = re.compile(r"[a-z]{2}")


class ConfigurationError(Exception):
    """Raised when configuration is invalid; fatal before any output is written."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Source tree ===
    project_root: Path = Path(".")
    src_dir: Path = Path("src")
    pages_dir: Path = Path("src/pages")
    layouts_dir: Path = Path("src/layouts")
    partials_dir: Path = Path("src/partials")
    data_dir: Path = Path("src/data")
    public_dir: Path = Path("public")
    routes_file: Path = Path("routes.config.json")
    template_extension: str = ".html"

    # Asset source directories, relative to src_dir
    css_dir: str = "styles"
    js_dir: str = "assets/js"
    images_dir: str = "assets"
    image_extensions: str = "svg,png,jpg,jpeg,webp,gif"

    # === Output ===
    output_dir: Path = Path("dist")
    dev_output_dir: Path = Path(".tmp")
    manifest_file: str = "asset-manifest.json"
    clean_dev_output: bool = False

    # === Locales ===
    locales: str = "en,fr"
    default_locale: str = "en"
    site_url: str = "https://example.com"

    # === Build mode ===
    production: bool = False
    copy_public: bool = True
    link_rewrite: Literal["off", "safety-net"] = "safety-net"
    emit_sitemaps: bool = True
    emit_404s: bool = True
    emit_webmanifests: bool = True

    # === Asset pipeline ===
    fingerprint_length: int = 8
    image_quality: int = 85
    webp_quality: int = 75
    dev_webp: bool = False

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["json", "memory"] = "json"
    cache_file: str = ".asset-cache.json"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("template_extension")
    @classmethod
    def validate_template_extension(cls, v: str) -> str:  # noqa: N805
        """Template extension always carries its leading dot."""
        v = v.strip()
        if not v:
            raise ValueError("template_extension must not be empty")
        return v if v.startswith(".") else f".{v}"

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field locale and pipeline rules."""
        errors: list[str] = []

        invalid = [loc for loc in self.locales_list if not LOCALE_CODE_RE.fullmatch(loc)]
        if not self.locales_list:
            errors.append("LOCALES must contain at least one locale")
        elif invalid:
            errors.append(
                f"LOCALES must be two-letter lowercase codes, got {', '.join(invalid)}"
            )
        elif self.default_locale not in self.locales_list:
            errors.append(
                f"DEFAULT_LOCALE {self.default_locale!r} must be one of "
                f"LOCALES ({', '.join(self.locales_list)})"
            )

        if not 6 <= self.fingerprint_length <= 64:
            errors.append("FINGERPRINT_LENGTH must be between 6 and 64")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    def check_directories(self) -> None:
        """Fail fast when a required source directory is missing.

        Raises:
            ConfigurationError: Listing every missing directory.
        """
        required = {
            "SRC_DIR": self.resolve(self.src_dir),
            "PAGES_DIR": self.resolve(self.pages_dir),
            "LAYOUTS_DIR": self.resolve(self.layouts_dir),
            "PARTIALS_DIR": self.resolve(self.partials_dir),
            "DATA_DIR": self.resolve(self.data_dir),
        }
        missing = [
            f"{name}={path}" for name, path in required.items() if not path.is_dir()
        ]
        if missing:
            raise ConfigurationError(
                "Required directories do not exist: " + ", ".join(missing)
            )

    # --- Helpers ---

    def resolve(self, path: Path | str) -> Path:
        """Resolve a configured path against project_root."""
        p = Path(path).expanduser()
        if p.is_absolute():
            return p
        return Path(self.project_root).expanduser() / p

    @property
    def active_output_dir(self) -> Path:
        """Output root for the current mode."""
        return self.resolve(self.output_dir if self.production else self.dev_output_dir)

    @property
    def locales_list(self) -> list[str]:
        """Parse comma-separated locales."""
        return [loc.strip() for loc in self.locales.split(",") if loc.strip()]

    @property
    def image_extensions_list(self) -> list[str]:
        """Parse comma-separated image extensions (with leading dot, lowercase)."""
        return [
            f".{ext.strip().lower().lstrip('.')}"
            for ext in self.image_extensions.split(",")
            if ext.strip()
        ]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
