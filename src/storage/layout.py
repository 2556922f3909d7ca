# src/storage/layout.py — v2
"""Source and output tree layout.

Pages are locale-partitioned by their route paths; assets live in a shared,
non-partitioned subtree under the output root.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lingosite.cache.models import AssetKind
    from lingosite.config.settings import Settings


# Output subtree (relative to the output root) and matching public URLs
ASSETS_DIR = "assets"
STYLES_DIR = "assets/styles"
SCRIPTS_DIR = "assets/js"
IMAGES_DIR = "assets/images"

OUTPUT_DIRS: dict[str, str] = {
    "styles": STYLES_DIR,
    "scripts": SCRIPTS_DIR,
    "images": IMAGES_DIR,
}

# Public files never mirrored into the output root
PUBLIC_EXCLUDES = ("site.webmanifest",)


def public_url(output_rel: str) -> str:
    """Public URL of a file relative to the output root."""
    return "/" + output_rel.lstrip("/")


def output_dir_for(kind: AssetKind) -> str:
    """Output directory for a hashed asset class."""
    return OUTPUT_DIRS[kind]


@dataclass(frozen=True)
class SiteLayout:
    """Absolute paths for one build configuration."""

    project_root: Path
    src: Path
    pages: Path
    layouts: Path
    partials: Path
    data: Path
    public: Path
    routes_file: Path
    css_src: Path
    js_src: Path
    images_src: Path
    output: Path
    cache_file: Path
    manifest_file: Path
    template_extension: str

    @classmethod
    def from_settings(cls, settings: Settings) -> SiteLayout:
        src = settings.resolve(settings.src_dir)
        output = settings.active_output_dir
        return cls(
            project_root=Path(settings.project_root).expanduser(),
            src=src,
            pages=settings.resolve(settings.pages_dir),
            layouts=settings.resolve(settings.layouts_dir),
            partials=settings.resolve(settings.partials_dir),
            data=settings.resolve(settings.data_dir),
            public=settings.resolve(settings.public_dir),
            routes_file=settings.resolve(settings.routes_file),
            css_src=src / settings.css_dir,
            js_src=src / settings.js_dir,
            images_src=src / settings.images_dir,
            output=output,
            cache_file=output / settings.cache_file,
            manifest_file=output / settings.manifest_file,
            template_extension=settings.template_extension,
        )

    def source_key(self, path: Path) -> str:
        """Stable cache key for a source file: posix path relative to project root."""
        try:
            return Path(path).resolve().relative_to(self.project_root.resolve()).as_posix()
        except ValueError:
            return Path(path).resolve().as_posix()

    def contains(self, root: Path, path: Path) -> bool:
        """True if path lies inside root."""
        try:
            Path(path).resolve().relative_to(Path(root).resolve())
        except ValueError:
            return False
        return True
