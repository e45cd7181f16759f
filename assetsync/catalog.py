"""
Asset catalog: which files each supported package publishes and where they go.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from assetsync.errors import ConfigurationError

DEFAULT_WEBROOT = "webroot"
ICON_FONT_PACKAGE = "twbs/bootstrap-icons"


class AssetGroup(BaseModel):
    """A set of files sharing a source and a destination directory."""

    model_config = ConfigDict(frozen=True)

    source_dir: str = Field(..., description="Source directory, relative to the project root")
    destination_dir: str = Field(..., description="Destination directory, relative to the webroot")
    files: Tuple[str, ...] = Field(default=(), description="File names to synchronize")

    @field_validator("source_dir")
    @classmethod
    def _check_source_dir(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("source_dir must name a directory")
        return value

    @field_validator("files")
    @classmethod
    def _drop_duplicate_files(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(value))


class PackageAssetSpec(BaseModel):
    """Asset groups published by one package, in declaration order."""

    model_config = ConfigDict(frozen=True)

    package_id: str
    groups: Dict[str, AssetGroup] = Field(default_factory=dict)


@runtime_checkable
class CatalogProvider(Protocol):
    """Lookups the sync engine needs from a catalog."""

    def get_groups(self, package_id: str) -> Optional[Dict[str, AssetGroup]]: ...

    def is_supported(self, package_id: str) -> bool: ...

    def list_supported(self) -> List[str]: ...

    def get_webroot_path(self) -> str: ...


class AssetCatalog(BaseModel):
    """Immutable table of supported packages keyed by package identifier."""

    model_config = ConfigDict(frozen=True)

    webroot: str = DEFAULT_WEBROOT
    packages: Dict[str, PackageAssetSpec] = Field(default_factory=dict)

    @field_validator("webroot")
    @classmethod
    def _check_webroot(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("webroot must name a directory")
        return value

    @model_validator(mode="before")
    @classmethod
    def _fill_package_ids(cls, data):
        # Allow package specs in files to omit package_id; the key names it.
        if isinstance(data, dict) and isinstance(data.get("packages"), dict):
            packages = {}
            for key, spec in data["packages"].items():
                if isinstance(spec, dict) and "package_id" not in spec:
                    spec = {**spec, "package_id": key}
                packages[key] = spec
            data = {**data, "packages": packages}
        return data

    @model_validator(mode="after")
    def _check_keys(self) -> "AssetCatalog":
        for key, spec in self.packages.items():
            if key != spec.package_id:
                raise ValueError(f"Catalog key '{key}' does not match package_id '{spec.package_id}'")
        return self

    @classmethod
    def from_specs(cls, specs: List[PackageAssetSpec], webroot: str = DEFAULT_WEBROOT) -> "AssetCatalog":
        """Build a catalog from package specs, keeping their order."""
        return cls(webroot=webroot, packages={spec.package_id: spec for spec in specs})

    @classmethod
    def from_file(cls, file_path: str | Path) -> "AssetCatalog":
        """
        Load a catalog from a JSON file.

        The file holds an object with an optional ``webroot`` and a
        ``packages`` object mapping package identifiers to ``{"groups": {...}}``.

        Args:
            file_path: Path to the JSON catalog

        Returns:
            AssetCatalog: The validated catalog

        Raises:
            ConfigurationError: If the file cannot be read or is not a valid catalog
        """
        file_path = Path(file_path)
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise ConfigurationError(f"Cannot read catalog file {file_path}: {error}")
        try:
            return cls.model_validate(data)
        except ValidationError as error:
            raise ConfigurationError(f"Invalid catalog file {file_path}: {error}")

    def get_package(self, package_id: str) -> Optional[PackageAssetSpec]:
        return self.packages.get(package_id)

    def get_groups(self, package_id: str) -> Optional[Dict[str, AssetGroup]]:
        """Return the asset groups of a package, or None if it is not supported."""
        spec = self.packages.get(package_id)
        return spec.groups if spec is not None else None

    def is_supported(self, package_id: str) -> bool:
        return package_id in self.packages

    def list_supported(self) -> List[str]:
        return list(self.packages)

    def get_webroot_path(self) -> str:
        return self.webroot

    def with_webroot(self, webroot: str) -> "AssetCatalog":
        """Return a copy of this catalog publishing under another webroot."""
        return self.model_copy(update={"webroot": webroot})


def default_catalog() -> AssetCatalog:
    """Catalog for Bootstrap, Bootstrap Icons and Popper installed under ``vendor/``."""
    return AssetCatalog.from_specs(
        [
            PackageAssetSpec(
                package_id="twbs/bootstrap",
                groups={
                    "css": AssetGroup(
                        source_dir="vendor/twbs/bootstrap/dist/css",
                        destination_dir="css",
                        files=("bootstrap.min.css", "bootstrap.min.css.map"),
                    ),
                    "js": AssetGroup(
                        source_dir="vendor/twbs/bootstrap/dist/js",
                        destination_dir="js",
                        files=("bootstrap.min.js", "bootstrap.min.js.map"),
                    ),
                },
            ),
            PackageAssetSpec(
                package_id=ICON_FONT_PACKAGE,
                groups={
                    "css": AssetGroup(
                        source_dir="vendor/twbs/bootstrap-icons/font",
                        destination_dir="css",
                        files=("bootstrap-icons.min.css",),
                    ),
                    "fonts": AssetGroup(
                        source_dir="vendor/twbs/bootstrap-icons/font/fonts",
                        destination_dir="fonts",
                        files=("bootstrap-icons.woff", "bootstrap-icons.woff2"),
                    ),
                },
            ),
            PackageAssetSpec(
                package_id="popperjs/core",
                groups={
                    "js": AssetGroup(
                        source_dir="vendor/popperjs/core/dist/umd",
                        destination_dir="js",
                        files=("popper.min.js",),
                    ),
                },
            ),
        ]
    )
