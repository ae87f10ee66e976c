"""
core/asset_id.py - Asset identifiers

An AssetId names one file-like artifact tracked by the build graph:
the package that owns it plus a package-relative path.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

from ..errors.taxonomy import InvalidAssetIdError

SEPARATOR = "|"


@dataclass(frozen=True, order=True)
class AssetId:
    """Immutable, value-compared asset identifier."""
    package: str
    path: str

    def __post_init__(self):
        if not self.package:
            raise InvalidAssetIdError("Asset package must not be empty")
        if not self.path:
            raise InvalidAssetIdError(f"Asset path must not be empty (package={self.package})")
        if SEPARATOR in self.package:
            raise InvalidAssetIdError(
                f"Asset package may not contain '{SEPARATOR}': {self.package!r}"
            )

    @classmethod
    def parse(cls, serialized: str) -> "AssetId":
        """Parse the `package|path` form."""
        package, sep, path = serialized.partition(SEPARATOR)
        if not sep:
            raise InvalidAssetIdError(f"Malformed asset id: {serialized!r}")
        return cls(package=package, path=path)

    @property
    def extension(self) -> str:
        name = self.path.rsplit("/", 1)[-1]
        return "." + name.rsplit(".", 1)[-1] if "." in name else ""

    def __str__(self) -> str:
        return f"{self.package}{SEPARATOR}{self.path}"

    def to_dict(self) -> Dict[str, Any]:
        return {"package": self.package, "path": self.path}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetId":
        return cls(package=data["package"], path=data["path"])
