"""Domain records shared by the lifecycle, the guard and the shell.

Asset url/handle pairs are a single ``AssetRef`` value so a half pair cannot
exist in memory. Rows coming back from storage are checked on the way in.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Final


class Table(str, Enum):
    PLANTS = "plants"
    FISH = "fish"
    CATEGORIES = "categories"
    USERS = "users"
    AUDIT_LOG = "audit_log"


class SpecimenKind(str, Enum):
    PLANT = "plant"
    FISH = "fish"

    @property
    def table(self) -> Table:
        return Table.PLANTS if self is SpecimenKind.PLANT else Table.FISH

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def view_page(self) -> str:
        """Frontend page rendering a single specimen of this kind."""
        return f"{self.label}View"


class _Unset:
    """Marker for a patch field the caller did not send."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


def clean_text(value: str | None) -> str | None:
    """Trim incoming text; blank strings become None."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


@dataclass(frozen=True)
class AssetRef:
    """Public URL of a stored asset plus the handle needed to destroy it."""
    url: str
    public_id: str


def _asset_pair(row: dict, url_key: str, handle_key: str) -> AssetRef | None:
    url, handle = row.get(url_key), row.get(handle_key)
    if url is None and handle is None:
        return None
    if url is None or handle is None:
        raise ValueError(
            f"row {row.get('id')} has {url_key}={url!r} but {handle_key}={handle!r}"
        )
    return AssetRef(url=url, public_id=handle)


@dataclass(frozen=True)
class Specimen:
    id: int
    kind: SpecimenKind
    name: str
    scientific_name: str | None = None
    category: str | None = None
    description: str | None = None
    image: AssetRef | None = None
    scan_code: AssetRef | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, kind: SpecimenKind, row: dict) -> "Specimen":
        return cls(
            id=row["id"],
            kind=kind,
            name=row["name"],
            scientific_name=row.get("scientific_name"),
            category=row.get("category"),
            description=row.get("description"),
            image=_asset_pair(row, "image_url", "image_public_id"),
            scan_code=_asset_pair(row, "qr_code_url", "qr_public_id"),
            updated_at=row.get("updated_at"),
        )

    def to_row(self) -> dict:
        """Flatten to the persisted specimen shape."""
        return {
            "id": self.id,
            "name": self.name,
            "scientific_name": self.scientific_name,
            "category": self.category,
            "description": self.description,
            **image_columns(self.image),
            **scan_code_columns(self.scan_code),
            "updated_at": self.updated_at,
        }


def image_columns(ref: AssetRef | None) -> dict:
    return {
        "image_url": ref.url if ref else None,
        "image_public_id": ref.public_id if ref else None,
    }


def scan_code_columns(ref: AssetRef | None) -> dict:
    return {
        "qr_code_url": ref.url if ref else None,
        "qr_public_id": ref.public_id if ref else None,
    }


@dataclass(frozen=True)
class SpecimenFields:
    """Text fields supplied when registering a specimen."""
    name: str
    scientific_name: str | None = None
    category: str | None = None
    description: str | None = None

    def normalized(self) -> "SpecimenFields":
        return SpecimenFields(
            name=(self.name or "").strip(),
            scientific_name=clean_text(self.scientific_name),
            category=clean_text(self.category),
            description=clean_text(self.description),
        )


@dataclass(frozen=True)
class SpecimenPatch:
    """Partial update. ``UNSET`` leaves the column alone, ``None`` clears it."""
    name: str | _Unset = UNSET
    scientific_name: str | None | _Unset = UNSET
    category: str | None | _Unset = UNSET
    description: str | None | _Unset = UNSET

    def changes(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is UNSET:
                continue
            if f.name == "name":
                result["name"] = (value or "").strip()
            else:
                result[f.name] = clean_text(value)
        return result


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    type: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Category":
        return cls(id=row["id"], name=row["name"], type=row.get("type"))


@dataclass(frozen=True)
class StagedImage:
    """An uploaded image written to local disk, waiting to go to the asset store."""
    path: Path
    content_type: str
    size: int
    filename: str | None = None


@dataclass(frozen=True)
class AdminIdentity:
    id: int
    email: str


@dataclass
class CreateOutcome:
    specimen: Specimen
    warning: str | None = None


def category_key(name: str) -> str:
    """Case-folded form of a category name; categories are unique by it."""
    return name.strip().casefold()
