"""Record types shared by the curation stages."""

import datetime as dt
import typing as t
from dataclasses import dataclass

from pydantic import Field, TypeAdapter, ValidationError


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Asset:
    id: str
    pixel_width: t.Annotated[int, Field(gt=0)]
    pixel_height: t.Annotated[int, Field(gt=0)]
    creation_date: t.Optional[dt.datetime] = None
    modification_date: t.Optional[dt.datetime] = None
    # Only read by the display layer (reverse geocoding).
    location: t.Optional[Location] = None


# One landscape asset, or two portrait assets shown side by side.
AssetGroup = t.List[Asset]


def is_landscape(asset: Asset) -> bool:
    return asset.pixel_width > asset.pixel_height


def is_portrait(asset: Asset) -> bool:
    return asset.pixel_width <= asset.pixel_height


_MANIFEST_ADAPTER = TypeAdapter(t.List[Asset])


def parse_manifest(raw: t.Any) -> t.List[Asset]:
    """Validate a decoded JSON manifest into ``Asset`` records.

    Raises ``ValueError`` with the first validation problem on malformed input.
    """
    try:
        return _MANIFEST_ADAPTER.validate_python(raw)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        loc = list(first.get("loc", ()))
        raise ValueError(f"Manifest validation error: {first.get('msg', str(e))} at {loc}") from e
