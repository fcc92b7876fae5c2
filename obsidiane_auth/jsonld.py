"""
JSON-LD envelopes returned by the API Platform resources.

Collections carry their rows under ``member`` (current API Platform) or
``items`` (older deployments); both shapes are accepted, ``member`` first.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union


JsonLdType = Union[str, List[str], None]

RESERVED_KEYS = ("@id", "@type", "@context")
ROW_KEYS = ("member", "items")


def _coerce_type(value: Any) -> JsonLdType:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(entry) for entry in value]
    return str(value)


def _coerce_context(value: Any) -> Optional[Dict[str, Any]]:
    return dict(value) if isinstance(value, Mapping) else None


def _coerce_total(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        if isinstance(value, (int, float)):
            return int(value)
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


@dataclass
class Item:
    """A single JSON-LD resource: metadata plus its remaining attributes."""

    id: Optional[str]
    type: JsonLdType
    attributes: Dict[str, Any] = field(default_factory=dict)
    context: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """Split the reserved ``@`` keys off a resource mapping."""
        raw_id = data.get("@id")
        attributes = {key: value for key, value in data.items() if key not in RESERVED_KEYS}
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            type=_coerce_type(data.get("@type")),
            attributes=attributes,
            context=_coerce_context(data.get("@context")),
        )

    def data(self) -> Dict[str, Any]:
        return self.attributes

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)


@dataclass
class Collection:
    """
    A JSON-LD collection.

    ``total_items`` stays None when the server did not send ``totalItems``,
    so an unknown total is distinguishable from an empty collection.
    """

    items: List[Item] = field(default_factory=list)
    id: Optional[str] = None
    type: JsonLdType = None
    total_items: Optional[int] = None
    context: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Collection":
        """Build a collection from a ``member``- or ``items``-keyed payload."""
        raw_id = data.get("@id")
        rows: List[Any] = []
        for key in ROW_KEYS:
            value = data.get(key)
            if isinstance(value, list):
                rows = value
                break

        return cls(
            items=[Item.from_dict(row) for row in rows if isinstance(row, Mapping)],
            id=str(raw_id) if raw_id is not None else None,
            type=_coerce_type(data.get("@type")),
            total_items=_coerce_total(data.get("totalItems")),
            context=_coerce_context(data.get("@context")),
        )

    def all(self) -> List[Item]:
        return self.items

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)
