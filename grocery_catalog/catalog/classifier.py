"""
Catalog Node Classifier

Catalog documents carry no type tags: a mapping is a supermarket map only
because its keys are supermarket ids, and a product record only because it
has a name. This module makes that structural classification explicit so
the normalizer branches on a NodeKind instead of ad hoc type checks.
"""

import math
from collections.abc import Mapping
from enum import Enum
from numbers import Real
from typing import AbstractSet, Any, Optional

from ..common.constants import SUPERMARKET_IDS
from ..models import NetWeight, RawProductRecord

PRODUCT_NAME_KEY = "n"


class NodeKind(Enum):
    """Structural kind of a value inside a catalog document."""
    SUPERMARKET_MAP = "supermarket_map"
    GROUPING_LEVEL = "grouping_level"
    PRODUCT_RECORD = "product_record"
    UNRECOGNIZED = "unrecognized"


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def has_entry(level: Mapping, key: str) -> bool:
    """
    True if `level` holds a usable value under `key`.

    None, False, zero, NaN and "" count as absent. Any mapping or list,
    empty or not, counts as present, so an empty supermarket map still
    claims its sub-category.
    """
    if key not in level:
        return False
    value = level[key]
    if value is None or value is False or value == "":
        return False
    if isinstance(value, Real) and not isinstance(value, bool):
        return bool(value) and value == value
    return True


def classify_node(value: Any, supermarket_ids: AbstractSet[str] = SUPERMARKET_IDS) -> NodeKind:
    """
    Classify one level of a catalog document.

    A mapping whose keys intersect the supermarket id set is a supermarket
    map. Otherwise a mapping with a non-empty name field is a product
    record, and any other mapping is a grouping level. Non-mappings are
    unrecognized.

    Args:
        value: Any value from the document
        supermarket_ids: Known supermarket identifiers

    Returns:
        NodeKind for the value
    """
    if not is_mapping(value):
        return NodeKind.UNRECOGNIZED
    if any(key in supermarket_ids for key in value):
        return NodeKind.SUPERMARKET_MAP
    if value.get(PRODUCT_NAME_KEY):
        return NodeKind.PRODUCT_RECORD
    return NodeKind.GROUPING_LEVEL


def parse_net_weight(value: Any) -> Optional[NetWeight]:
    """
    Build a NetWeight from a raw "nw" mapping, or None if absent/malformed.

    A magnitude that is not a finite number (strings, booleans, NaN) is
    dropped so net weights always compare with each other. A non-string
    unit is dropped too.
    """
    if not is_mapping(value):
        return None

    magnitude = value.get("t")
    if isinstance(magnitude, bool) or not isinstance(magnitude, Real) or not math.isfinite(magnitude):
        magnitude = None
    unit = value.get("u")
    if not isinstance(unit, str):
        unit = None
    return NetWeight(t=magnitude, u=unit)


def parse_product_record(value: Any) -> Optional[RawProductRecord]:
    """
    Parse a product record, or return None for non-product noise.

    Args:
        value: Value found at a product position in a supermarket map

    Returns:
        RawProductRecord, or None if the value is not a mapping with a
        non-empty name
    """
    if not is_mapping(value) or not value.get(PRODUCT_NAME_KEY):
        return None

    return RawProductRecord(
        n=str(value[PRODUCT_NAME_KEY]),
        p=value.get("p"),
        q=value.get("q"),
        u=value.get("u"),
        ppuom=value.get("ppuom"),
        img=value.get("img"),
        nw=value.get("nw"),
    )
