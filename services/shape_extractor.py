"""
Shape Extraction for Successful Upstream Payloads

Upstream variants disagree on where the relation array lives and on the name
of the handle field inside each entry. This module parses a successful
payload into a ParsedRelations variant, maps entries to handles, and pulls
the numeric identifier out of an identity-lookup payload.
"""
import logging
from typing import Any, List, Optional

from models.upstream import ParsedRelations, RelationShape
from utils.field_probe import identifier_at, list_at, probe, string_at, tagged

logger = logging.getLogger(__name__)

# First match wins
RELATION_ARRAY_EXTRACTORS = [
    tagged(RelationShape.ROOT_ARRAY, list_at()),
    tagged(RelationShape.DATA_ARRAY, list_at("data")),
    tagged(RelationShape.USERS_ARRAY, list_at("users")),
    tagged(RelationShape.DATA_USERS_ARRAY, list_at("data", "users")),
]

HANDLE_EXTRACTORS = [
    string_at("screen_name"),
    string_at("username"),
]

# id_str first: numeric ids above 2**53 lose precision in many JSON encoders
IDENTIFIER_EXTRACTORS = [
    identifier_at("data", "id_str"),
    identifier_at("id_str"),
    identifier_at("data", "id"),
    identifier_at("id"),
]


def parse_relations(payload: Any) -> ParsedRelations:
    """Locate the relation array in a successful relations payload."""
    match = probe(payload, RELATION_ARRAY_EXTRACTORS)
    if match is None:
        return ParsedRelations(shape=RelationShape.UNRECOGNIZED)
    shape, entries = match
    return ParsedRelations(shape=shape, entries=entries)


def extract_handle(entry: Any) -> Optional[str]:
    return probe(entry, HANDLE_EXTRACTORS)


def extract_handles(relations: ParsedRelations, context: str = "") -> List[str]:
    """
    Map relation entries to handles, preserving upstream order.

    Entries without a usable name field are dropped. No deduplication.
    """
    handles = [h for h in (extract_handle(entry) for entry in relations.entries) if h]

    if relations.entries and not handles:
        logger.warning(
            f"Relation array has {len(relations.entries)} entries but no handles "
            f"could be extracted (screen_name/username missing): "
            f"shape={relations.shape.value}, {context}"
        )
    elif not relations.entries:
        logger.info(f"Relation array is empty: shape={relations.shape.value}, {context}")
    else:
        logger.info(
            f"Extracted handles: count={len(handles)}, entries={len(relations.entries)}, "
            f"shape={relations.shape.value}, {context}"
        )

    return handles


def extract_identifier(payload: Any) -> Optional[str]:
    """Numeric identifier from an identity-lookup payload, as a string."""
    return probe(payload, IDENTIFIER_EXTRACTORS)
