# snapshare/db/mongodb_helpers.py
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from bson import ObjectId
from bson.errors import InvalidId
import logging

logger = logging.getLogger(__name__)

def ensure_object_id(id_value: Union[str, ObjectId, None]) -> Optional[ObjectId]:
    """
    Parse a user id coming from a path, body or token.

    Any 24-hex spelling of an id parses to the same ObjectId. Returns None
    for empty or malformed values so callers can answer "not found" instead
    of erroring.
    """
    if isinstance(id_value, ObjectId):
        return id_value
    if not id_value:
        return None
    try:
        return ObjectId(id_value)
    except (InvalidId, TypeError) as e:
        logger.debug(f"Rejected user id {id_value!r}: {e}")
        return None

def stringify_object_id(doc: Dict[str, Any], id_fields: Tuple[str, ...] = ("_id",)) -> Dict[str, Any]:
    """Shallow copy of `doc` with the ObjectIds under `id_fields` as hex strings."""
    converted = dict(doc)
    for field in id_fields:
        if isinstance(converted.get(field), ObjectId):
            converted[field] = str(converted[field])
    return converted

def stringify_object_ids(
    docs: Iterable[Dict[str, Any]],
    id_fields: Tuple[str, ...] = ("_id",)
) -> List[Dict[str, Any]]:
    return [stringify_object_id(doc, id_fields) for doc in docs]
