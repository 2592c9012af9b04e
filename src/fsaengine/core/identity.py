import hashlib
from enum import Enum
from typing import Any

import srsly

from fsaengine.core.graph import canonical_sort_key


def automaton_id_from_spec(kind: str, spec: dict[Any, Any]) -> str:
    canonical = srsly.json_dumps(_canonicalize_for_hash(spec), sort_keys=True)
    hash_bytes = hashlib.sha256(canonical.encode()).digest()[:8]
    return f"{kind}_{hash_bytes.hex()}"


def _canonicalize_for_hash(value: Any) -> Any:
    """Convert values into a deterministic JSON-serializable form.

    Declaration lists are order-insensitive for an automaton, so lists are
    hashed as sorted multisets. Tuples keep their order since they are
    commonly used as composite state labels.
    """
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, dict):
        canonical_items = [
            (_canonicalize_for_hash(k), _canonicalize_for_hash(v))
            for k, v in value.items()
        ]
        canonical_items.sort(
            key=lambda item: srsly.json_dumps(item[0], sort_keys=True)
        )
        if all(isinstance(key, str) for key, _ in canonical_items):
            return {key: item for key, item in canonical_items}
        return {
            "__dict_items__": [
                [key, item] for key, item in canonical_items
            ]
        }
    if isinstance(value, tuple):
        return {
            "__tuple__": [_canonicalize_for_hash(v) for v in value]
        }
    if isinstance(value, (list, set, frozenset)):
        items = [_canonicalize_for_hash(v) for v in value]
        return {
            "__multiset__": sorted(
                items, key=lambda item: srsly.json_dumps(item, sort_keys=True)
            )
        }
    if isinstance(value, (str, int, float, bool)) or value is None:
        return {"__scalar__": [type(value).__name__, value]}
    return {"__repr__": list(canonical_sort_key(value))}
