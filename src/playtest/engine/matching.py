"""
matching.py

PURPOSE: Resolve a player's reference ("small key", "KEY") to a candidate id.
DEPENDENCIES: None

ARCHITECTURE NOTES:
Every verb that names something (examine, take, use) goes through
resolve_reference(). Candidates map an id to the display names that may
refer to it. Matching order:
1. Exact id
2. Case-insensitive display name (name or alias)
3. Case-insensitive id
First match wins; candidate order breaks ties.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence

from playtest.models.adventure import Item


def resolve_reference(text: str, candidates: Mapping[str, Sequence[str]]) -> str | None:
    """
    Resolve a reference against candidate ids and their names.

    Args:
        text: What the player typed
        candidates: id -> names that also refer to it

    Returns:
        The matched id, or None
    """
    if text in candidates:
        return text

    needle = text.strip().lower()
    if not needle:
        return None

    for candidate_id, names in candidates.items():
        if any(name.lower() == needle for name in names):
            return candidate_id

    for candidate_id in candidates:
        if candidate_id.lower() == needle:
            return candidate_id

    return None


def item_candidates(
    item_ids: Iterable[str],
    get_item: Callable[[str], Item | None],
) -> dict[str, list[str]]:
    """
    Build candidates for item ids, in priority order.

    Ids without a template are skipped.
    """
    candidates: dict[str, list[str]] = {}
    for item_id in item_ids:
        item = get_item(item_id)
        if item is not None:
            candidates[item_id] = [item.name, *item.aliases]
    return candidates
