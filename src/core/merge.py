"""
Merging of a stored entity with freshly prepared attributes.
"""

from typing import Any, Iterable, Mapping

from .keys import MemberNames

# Fields that identify a stored entity and are never taken from the row
IDENTITY_FIELDS = (MemberNames.ENTITY_ID, MemberNames.SKU)


def merge_entity(
    loaded: Mapping[str, Any],
    attributes: Mapping[str, Any],
    preserve: Iterable[str] = IDENTITY_FIELDS,
) -> dict[str, Any]:
    """
    Merge freshly prepared attributes into a loaded entity.

    Every field present in ``attributes`` overwrites the loaded value;
    fields only present in ``loaded`` are kept. Identity fields listed in
    ``preserve`` keep the loaded value when the loaded entity has one.
    Neither input is modified.

    Args:
        loaded: The entity as it was loaded from storage
        attributes: The attributes prepared from the current row
        preserve: Fields whose loaded value always wins

    Returns:
        A new dictionary with the merged entity
    """
    merged = {**loaded, **attributes}

    for field_name in preserve:
        if loaded.get(field_name) is not None:
            merged[field_name] = loaded[field_name]

    return merged
