"""Selection of collections by uid or name."""

from collections.abc import Iterable, Sequence

from postman_exporter.types import CollectionSummary


def filter_collections(
    collections: Sequence[CollectionSummary],
    ids: Iterable[str] = (),
    names: Iterable[str] = (),
) -> list[CollectionSummary]:
    """Select the collections matching any of the given uids or names.

    A collection is kept when its uid is one of ``ids`` OR its name contains
    one of ``names`` (case-insensitive). With no ids and no names every
    collection is kept. Input order is preserved.
    """
    wanted_ids = set(ids)
    wanted_names = [n.lower() for n in names]

    if not wanted_ids and not wanted_names:
        return list(collections)

    return [
        c
        for c in collections
        if c.uid in wanted_ids or any(n in c.name.lower() for n in wanted_names)
    ]
