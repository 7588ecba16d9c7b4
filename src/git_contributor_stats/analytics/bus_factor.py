"""Single-owner file detection.

A file is at risk when exactly one identity has ever changed it. Ownership
is judged on the raw (pre-merge) contributor sets, while the owner's display
name and change count come from the merged accumulator that absorbed the
owning key.
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..models import BusFactorEntry, ContributorAccumulator


def find_single_owner_files(
    file_contributors: Mapping[str, set[str]],
    contributors: Mapping[str, ContributorAccumulator],
    key_map: Optional[Mapping[str, str]] = None,
) -> list[BusFactorEntry]:
    """Files touched by exactly one identity, most-changed first."""
    entries: list[BusFactorEntry] = []

    for filename, owners in file_contributors.items():
        if len(owners) != 1:
            continue
        (owner_key,) = owners
        merged_key = key_map.get(owner_key, owner_key) if key_map else owner_key
        owner = contributors.get(merged_key)

        if owner is None:
            entries.append(BusFactorEntry(file=filename, owner=owner_key, changes=0))
            continue

        stats = owner.files.get(filename)
        entries.append(
            BusFactorEntry(
                file=filename,
                owner=owner.name or owner_key,
                changes=stats.changes if stats is not None else 0,
            )
        )

    entries.sort(key=lambda entry: entry.changes, reverse=True)
    return entries
