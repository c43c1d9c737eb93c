"""
Blob provenance: where did the content of each file first appear?

For every path in the tree of a reference revision, ``find_origin`` reports the
earliest commit (oldest first over ``git rev-list --all``) whose tree stores
the exact same blob at that path.

The walk visits every commit in order, listing one tree per commit, and never
stops early: an origin, once recorded, is never replaced, so content that
disappears and comes back later is still attributed to its first appearance.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from gitkit.exceptions import ProvenanceFrozenError
from gitkit.git.commands import get_blob_table, get_file_track
from gitkit.git.parsing import BlobRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Origin:
    """A commit and its position in the oldest-first walk (0 = oldest)."""

    commit: str
    index: int


@dataclass(frozen=True)
class ProvenanceEntry:
    reference_hash: str
    origin: Optional[Origin] = None


class ProvenanceMap(Mapping[str, ProvenanceEntry]):
    """
    Mapping of path -> ProvenanceEntry.

    Origins are write-once, and the whole map rejects writes after ``freeze``.
    """

    def __init__(self, records: Iterable[BlobRecord]):
        self._entries: Dict[str, ProvenanceEntry] = {
            record.path: ProvenanceEntry(record.content_hash) for record in records
        }
        self._frozen = False

    def __getitem__(self, path: str) -> ProvenanceEntry:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ProvenanceMap({self._entries!r})"

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def record(self, path: str, content_hash: str, origin: Origin) -> bool:
        """
        Record ``origin`` for ``path`` if it is still unset and the hash matches.

        Returns:
            True if the origin was recorded

        Raises:
            ProvenanceFrozenError: If the map is frozen
        """
        if self._frozen:
            raise ProvenanceFrozenError(path)
        entry = self._entries.get(path)
        if entry is None or entry.origin is not None:
            return False
        if entry.reference_hash != content_hash:
            return False
        self._entries[path] = ProvenanceEntry(entry.reference_hash, origin)
        return True

    def unresolved(self) -> List[str]:
        return [path for path, entry in self._entries.items() if entry.origin is None]

    def to_dict(self) -> dict:
        """Plain-data form: {path: {"blob": hash, "origin": [commit, index] | None}}"""
        return {
            path: {
                "blob": entry.reference_hash,
                "origin": (
                    [entry.origin.commit, entry.origin.index] if entry.origin else None
                ),
            }
            for path, entry in self._entries.items()
        }


def find_origin(cwd: Path, reference: str) -> ProvenanceMap:
    """
    Find, for each path at ``reference``, the earliest commit holding its blob.

    Args:
        cwd: Working copy
        reference: Revision whose tree is traced back

    Returns:
        A frozen ProvenanceMap; paths never matched keep ``origin=None``

    Raises:
        CommandError: If any listing fails; no partial map is returned
    """
    provenance = ProvenanceMap(get_blob_table(cwd, reference))

    # rev-list is newest first
    history = list(reversed(get_file_track(cwd)))
    logger.info(
        f"Tracing {len(provenance)} paths at {reference} through {len(history)} commits"
    )

    for index, commit in enumerate(history):
        for record in get_blob_table(cwd, commit):
            if provenance.record(record.path, record.content_hash, Origin(commit, index)):
                logger.debug(f"{record.path} first appears in {commit} (#{index})")

    provenance.freeze()

    unresolved = provenance.unresolved()
    if unresolved:
        logger.info(f"{len(unresolved)} paths have no matching commit in history")
    return provenance
