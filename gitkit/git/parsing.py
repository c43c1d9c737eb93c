# Parsers for git plumbing output

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class TreeEntry:
    """One row of `git ls-tree`: mode, object type, object hash and path."""

    mode: str
    type: str
    content_hash: str
    path: str


@dataclass(frozen=True)
class BlobRecord:
    """Content identity of one path in one commit's tree."""

    path: str
    content_hash: str


def parse_tree_listing(output: str) -> List[TreeEntry]:
    """
    Parse `git ls-tree` output into tree entries.

    Records are separated by NUL (``-z``) or newlines; each record reads
    ``<mode> SP <type> SP <hash> TAB <path>``. Paths may contain spaces.
    """
    separator = "\0" if "\0" in output else "\n"
    entries = []
    for record in output.split(separator):
        if not record.strip():
            continue
        meta, _, path = record.partition("\t")
        fields = meta.split()
        if len(fields) != 3 or not path:
            raise ValueError(f"Malformed tree listing row: {record!r}")
        mode, object_type, content_hash = fields
        entries.append(TreeEntry(mode, object_type, content_hash, path))
    return entries


def parse_blob_records(output: str) -> List[BlobRecord]:
    return [
        BlobRecord(entry.path, entry.content_hash)
        for entry in parse_tree_listing(output)
    ]


def parse_commit_ids(output: str) -> List[str]:
    """Split a `git rev-list` listing into commit ids, preserving order."""
    return output.split()


@dataclass(frozen=True)
class DiffEntry:
    """One row of `git diff-tree -r`."""

    src_mode: str
    dst_mode: str
    src_hash: str
    dst_hash: str
    status: str
    path: str


def parse_diff_tree(output: str) -> List[DiffEntry]:
    """
    Parse `git diff-tree -r <commit>` output.

    The first line is the commit id itself and is skipped; the remaining
    rows read ``:<mode> <mode> <hash> <hash> <status> TAB <path>``.
    """
    entries = []
    for line in output.splitlines():
        if not line.startswith(":"):
            continue
        meta, _, path = line.partition("\t")
        fields = meta[1:].split()
        if len(fields) != 5:
            raise ValueError(f"Malformed diff-tree row: {line!r}")
        entries.append(DiffEntry(*fields, path=path))
    return entries
