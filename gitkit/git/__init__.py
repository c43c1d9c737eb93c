"""
Git operations for gitkit.

Layers, leaf first:
    runner      structured command execution (GitPython's ``Git.execute``)
    commands    typed git operations (clone, push, ls-tree, rev-list, ...)
    readiness   keep-or-reset decision for a local working copy
    update      two-tier update with branch rebuild fallback
    provenance  earliest commit holding each blob of a reference tree
"""

from .commands import (
    UNKNOWN_TYPE,
    Author,
    clone_repo,
    get_blob_content,
    get_blob_table,
    get_diff_table,
    get_file_track,
    get_git_version,
    get_hash_type,
    get_local_hash,
    get_merge_base,
    get_remote_hash,
    hash_object,
    make_commit,
    push_change,
    reset_repo,
)
from .provenance import Origin, ProvenanceEntry, ProvenanceMap, find_origin
from .readiness import (
    ReadinessReport,
    WorkingCopy,
    WorkingCopyState,
    check_ready,
    reset_working_copy,
)
from .runner import Command, ExecOptions, Step, execute, run_steps
from .update import UpdateOutcome, update_repo

__all__ = [
    # runner
    "Command",
    "ExecOptions",
    "Step",
    "execute",
    "run_steps",
    # commands
    "UNKNOWN_TYPE",
    "Author",
    "clone_repo",
    "get_blob_content",
    "get_blob_table",
    "get_diff_table",
    "get_file_track",
    "get_git_version",
    "get_hash_type",
    "get_local_hash",
    "get_merge_base",
    "get_remote_hash",
    "hash_object",
    "make_commit",
    "push_change",
    "reset_repo",
    # readiness
    "ReadinessReport",
    "WorkingCopy",
    "WorkingCopyState",
    "check_ready",
    "reset_working_copy",
    # update
    "UpdateOutcome",
    "update_repo",
    # provenance
    "Origin",
    "ProvenanceEntry",
    "ProvenanceMap",
    "find_origin",
]
