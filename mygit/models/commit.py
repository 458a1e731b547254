import logging
from dataclasses import dataclass, field
from typing import Sequence

from mygit.errors import CorruptObjectError
from mygit.models.objects import ObjectKind, Signature
from mygit.models.store import ObjectStore

__all__ = ["Commit", "CommitWriter", "parse_commit"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Commit:
    tree: str
    parents: list[str] = field(default_factory=list)
    author: Signature
    committer: Signature
    message: str

    def serialize(self) -> bytes:
        lines = [f"tree {self.tree}"]
        lines.extend(f"parent {parent}" for parent in self.parents)
        lines.append(f"author {self.author}")
        lines.append(f"committer {self.committer}")
        lines.append("")
        lines.append(self.message)
        return "\n".join(lines).encode()


def parse_commit(payload: bytes) -> Commit:
    header, sep, message = payload.decode("utf-8", "replace").partition("\n\n")
    if not sep:
        raise CorruptObjectError("Commit has no blank line before the message")
    fields = {"parent": []}
    for line in header.splitlines():
        key, _, value = line.partition(" ")
        if key == "parent":
            fields["parent"].append(value)
        else:
            fields[key] = value
    try:
        return Commit(
            tree=fields["tree"],
            parents=fields["parent"],
            author=Signature.parse(fields["author"]),
            committer=Signature.parse(fields["committer"]),
            message=message,
        )
    except (KeyError, ValueError) as exc:
        raise CorruptObjectError(f"Malformed commit header: {exc}") from exc


class CommitWriter:
    def __init__(self, store: ObjectStore):
        self.store = store

    def create(
        self,
        tree_hash: str,
        parents: Sequence[str],
        author: Signature,
        committer: Signature,
        message: str,
    ) -> str:
        for hash_value in (tree_hash, *parents):
            ObjectStore.validate_hash(hash_value)
        commit = Commit(
            tree=tree_hash,
            parents=list(parents),
            author=author,
            committer=committer,
            message=message,
        )
        hash_value = self.store.put(ObjectKind.COMMIT, commit.serialize())
        logger.debug("Commit %s on tree %s", hash_value, tree_hash)
        return hash_value
