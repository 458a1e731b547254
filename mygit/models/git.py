import pathlib
from os import PathLike
from typing import Sequence

from mygit.errors import NotATreeError, RepositoryExistsError
from mygit.models import codec
from mygit.models.commit import CommitWriter
from mygit.models.objects import GitObject, ObjectKind, Signature, TreeEntry
from mygit.models.store import ObjectStore
from mygit.models.tree import GIT_DIR_NAME, TreeBuilder, decode_tree

__all__ = ["Git"]

HEAD_CONTENT = "ref: refs/heads/main\n"


class Git:
    """Entry point to the object database of one repository.

    ``work_tree`` is the directory snapshotted by :meth:`build_tree`;
    ``git_dir`` is the store root and defaults to ``<work_tree>/.git``.
    """

    def __init__(self, work_tree: PathLike = ".", git_dir: PathLike | None = None):
        self.work_tree = pathlib.Path(work_tree)
        self.git_folder = (
            pathlib.Path(git_dir) if git_dir is not None else self.work_tree / GIT_DIR_NAME
        )
        self.objects_folder = self.git_folder / "objects"
        self.store = ObjectStore(self.git_folder)

    def init_repo(self):
        if self.git_folder.exists():
            raise RepositoryExistsError(
                f"Repository already exists: {self.git_folder}"
            )
        for _dir in [self.git_folder, self.objects_folder, self.git_folder / "refs"]:
            _dir.mkdir(parents=True, exist_ok=True)
        with (self.git_folder / "HEAD").open("w") as f:
            f.write(HEAD_CONTENT)
        return self.git_folder

    def put_blob(self, content: bytes) -> str:
        return self.store.put(ObjectKind.BLOB, content)

    def hash_object(self, path: pathlib.Path, *, write: bool = False) -> str:
        content = pathlib.Path(path).read_bytes()
        if write:
            return self.put_blob(content)
        return codec.hash_object_bytes(ObjectKind.BLOB, content)

    def get_object(self, hash_value: str) -> GitObject:
        return self.store.get(hash_value)

    def build_tree(self, working_directory: PathLike | None = None) -> str:
        builder = TreeBuilder(self.store)
        return builder.build(
            self.work_tree if working_directory is None else working_directory
        )

    def list_tree(self, hash_value: str) -> list[TreeEntry]:
        git_object = self.get_object(hash_value)
        if git_object.kind is not ObjectKind.TREE:
            raise NotATreeError(f"Not a tree object: {hash_value} is a {git_object.kind}")
        return list(decode_tree(git_object.body))

    def commit(
        self,
        tree_hash: str,
        parents: Sequence[str],
        message: str,
        *,
        author: Signature,
        committer: Signature | None = None,
    ) -> str:
        writer = CommitWriter(self.store)
        return writer.create(
            tree_hash, parents, author, committer or author, message
        )
