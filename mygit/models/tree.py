"""Tree payload codec and the directory walker that produces tree objects.

A tree payload is a run of entries with no separator between them::

    <mode> <name>\\0<20 raw hash bytes><mode> <name>\\0<20 raw hash bytes>...

The hash bytes are binary and may contain NUL, spaces or digits, so the
decoder walks the buffer with a cursor and always consumes exactly
``HASH_SIZE`` bytes after a name instead of splitting on delimiters.
"""
import binascii
import logging
import os
import pathlib
import stat
from enum import Enum, auto
from os import PathLike
from typing import Iterable, Iterator

from mygit.errors import CorruptObjectError
from mygit.models.objects import ObjectKind, TreeEntry
from mygit.models.store import ObjectStore

__all__ = [
    "HASH_SIZE",
    "FileMode",
    "encode_tree",
    "decode_tree",
    "TreeBuilder",
]

logger = logging.getLogger(__name__)

HASH_SIZE = 20
GIT_DIR_NAME = ".git"


class FileMode:
    REGULAR = "100644"
    EXECUTABLE = "100755"
    SYMLINK = "120000"
    TREE = "40000"


class _State(Enum):
    READ_MODE = auto()
    READ_NAME = auto()
    READ_HASH = auto()
    DONE = auto()


def _sort_key(entry: TreeEntry) -> bytes:
    return entry.encoded_name


def _validate(entry: TreeEntry):
    if not entry.mode or any(c in entry.mode for c in " \0"):
        raise ValueError(f"Invalid mode {entry.mode!r} for {entry.name!r}")
    if not entry.name or any(c in entry.name for c in "/\0"):
        raise ValueError(f"Invalid tree entry name: {entry.name!r}")
    if len(entry.raw_hash) != HASH_SIZE:
        raise ValueError(f"Hash for {entry.name!r} is not {HASH_SIZE} bytes")


def encode_tree(entries: Iterable[TreeEntry]) -> bytes:
    """Serialize ``entries`` in canonical (byte-wise name) order."""
    chunks = []
    previous = None
    for entry in sorted(entries, key=_sort_key):
        _validate(entry)
        if entry.name == previous:
            raise ValueError(f"Duplicate tree entry: {entry.name!r}")
        previous = entry.name
        chunks.append(
            entry.mode.encode("ascii")
            + b" "
            + entry.encoded_name
            + b"\0"
            + entry.raw_hash
        )
    return b"".join(chunks)


def decode_tree(content: bytes) -> Iterator[TreeEntry]:
    state = _State.READ_MODE if content else _State.DONE
    cursor = 0
    mode = name = None
    while state is not _State.DONE:
        match state:
            case _State.READ_MODE:
                end = content.find(b" ", cursor)
                if end == -1:
                    raise CorruptObjectError(f"Tree entry at {cursor} has no mode")
                mode = content[cursor:end].decode("ascii", "replace")
                cursor, state = end + 1, _State.READ_NAME
            case _State.READ_NAME:
                end = content.find(b"\0", cursor)
                if end == -1:
                    raise CorruptObjectError(f"Tree entry at {cursor} has no name")
                name = content[cursor:end].decode("utf-8", "surrogateescape")
                cursor, state = end + 1, _State.READ_HASH
            case _State.READ_HASH:
                raw_hash = content[cursor : cursor + HASH_SIZE]
                if len(raw_hash) != HASH_SIZE:
                    raise CorruptObjectError(
                        f"Tree entry {name!r} is truncated: "
                        f"{len(raw_hash)} of {HASH_SIZE} hash bytes"
                    )
                yield TreeEntry(mode=mode, name=name, raw_hash=raw_hash)
                cursor += HASH_SIZE
                state = _State.READ_MODE if cursor < len(content) else _State.DONE


class TreeBuilder:
    """Writes a directory hierarchy into the store, children before parents."""

    def __init__(self, store: ObjectStore):
        self.store = store
        self.ignore_names = {GIT_DIR_NAME}
        self.store_root = store.git_folder.resolve()

    def _is_reserved(self, path: pathlib.Path) -> bool:
        if path.name in self.ignore_names:
            return True
        return not path.is_symlink() and path.resolve() == self.store_root

    def build(self, working_directory: PathLike = ".") -> str:
        dir_path = pathlib.Path(working_directory)
        entries = []
        for child in dir_path.iterdir():
            if self._is_reserved(child):
                continue
            if (entry := self._build_entry(child)) is not None:
                entries.append(entry)

        tree_hash = self.store.put(ObjectKind.TREE, encode_tree(entries))
        logger.debug("Tree %s for %s (%d entries)", tree_hash, dir_path, len(entries))
        return tree_hash

    def _build_entry(self, path: pathlib.Path) -> TreeEntry | None:
        st = path.lstat()
        if stat.S_ISLNK(st.st_mode):
            mode = FileMode.SYMLINK
            hash_value = self.store.put(
                ObjectKind.BLOB, os.fsencode(os.readlink(path))
            )
        elif stat.S_ISDIR(st.st_mode):
            mode = FileMode.TREE
            hash_value = self.build(path)
        elif stat.S_ISREG(st.st_mode):
            mode = FileMode.EXECUTABLE if st.st_mode & stat.S_IXUSR else FileMode.REGULAR
            hash_value = self.store.put(ObjectKind.BLOB, path.read_bytes())
        else:
            logger.debug("Skipping %s: unsupported file type", path)
            return None
        return TreeEntry(
            mode=mode, name=path.name, raw_hash=binascii.unhexlify(hash_value)
        )
