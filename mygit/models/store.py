"""Loose-object storage under ``<git_dir>/objects/<hh>/<38 hex>``."""
import logging
import os
import pathlib
import re
import tempfile
from os import PathLike

from mygit.errors import NotFoundError
from mygit.models import codec
from mygit.models.objects import GitObject, ObjectKind

__all__ = ["ObjectStore"]

logger = logging.getLogger(__name__)

HASH_PATTERN = re.compile(r"[0-9a-f]{40}")
OBJECT_FILE_MODE = 0o444


class ObjectStore:
    def __init__(self, git_dir: PathLike):
        self.git_folder = pathlib.Path(git_dir)
        self.objects_folder = self.git_folder / "objects"

    @staticmethod
    def validate_hash(hash_value: str) -> str:
        if not isinstance(hash_value, str) or not HASH_PATTERN.fullmatch(hash_value):
            raise ValueError(f"Not a valid object name: {hash_value!r}")
        return hash_value

    def path_for(self, hash_value: str) -> pathlib.Path:
        self.validate_hash(hash_value)
        return self.objects_folder / hash_value[:2] / hash_value[2:]

    def exists(self, hash_value: str) -> bool:
        try:
            return self.path_for(hash_value).is_file()
        except ValueError:
            return False

    def put(self, kind: ObjectKind | str, payload: bytes) -> str:
        data = codec.frame(kind, payload)
        hash_value = codec.create_hash(data)
        path = self.path_for(hash_value)
        if path.exists():
            logger.debug("Object %s already stored, skipped", hash_value)
            return hash_value

        path.parent.mkdir(parents=True, exist_ok=True)
        self._write_atomic(path, codec.compress(data))
        logger.debug("Stored %s %s (%d bytes)", kind, hash_value, len(payload))
        return hash_value

    @staticmethod
    def _write_atomic(path: pathlib.Path, data: bytes):
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, OBJECT_FILE_MODE)
            os.replace(tmp_name, path)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, hash_value: str) -> GitObject:
        path = self.path_for(hash_value)
        try:
            with path.open("rb") as f:
                compressed = f.read()
        except FileNotFoundError:
            raise NotFoundError(f"Object not found: {hash_value}") from None
        return codec.unframe(codec.decompress(compressed))
