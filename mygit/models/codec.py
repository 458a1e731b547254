"""Framing, hashing and compression of loose objects.

A framed object is ``b"<kind> <len>\\0" + payload``; its SHA-1 is the object's
identity and its zlib stream is what lands on disk.
"""
import hashlib
import zlib

from mygit.errors import CorruptObjectError
from mygit.models.objects import GitObject, ObjectKind

__all__ = [
    "NULL_BYTE",
    "frame",
    "unframe",
    "compress",
    "decompress",
    "create_hash",
    "hash_object_bytes",
]

NULL_BYTE = b"\x00"
SPACE = b" "


def frame(kind: ObjectKind | str, payload: bytes) -> bytes:
    kind = ObjectKind(kind)
    return f"{kind} {len(payload)}".encode() + NULL_BYTE + payload


def unframe(data: bytes) -> GitObject:
    space = data.find(SPACE)
    if space == -1:
        raise CorruptObjectError("Object header has no kind terminator")
    nul = data.find(NULL_BYTE, space + 1)
    if nul == -1:
        raise CorruptObjectError("Object header has no length terminator")

    raw_kind, raw_length = data[:space], data[space + 1 : nul]
    try:
        kind = ObjectKind(raw_kind.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise CorruptObjectError(f"Unknown object kind: {raw_kind!r}") from None
    if not raw_length.isdigit():
        raise CorruptObjectError(f"Invalid object length: {raw_length!r}")

    body = data[nul + 1 :]
    if int(raw_length) != len(body):
        raise CorruptObjectError(
            f"Object length mismatch: header says {int(raw_length)}, "
            f"found {len(body)} bytes"
        )
    return GitObject(kind=kind, body=body)


def compress(data: bytes, *, compressor=zlib.compress) -> bytes:
    return compressor(data)


def decompress(data: bytes, *, decompressor=zlib.decompress) -> bytes:
    try:
        return decompressor(data)
    except zlib.error as exc:
        raise CorruptObjectError(f"Cannot decompress object: {exc}") from exc


def create_hash(data: str | bytes, *, hasher=hashlib.sha1) -> str:
    if isinstance(data, str):
        data = data.encode()
    hash_object = hasher(data)
    hash_value = hash_object.hexdigest()
    return hash_value


def hash_object_bytes(kind: ObjectKind | str, payload: bytes) -> str:
    """Identity of ``payload`` as an object of ``kind``, without storing it."""
    return create_hash(frame(kind, payload))
