import binascii
import os
import time
from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = ["ObjectKind", "GitObject", "TreeEntry", "Signature"]

DEFAULT_IDENTITIES = {
    "author": ("Author Name", "author@email.com"),
    "committer": ("Committer Name", "committer@email.com"),
}


class ObjectKind(StrEnum):
    BLOB = auto()
    TREE = auto()
    COMMIT = auto()

    @classmethod
    def from_mode(cls, mode: str) -> "ObjectKind":
        match mode:
            case "40000" | "040000":
                return cls.TREE
            case "160000":
                return cls.COMMIT
            case _:
                return cls.BLOB


@dataclass(frozen=True, kw_only=True)
class GitObject:
    kind: ObjectKind
    body: bytes

    @property
    def header(self) -> bytes:
        return f"{self.kind} {len(self.body)}".encode()


@dataclass(frozen=True, kw_only=True)
class TreeEntry:
    mode: str
    name: str
    raw_hash: bytes

    @property
    def hash(self):
        return binascii.hexlify(self.raw_hash).decode()

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.from_mode(self.mode)

    @property
    def encoded_name(self) -> bytes:
        # Names come from the filesystem, so undecodable bytes must survive.
        return self.name.encode("utf-8", "surrogateescape")


@dataclass(frozen=True, kw_only=True)
class Signature:
    name: str
    email: str
    timestamp: int
    timezone: str

    def __str__(self):
        return f"{self.name} <{self.email}> {self.timestamp} {self.timezone}"

    @classmethod
    def parse(cls, text: str) -> "Signature":
        """Parse ``Name <email> 1719851420 +0300``."""
        ident, _, when = text.rpartition(">")
        name, _, email = ident.partition("<")
        timestamp, _, timezone = when.strip().partition(" ")
        return cls(
            name=name.strip(),
            email=email,
            timestamp=int(timestamp),
            timezone=timezone,
        )

    @classmethod
    def now(cls, name: str, email: str) -> "Signature":
        timestamp = int(time.time())
        offset = time.localtime(timestamp).tm_gmtoff // 60
        sign = "-" if offset < 0 else "+"
        hours, minutes = divmod(abs(offset), 60)
        return cls(
            name=name,
            email=email,
            timestamp=timestamp,
            timezone=f"{sign}{hours:02d}{minutes:02d}",
        )

    @classmethod
    def from_env(cls, role: str, environ=None) -> "Signature":
        """Build a signature from ``GIT_<ROLE>_NAME``/``_EMAIL``/``_DATE``."""
        environ = os.environ if environ is None else environ
        prefix = f"GIT_{role.upper()}_"
        default_name, default_email = DEFAULT_IDENTITIES[role]
        name = environ.get(prefix + "NAME", default_name)
        email = environ.get(prefix + "EMAIL", default_email)
        if date := environ.get(prefix + "DATE"):
            timestamp, _, timezone = date.partition(" ")
            return cls(
                name=name,
                email=email,
                timestamp=int(timestamp),
                timezone=timezone or "+0000",
            )
        return cls.now(name, email)
