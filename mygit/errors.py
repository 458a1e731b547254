__all__ = [
    "GitError",
    "NotFoundError",
    "CorruptObjectError",
    "NotATreeError",
    "RepositoryExistsError",
]


class GitError(Exception):
    """Base class for every error raised by mygit."""


class NotFoundError(GitError):
    """No object file exists for the requested hash."""


class CorruptObjectError(GitError):
    """The stored bytes could not be decompressed or parsed."""


class NotATreeError(GitError, ValueError):
    """A tree was expected but the object has another kind."""


class RepositoryExistsError(GitError):
    """The repository directory is already present."""
