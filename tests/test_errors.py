import pytest

from mygit.errors import (
    CorruptObjectError,
    GitError,
    NotATreeError,
    NotFoundError,
    RepositoryExistsError,
)


@pytest.mark.parametrize(
    "error_class",
    [NotFoundError, CorruptObjectError, NotATreeError, RepositoryExistsError],
)
def test_errors_share_base_and_describe_themselves(error_class):
    assert issubclass(error_class, GitError)
    assert error_class.__doc__


def test_not_a_tree_is_value_error():
    assert issubclass(NotATreeError, ValueError)
