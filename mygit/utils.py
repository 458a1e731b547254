import contextlib
import logging
import os
import pathlib
from argparse import ArgumentParser

from rich.logging import RichHandler


def get_parser():
    parser = ArgumentParser(prog="mygit")
    parser.add_argument("-C", dest="work_dir", type=pathlib.Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init
    _init_parser = subparsers.add_parser("init")

    # cat-file
    cat_file_parser = subparsers.add_parser("cat-file")
    cat_file_group = cat_file_parser.add_mutually_exclusive_group(required=True)
    cat_file_group.add_argument(
        "-p", "--pretty-print", action="store_true", help="pretty print"
    )
    cat_file_group.add_argument(
        "-t", dest="show_type", action="store_true", help="show object type"
    )
    cat_file_group.add_argument(
        "-s", dest="show_size", action="store_true", help="show object size"
    )
    cat_file_parser.add_argument(
        "hash",
    )

    # hash_object
    hash_object_parser = subparsers.add_parser("hash-object")
    hash_object_parser.add_argument("path", type=pathlib.Path)
    hash_object_parser.add_argument("-w", "--write", action="store_true")

    # ls-tree
    ls_tree_parser = subparsers.add_parser("ls-tree")
    ls_tree_parser.add_argument("--name-only", action="store_true")
    ls_tree_parser.add_argument("hash_value")

    # write-tree
    _write_tree_parser = subparsers.add_parser("write-tree")

    # commit-tree
    commit_tree_parser = subparsers.add_parser("commit-tree")
    commit_tree_parser.add_argument("tree_hash")
    commit_tree_parser.add_argument(
        "-p", dest="parents", action="append", default=[], metavar="PARENT"
    )
    commit_tree_parser.add_argument("-m", dest="message", default="Initial commit")

    return parser


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging for the command line."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def git_dir_from_env(environ=None) -> pathlib.Path | None:
    environ = os.environ if environ is None else environ
    if git_dir := environ.get("GIT_DIR"):
        return pathlib.Path(git_dir)
    return None


@contextlib.contextmanager
def chdir(path):
    old_path = os.getcwd()
    os.chdir(path)
    try:
        yield
    finally:
        os.chdir(old_path)
