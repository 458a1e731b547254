import logging
import sys

from mygit.errors import GitError
from mygit.models import Git, ObjectKind, Signature
from mygit.models.tree import decode_tree
from mygit.utils import chdir, get_parser, git_dir_from_env, setup_logging

logger = logging.getLogger("mygit")


def format_tree_line(entry, *, name_only: bool = False) -> str:
    if name_only:
        return entry.name
    return f"{entry.mode:0>6} {entry.kind} {entry.hash}\t{entry.name}"


def cat_file(git: Git, args):
    git_object = git.get_object(args.hash)
    if args.show_type:
        print(git_object.kind)
    elif args.show_size:
        print(len(git_object.body))
    elif git_object.kind is ObjectKind.TREE:
        for entry in list(decode_tree(git_object.body)):
            print(format_tree_line(entry))
    else:
        sys.stdout.buffer.write(git_object.body)
        sys.stdout.flush()


def commit_tree(git: Git, args) -> str:
    message = args.message if args.message.endswith("\n") else args.message + "\n"
    return git.commit(
        args.tree_hash,
        args.parents,
        message,
        author=Signature.from_env("author"),
        committer=Signature.from_env("committer"),
    )


def run(git: Git, args):
    match args.command:
        case "init":
            path = git.init_repo()
            print(f"Initialized empty Git repository in {path.absolute()}")
        case "cat-file":
            cat_file(git, args)
        case "hash-object":
            print(git.hash_object(args.path, write=args.write))
        case "ls-tree":
            for entry in git.list_tree(args.hash_value):
                print(format_tree_line(entry, name_only=args.name_only))
        case "write-tree":
            print(git.build_tree())
        case "commit-tree":
            print(commit_tree(git, args))
        case _:
            raise RuntimeError(f"Unknown command #{args.command}")


def main(argv=None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    work_dir = args.work_dir if args.work_dir is not None else "."
    try:
        with chdir(work_dir):
            run(Git(".", git_dir=git_dir_from_env()), args)
    except (GitError, OSError, ValueError) as exc:
        logger.error("%s: %s", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
