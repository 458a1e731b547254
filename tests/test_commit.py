import pytest

from mygit.errors import CorruptObjectError
from mygit.models.commit import Commit, CommitWriter, parse_commit
from mygit.models.objects import ObjectKind, Signature
from mygit.models.store import ObjectStore

ROOT_TREE_HASH = "a9570f096b275f67d442c38538a9c06d409e0e93"
FIRST_COMMIT_HASH = "3477eed568501b1b4a4e24fe771271d38b37764d"
SECOND_COMMIT_HASH = "953d5cf32f7d2d07a2cf44e68060a28a91a03c72"

JANE = Signature(
    name="Jane Doe", email="jane@example.com", timestamp=1719851420, timezone="+0300"
)


@pytest.fixture
def writer(tmp_path):
    return CommitWriter(ObjectStore(tmp_path / ".git"))


class TestCommitWriter:
    def test_commit_without_parent(self, writer):
        hash_value = writer.create(ROOT_TREE_HASH, [], JANE, JANE, "Initial commit\n")
        assert hash_value == FIRST_COMMIT_HASH
        git_object = writer.store.get(hash_value)
        assert git_object.kind is ObjectKind.COMMIT
        assert git_object.body == (
            f"tree {ROOT_TREE_HASH}\n"
            "author Jane Doe <jane@example.com> 1719851420 +0300\n"
            "committer Jane Doe <jane@example.com> 1719851420 +0300\n"
            "\n"
            "Initial commit\n"
        ).encode()
        assert b"parent" not in git_object.body

    def test_commit_with_parent(self, writer):
        hash_value = writer.create(
            ROOT_TREE_HASH, [FIRST_COMMIT_HASH], JANE, JANE, "Second\n"
        )
        assert hash_value == SECOND_COMMIT_HASH
        lines = writer.store.get(hash_value).body.decode().splitlines()
        assert [line for line in lines if line.startswith("parent ")] == [
            f"parent {FIRST_COMMIT_HASH}"
        ]

    def test_message_is_verbatim(self, writer):
        message = "Subject\n\nBody line one\nBody line two"
        hash_value = writer.create(ROOT_TREE_HASH, [], JANE, JANE, message)
        assert writer.store.get(hash_value).body.endswith(b"\n\n" + message.encode())

    def test_rejects_invalid_hashes(self, writer):
        with pytest.raises(ValueError):
            writer.create("not-a-hash", [], JANE, JANE, "x")
        with pytest.raises(ValueError):
            writer.create(ROOT_TREE_HASH, [""], JANE, JANE, "x")


class TestParseCommit:
    def test_round_trip(self, writer):
        commit = Commit(
            tree=ROOT_TREE_HASH,
            parents=[FIRST_COMMIT_HASH],
            author=JANE,
            committer=JANE,
            message="Subject\n\nBody\n",
        )
        assert parse_commit(commit.serialize()) == commit

    @pytest.mark.parametrize(
        "payload",
        [
            b"tree abc\nauthor x <y> 1 +0000\n",
            b"author x <y> 1 +0000\ncommitter x <y> 1 +0000\n\nmsg",
            b"tree abc\nauthor x <y> soon +0000\ncommitter x <y> 1 +0000\n\nmsg",
        ],
    )
    def test_rejects_malformed(self, payload):
        with pytest.raises(CorruptObjectError):
            parse_commit(payload)


class TestSignature:
    def test_str(self):
        assert str(JANE) == "Jane Doe <jane@example.com> 1719851420 +0300"

    def test_parse(self):
        assert Signature.parse(str(JANE)) == JANE

    def test_from_env(self):
        environ = {
            "GIT_AUTHOR_NAME": "Jane Doe",
            "GIT_AUTHOR_EMAIL": "jane@example.com",
            "GIT_AUTHOR_DATE": "1719851420 +0300",
        }
        assert Signature.from_env("author", environ) == JANE

    def test_from_env_defaults(self):
        signature = Signature.from_env("committer", {})
        assert signature.name == "Committer Name"
        assert signature.email == "committer@email.com"
        assert signature.timezone[0] in "+-" and len(signature.timezone) == 5
