from mygit.models.git import Git
from mygit.models.objects import GitObject, ObjectKind, Signature, TreeEntry

__all__ = ["Git", "GitObject", "ObjectKind", "Signature", "TreeEntry"]
