"""A prefix tree of strings."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class _TrieNode:
    path: str = ""
    is_end: bool = False
    children: dict[str, "_TrieNode"] = field(default_factory=dict)


class Trie:
    """Set of strings stored character by character."""

    def __init__(self) -> None:
        self._head = _TrieNode()

    def insert(self, path: str) -> None:
        """Add *path* to the trie."""
        node = self._head
        for index, char in enumerate(path, start=1):
            child = node.children.get(char)
            if child is None:
                child = node.children[char] = _TrieNode(path[:index])
            node = child
        node.is_end = True

    def _locate(self, path: str) -> _TrieNode | None:
        node: _TrieNode | None = self._head
        for char in path:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def find(self, path: str) -> bool:
        """Return whether *path* was inserted and not erased."""
        node = self._locate(path)
        return node is not None and node.is_end

    def erase(self, path: str) -> bool:
        """Remove *path*; return whether it was present."""
        node = self._locate(path)
        if node is None or not node.is_end:
            return False
        node.is_end = False
        return True

    def clear(self) -> None:
        """Remove every stored path."""
        self._head = _TrieNode()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.find(path)