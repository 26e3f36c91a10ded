"""Connectivity groups of joined pieces, as a disjoint-set keyed by piece id."""

from typing import Dict, Iterable, List, Optional, Set


class ConnectivityGroups:
    """Partition of joined pieces into rigid groups.

    Only pieces that have been joined at least once are tracked. A piece that was
    never joined is an implicit singleton and is not reported by :meth:`group_of`
    or :meth:`groups`. Groups only ever merge; they are never split.
    """

    def __init__(self) -> None:
        self._parent: Dict[int, int] = {}
        self._members: Dict[int, Set[int]] = {}

    def __len__(self) -> int:
        """Number of explicit groups."""
        return len(self._members)

    def __contains__(self, piece_id: object) -> bool:
        return piece_id in self._parent

    def _find(self, piece_id: int) -> int:
        root = piece_id
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[piece_id] != root:
            self._parent[piece_id], piece_id = root, self._parent[piece_id]
        return root

    def _add(self, piece_id: int) -> None:
        if piece_id not in self._parent:
            self._parent[piece_id] = piece_id
            self._members[piece_id] = {piece_id}

    def find(self, piece_id: int) -> Optional[int]:
        """Representative id of the piece's group, or None for an unjoined piece."""
        if piece_id not in self._parent:
            return None
        return self._find(piece_id)

    def group_of(self, piece_id: int) -> Optional[Set[int]]:
        """Member ids of the piece's group, or None for an unjoined piece."""
        root = self.find(piece_id)
        if root is None:
            return None
        return set(self._members[root])

    def members(self, piece_id: int) -> Set[int]:
        """Ids that move together with the piece, including the piece itself."""
        return self.group_of(piece_id) or {piece_id}

    def union(self, first: int, second: int) -> int:
        """Join the groups of two pieces and return the new representative."""
        self._add(first)
        self._add(second)
        root_a = self._find(first)
        root_b = self._find(second)
        if root_a == root_b:
            return root_a

        # Union by size
        if len(self._members[root_a]) < len(self._members[root_b]):
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._members[root_a] |= self._members.pop(root_b)
        return root_a

    def merge(self, moving_ids: Iterable[int], target_id: int) -> int:
        """Join every moving piece with the target piece's group."""
        root = target_id
        for piece_id in moving_ids:
            root = self.union(piece_id, target_id)
        return root

    def groups(self) -> List[Set[int]]:
        return [set(members) for members in self._members.values()]

    def clear(self) -> None:
        self._parent.clear()
        self._members.clear()
