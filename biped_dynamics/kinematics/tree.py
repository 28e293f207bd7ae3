"""Kinematic tree of the five-link biped.

Links are graph nodes; an edge runs from the link an actuator reacts against
to the link it drives, so node ``0`` (ground) is the root. The geometric
branch sits at the hip: the torso (link 3) and the swing femur (link 4) both
start at point ``P2`` even though the swing femur's actuator reacts against
the torso.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

GROUND = 0


@dataclass(frozen=True)
class Link:
    """A rigid link and its place in the tree.

    ``proximal`` and ``distal`` index the joint points ``P0..P5``. ``sign``
    flips the unit vector for links hanging down from the hip, and
    ``com_from_distal`` says whether the CoM offset is measured back from the
    distal point (stance leg, torso) or out from the proximal point (swing leg).
    """
    index: int
    name: str
    parent: int
    proximal: int
    distal: int
    sign: int = 1
    com_from_distal: bool = True


FIVE_LINK_BIPED: Tuple[Link, ...] = (
    Link(1, 'stance_tibia', parent=GROUND, proximal=0, distal=1),
    Link(2, 'stance_femur', parent=1, proximal=1, distal=2),
    Link(3, 'torso', parent=2, proximal=2, distal=3),
    Link(4, 'swing_femur', parent=3, proximal=2, distal=4, sign=-1, com_from_distal=False),
    Link(5, 'swing_tibia', parent=4, proximal=4, distal=5, sign=-1, com_from_distal=False),
)


class KinematicTree:
    """Explicit link tree with precomputed outboard sets.

    Joint ``k`` is the actuated joint at the proximal end of link ``k + 1``;
    its outboard set is that link together with every link it carries.
    """

    def __init__(self, links: Sequence[Link] = FIVE_LINK_BIPED):
        self.links: Dict[int, Link] = {link.index: link for link in links}
        self.graph = nx.DiGraph()
        self.graph.add_node(GROUND)
        for link in links:
            self.graph.add_node(link.index, link=link)
        for link in links:
            if link.parent not in self.graph:
                raise ValueError(f"Link {link.index} has unknown parent {link.parent}")
            self.graph.add_edge(link.parent, link.index)
        if not nx.is_arborescence(self.graph):
            raise ValueError("Links do not form a tree rooted at the ground")

        self._order: List[int] = [n for n in nx.topological_sort(self.graph) if n != GROUND]
        self._outboard: Tuple[FrozenSet[int], ...] = tuple(
            frozenset({idx} | nx.descendants(self.graph, idx))
            for idx in sorted(self.links)
        )

    def __len__(self):
        return len(self.links)

    @property
    def num_joints(self) -> int:
        return len(self.links)

    def link(self, index: int) -> Link:
        return self.links[index]

    def parent(self, index: int) -> Optional[int]:
        parent = self.links[index].parent
        return None if parent == GROUND else parent

    def children(self, index: int) -> List[int]:
        return sorted(self.graph.successors(index))

    def build_order(self) -> List[int]:
        """Links ordered so every parent precedes its children."""
        return list(self._order)

    def outboard(self, joint: int) -> FrozenSet[int]:
        """Links outboard of joint ``joint`` (0-based)."""
        return self._outboard[joint]

    def joint_point(self, joint: int) -> int:
        """Index of the point ``P_k`` the balance about joint ``joint`` is taken at."""
        return self.links[joint + 1].proximal

    def incidence_matrix(self) -> np.ndarray:
        """``T[k, i] = 1`` when link ``i + 1`` is outboard of joint ``k``."""
        n = len(self.links)
        T = np.zeros((n, n), dtype=int)
        for k in range(n):
            for idx in self._outboard[k]:
                T[k, idx - 1] = 1
        return T
