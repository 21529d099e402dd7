"""Organization hierarchy resolution."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Literal, Optional

from taskgate.config import settings
from taskgate.db.store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HierarchyTraversalAnomaly:
    """Malformed hierarchy data seen while walking a subtree.

    `cycle`: a child pointed back at an organization already collected.
    `depth_exceeded`: the subtree goes deeper than the configured bound.
    """

    kind: Literal["cycle", "depth_exceeded"]
    root_id: str
    organization_id: str
    depth: int


@dataclass
class HierarchyResolution:
    """Result of a subtree walk."""

    root_id: str
    ids: set[str] = field(default_factory=set)
    anomalies: list[HierarchyTraversalAnomaly] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.anomalies)


class OrganizationHierarchyResolver:
    """Computes an organization plus all of its descendants.

    Walks parent->child links breadth-first with one store read per visited
    node. A visited set makes the walk terminate on cyclic data, and the
    depth bound caps pathological chains. Either anomaly stops expansion of
    the offending branch and is logged; the ids collected so far are returned.
    """

    def __init__(self, store: TaskStore, max_depth: Optional[int] = None):
        self.store = store
        self.max_depth = max_depth or settings.hierarchy_max_depth

    async def descendant_ids(self, root_id: str) -> set[str]:
        """Return `root_id` and every organization reachable below it."""
        resolution = await self.resolve(root_id)
        return resolution.ids

    async def resolve(self, root_id: str) -> HierarchyResolution:
        resolution = HierarchyResolution(root_id=root_id, ids={root_id})

        root = await self.store.find_organization_by_id(root_id)
        if root is None:
            # Unknown org: scope falls back to the org itself.
            return resolution

        queue: deque[tuple[str, int]] = deque([(root_id, 0)])
        while queue:
            org_id, depth = queue.popleft()
            children = await self.store.find_child_organizations(org_id)
            if children and depth >= self.max_depth:
                self._report(
                    resolution,
                    HierarchyTraversalAnomaly("depth_exceeded", root_id, org_id, depth),
                )
                continue

            for child in children:
                if child.id in resolution.ids:
                    self._report(
                        resolution,
                        HierarchyTraversalAnomaly("cycle", root_id, child.id, depth + 1),
                    )
                    continue
                resolution.ids.add(child.id)
                queue.append((child.id, depth + 1))

        return resolution

    def _report(self, resolution: HierarchyResolution, anomaly: HierarchyTraversalAnomaly) -> None:
        resolution.anomalies.append(anomaly)
        logger.warning(
            f"Organization hierarchy anomaly ({anomaly.kind}) under root {anomaly.root_id}: "
            f"stopped expanding {anomaly.organization_id} at depth {anomaly.depth}"
        )
