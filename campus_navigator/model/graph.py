"""RoadGraph - The routable graph built from a NetworkModel.

Follows the separation of Geometry (where things are) vs Topology (how things connect):
- GraphNode: a road vertex or POI (wraps a Coordinate, has a NodeId)
- GraphEdge: a directed hop with weight and geometry
- RoadGraph: adjacency lists plus the node table

Edges are always added in both directions with identical weight. Once
built, the graph is frozen; ad-hoc queries use an overlay instead of
mutating it, so concurrent readers are safe.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from campus_navigator.core.spatial_index import SpatialIndex
from campus_navigator.model.coordinate import Coordinate, NodeId
from campus_navigator.model.warning import BuildWarning, DisconnectedPoiWarning


@dataclass(frozen=True)
class GraphNode:
    """A node of the road graph.

    Attributes:
        id: Typed node identifier
        coordinate: Node location
        is_poi: True for POI nodes, False for road vertices
        poi_id: ID of the POI this node represents (POI nodes only)
    """

    id: NodeId
    coordinate: Coordinate
    is_poi: bool = False
    poi_id: Optional[str] = None

    @property
    def lat(self) -> float:
        """Latitude delegated from coordinate."""
        return self.coordinate.lat

    @property
    def lon(self) -> float:
        """Longitude delegated from coordinate."""
        return self.coordinate.lon

    def distance_to(self, coordinate: Coordinate) -> float:
        """Great-circle distance to coordinate in meters."""
        return self.coordinate.distance_to(other=coordinate)

    def __repr__(self) -> str:
        return f"GraphNode({self.id}, {self.coordinate})"


@dataclass(frozen=True)
class GraphEdge:
    """A directed hop between two nodes.

    Attributes:
        source: Node the hop starts at
        target: Node the hop ends at
        weight_m: Cost in meters
        geometry: Ordered coordinates of the hop (source first)
        is_merge: True for edges stitching coincident road vertices
    """

    source: NodeId
    target: NodeId
    weight_m: float
    geometry: tuple[Coordinate, ...]
    is_merge: bool = False

    def reversed(self) -> "GraphEdge":
        """Same hop walked the other way."""
        return GraphEdge(
            source=self.target,
            target=self.source,
            weight_m=self.weight_m,
            geometry=tuple(reversed(self.geometry)),
            is_merge=self.is_merge,
        )


class RoadGraph:
    """Adjacency-list graph with a companion node table.

    Invariant: every edge endpoint exists in nodes.

    Example:
        graph = RoadGraph()
        graph.add_node(GraphNode(id=a_id, coordinate=a))
        graph.add_node(GraphNode(id=b_id, coordinate=b))
        graph.add_edge(source=a_id, target=b_id, weight_m=a.distance_to(b), geometry=(a, b))
        graph.freeze()
    """

    def __init__(self) -> None:
        """Initialize empty road graph."""
        self.nodes: dict[NodeId, GraphNode] = {}
        self.edges: dict[NodeId, list[GraphEdge]] = {}
        self.warnings: list[BuildWarning] = []
        self._vertex_index: Optional[SpatialIndex] = None
        self._frozen = False

    # =========================================================================
    # Construction
    # =========================================================================

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("RoadGraph is frozen; use a query overlay instead of mutating it")

    def add_node(self, node: GraphNode) -> bool:
        """Register a node.

        Returns:
            True if the node was created, False if the ID already existed.
        """
        self._check_mutable()
        if node.id in self.nodes:
            return False
        self.nodes[node.id] = node
        self.edges[node.id] = []
        return True

    def add_edge(
        self,
        source: NodeId,
        target: NodeId,
        weight_m: float,
        geometry: tuple[Coordinate, ...],
        is_merge: bool = False,
    ) -> GraphEdge:
        """Add an undirected edge as two directed hops with identical weight.

        Returns:
            The source → target hop.

        Raises:
            KeyError: If either endpoint is not a registered node.
            ValueError: If weight_m is negative.
        """
        self._check_mutable()
        if source not in self.nodes:
            raise KeyError(f"Unknown edge source {source}")
        if target not in self.nodes:
            raise KeyError(f"Unknown edge target {target}")
        if weight_m < 0:
            raise ValueError(f"Edge weight must be non-negative, got {weight_m} for {source} → {target}")

        edge = GraphEdge(source=source, target=target, weight_m=weight_m, geometry=geometry, is_merge=is_merge)
        self.edges[source].append(edge)
        self.edges[target].append(edge.reversed())
        return edge

    def build_vertex_index(self) -> SpatialIndex:
        """Spatial index over the current road vertices, keyed by NodeId."""
        vertices = list(self.road_vertices())
        return SpatialIndex(
            keys=[v.id for v in vertices],
            points=[v.coordinate.lat_lon for v in vertices],
        )

    def freeze(self, vertex_index: Optional[SpatialIndex] = None) -> None:
        """Forbid further mutation and keep a road-vertex index for lookups.

        Args:
            vertex_index: Prebuilt index over the road vertices; built if omitted
        """
        if self._frozen:
            return
        self._vertex_index = vertex_index if vertex_index is not None else self.build_vertex_index()
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # Query Operations
    # =========================================================================

    def neighbors(self, node_id: NodeId) -> list[GraphEdge]:
        """Outgoing hops of node_id (empty for unknown nodes)."""
        return self.edges.get(node_id, [])

    def has_edge(self, source: NodeId, target: NodeId) -> bool:
        """Whether a direct hop source → target exists."""
        return any(edge.target == target for edge in self.neighbors(source))

    def get_edge(self, source: NodeId, target: NodeId) -> Optional[GraphEdge]:
        """Cheapest direct hop source → target, or None."""
        candidates = [edge for edge in self.neighbors(source) if edge.target == target]
        if not candidates:
            return None
        return min(candidates, key=lambda edge: edge.weight_m)

    def road_vertices(self) -> Iterator[GraphNode]:
        """All road-vertex nodes in insertion order."""
        return (node for node in self.nodes.values() if not node.is_poi)

    def nearest_road_vertex(self, coordinate: Coordinate) -> Optional[tuple[GraphNode, float]]:
        """Closest road vertex to coordinate.

        Returns:
            Tuple (node, distance in meters), or None if the graph has no road vertices.
        """
        if self._vertex_index is None:
            # Not frozen yet: linear scan
            best: Optional[tuple[GraphNode, float]] = None
            for node in self.road_vertices():
                dist = node.distance_to(coordinate=coordinate)
                if best is None or dist < best[1]:
                    best = (node, dist)
            return best

        found = self._vertex_index.nearest(lat=coordinate.lat, lon=coordinate.lon)
        if found is None:
            return None
        node_id, dist = found
        return self.nodes[node_id], dist

    # =========================================================================
    # Statistics
    # =========================================================================

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        """Number of directed hops (twice the number of undirected edges)."""
        return sum(len(hops) for hops in self.edges.values())

    @property
    def road_vertex_count(self) -> int:
        return sum(1 for _ in self.road_vertices())

    @property
    def poi_node_count(self) -> int:
        return self.node_count - self.road_vertex_count

    @property
    def merge_edge_count(self) -> int:
        """Number of undirected merge edges."""
        return sum(1 for hops in self.edges.values() for edge in hops if edge.is_merge) // 2

    @property
    def disconnected_poi_ids(self) -> list[str]:
        """IDs of POIs flagged as unreachable during the build."""
        return [w.poi_id for w in self.warnings if isinstance(w, DisconnectedPoiWarning)]

    def get_stats(self) -> dict:
        """Get graph statistics."""
        return {
            "nodes": self.node_count,
            "road_vertices": self.road_vertex_count,
            "poi_nodes": self.poi_node_count,
            "edges": self.edge_count // 2,
            "merge_edges": self.merge_edge_count,
            "warnings": len(self.warnings),
        }

    def __repr__(self) -> str:
        return f"RoadGraph({self.node_count} nodes, {self.edge_count // 2} edges, frozen={self._frozen})"
