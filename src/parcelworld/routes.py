"""Route network: named locations joined by terrain-following curves."""

import heapq
import math
import zlib
from enum import Enum
from typing import Sequence

import numpy as np
import structlog
from pydantic import BaseModel

from .exceptions import (
    ConfigurationError,
    DuplicateLocationError,
    FrozenStructureError,
    UnknownLocationError,
)
from .terrain.heightfield import HeightfieldGenerator
from .types import Point2D, Point3D
from .zones import District, ZoneType

logger = structlog.get_logger()

# Height kept between a path and the terrain surface beneath it.
PATH_CLEARANCE = 0.1

# Control point offset as a fraction of the straight-line distance.
CURVE_FACTOR = 0.2

POST_OFFICE_ID = "postOffice"

# Sub-streams of the world seed.
_LAYOUT_STREAM = 31
_ROUTE_STREAM = 37


class RoadClass(str, Enum):
    MAIN_ROAD = "main_road"
    SECONDARY_ROAD = "secondary_road"
    PATH = "path"
    ROUTE = "route"


class LocationKind(str, Enum):
    IMPORTANT = "important"
    DISTRICT = "district"


class NodeKind(str, Enum):
    LOCATION = "location"
    JUNCTION = "junction"


class Location(BaseModel, frozen=True):
    """A named point of interest."""

    id: str
    name: str
    kind: LocationKind
    position: Point3D
    zone_type: ZoneType | None = None


class Node(BaseModel, frozen=True):
    """A graph node: either a location or a junction along a path."""

    id: str
    position: Point3D
    kind: NodeKind
    location_id: str | None = None


class PathConnection(BaseModel, frozen=True):
    """A sampled curve between two nodes, ready for mesh extrusion."""

    id: str
    road_class: RoadClass
    width: float
    endpoints: tuple[str, str]
    points: tuple[Point3D, ...]

    @property
    def length(self) -> float:
        return polyline_length(self.points)


class PathHit(BaseModel, frozen=True):
    """Nearest sampled path point to a query position."""

    point: Point3D
    distance: float
    path_id: str


class RoutePlan(BaseModel, frozen=True):
    """A shortest route through the built network."""

    node_ids: tuple[str, ...]
    points: tuple[Point3D, ...]
    length: float


def polyline_length(points: Sequence[Point3D]) -> float:
    """Total length of the segments joining consecutive points."""
    return sum(a.distance_to(b) for a, b in zip(points, points[1:]))


class RouteNetwork:
    """Registry of locations, graph nodes and path connections.

    The network only grows while the world is being built; ``freeze``
    closes it. Nodes are named ``node_<location id>`` for locations and
    ``node_path_<path id>_<index>`` for junctions.
    """

    def __init__(
        self,
        heightfield: HeightfieldGenerator,
        *,
        seed: int | None = None,
        path_width: float = 2.0,
        main_road_width: float = 3.5,
    ) -> None:
        self.heightfield = heightfield
        self.seed = heightfield.seed if seed is None else seed
        self.path_width = path_width
        self.main_road_width = main_road_width
        self._rng = np.random.default_rng([self.seed, _LAYOUT_STREAM])

        self._locations: dict[str, Location] = {}
        self._nodes: list[Node] = []
        self._nodes_by_id: dict[str, Node] = {}
        self._connections: list[PathConnection] = []
        self._connection_ids: set[str] = set()
        # path id -> [(node id, sample index)] from start to end
        self._path_nodes: dict[str, list[tuple[str, int]]] = {}
        self._frozen = False

    @property
    def locations(self) -> tuple[Location, ...]:
        return tuple(self._locations.values())

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def connections(self) -> tuple[PathConnection, ...]:
        return tuple(self._connections)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Close registration; queries keep working."""
        self._frozen = True

    def get_location(self, location_id: str) -> Location:
        """Look up a location.

        Raises:
            UnknownLocationError: If no such location exists.
        """
        try:
            return self._locations[location_id]
        except KeyError:
            raise UnknownLocationError(f"Unknown location: {location_id}") from None

    def get_node(self, node_id: str) -> Node:
        return self._nodes_by_id[node_id]

    def add_location(
        self,
        location_id: str,
        position: Point3D,
        kind: LocationKind,
        name: str | None = None,
        zone_type: ZoneType | None = None,
    ) -> Node:
        """Register a location and its graph node.

        Raises:
            DuplicateLocationError: If the id is already registered.
            FrozenStructureError: If the network has been frozen.
        """
        self._check_open()
        if location_id in self._locations:
            raise DuplicateLocationError(f"Location already exists: {location_id}")

        self._locations[location_id] = Location(
            id=location_id,
            name=name or location_id,
            kind=kind,
            position=position,
            zone_type=zone_type,
        )
        node = Node(
            id=f"node_{location_id}",
            position=position,
            kind=NodeKind.LOCATION,
            location_id=location_id,
        )
        self._add_node(node)
        return node

    def create_path(
        self,
        start: Node,
        end: Node,
        road_class: RoadClass = RoadClass.PATH,
        width: float = 2.0,
        subdivisions: int = 5,
    ) -> PathConnection:
        """Create a curved, terrain-following path between two nodes.

        The curve is a quadratic Bezier whose control point is pushed
        sideways by up to 20% of the straight-line distance. Its
        ``subdivisions + 2`` samples sit ``PATH_CLEARANCE`` above the
        terrain. Junction nodes are added at every other interior sample.

        Raises:
            ConfigurationError: If subdivisions is negative.
            FrozenStructureError: If the network has been frozen.
        """
        self._check_open()
        if subdivisions < 0:
            raise ConfigurationError(f"subdivisions must be non-negative, got {subdivisions}")

        points = self._sample_curve(start.position, end.position, subdivisions, self._rng)
        path = PathConnection(
            id=self._unique_path_id(f"path_{start.id}_{end.id}"),
            road_class=road_class,
            width=width,
            endpoints=(start.id, end.id),
            points=points,
        )
        self._connections.append(path)
        self._connection_ids.add(path.id)

        chain = [(start.id, 0)]
        for i in range(1, len(points) - 1, 2):
            junction = Node(
                id=f"node_path_{path.id}_{i}",
                position=points[i],
                kind=NodeKind.JUNCTION,
            )
            self._add_node(junction)
            chain.append((junction.id, i))
        chain.append((end.id, len(points) - 1))
        self._path_nodes[path.id] = chain

        logger.debug(
            "path_created",
            path_id=path.id,
            road_class=road_class.value,
            samples=len(points),
        )
        return path

    def build_default_layout(
        self,
        districts: Sequence[District],
        ring: Sequence[District] | None = None,
    ) -> None:
        """Wire the standard town: post office, main roads and a ring road.

        Args:
            districts: Districts that get a location and a main road from
                the post office.
            ring: Districts joined to their cyclic neighbour by secondary
                roads. Defaults to ``districts``.
        """
        site = self.heightfield.find_flat_site(10, 0.08)
        self.add_location(
            POST_OFFICE_ID,
            Point3D(x=site.x, y=site.height, z=site.z),
            LocationKind.IMPORTANT,
            name="Post Office",
        )

        for district in districts:
            self.add_location(
                district.id,
                district.position,
                LocationKind.DISTRICT,
                name=district.params.name,
                zone_type=district.zone_type,
            )

        self.create_main_roads()
        ring_ids = [d.id for d in (districts if ring is None else ring)]
        self.create_secondary_paths(ring_ids)

        logger.info(
            "route_network_built",
            locations=len(self._locations),
            nodes=len(self._nodes),
            connections=len(self._connections),
            post_office_fallback=site.fallback,
        )

    def create_main_roads(self) -> None:
        """Connect the post office to every district location."""
        if POST_OFFICE_ID not in self._locations:
            return
        hub = self._location_node(POST_OFFICE_ID)

        for location in self.locations:
            if location.kind is not LocationKind.DISTRICT:
                continue
            self.create_path(
                hub,
                self._location_node(location.id),
                road_class=RoadClass.MAIN_ROAD,
                width=self.main_road_width,
                subdivisions=8,
            )

    def create_secondary_paths(self, location_ids: Sequence[str]) -> None:
        """Join each location to the next one, closing the ring."""
        if len(location_ids) < 2:
            return

        for i, location_id in enumerate(location_ids):
            next_id = location_ids[(i + 1) % len(location_ids)]
            self.create_path(
                self._location_node(location_id),
                self._location_node(next_id),
                road_class=RoadClass.SECONDARY_ROAD,
                width=self.path_width,
                subdivisions=6,
            )

    def nearest_path_point(self, position: Point2D | Point3D) -> PathHit | None:
        """Closest sampled point over every path.

        A brute-force scan over all samples: fine for the bounded network
        built here, but it does not scale to an unbounded network. A 2D
        query measures horizontal distance only.

        Returns:
            The nearest hit, or None when the network has no paths.
        """
        best: PathHit | None = None
        for path in self._connections:
            for point in path.points:
                if isinstance(position, Point3D):
                    distance = position.distance_to(point)
                else:
                    distance = position.distance_to(point.ground)
                if best is None or distance < best.distance:
                    best = PathHit(point=point, distance=distance, path_id=path.id)
        return best

    def find_route(self, start_id: str, end_id: str) -> PathConnection:
        """Direct curve between two locations.

        This is not a search over the network: it returns an existing
        direct connection between the two locations if there is one, and
        otherwise generates a new curve. While the network is open the new
        curve is registered; once frozen it is returned unregistered and
        its shape depends only on the seed and the two ids.

        Raises:
            UnknownLocationError: If either location does not exist.
        """
        start = self._location_node(start_id)
        end = self._location_node(end_id)

        for path in self._connections:
            if set(path.endpoints) == {start.id, end.id}:
                return path

        if not self._frozen:
            return self.create_path(
                start, end, road_class=RoadClass.ROUTE, width=self.path_width
            )

        rng = np.random.default_rng([
            self.seed,
            _ROUTE_STREAM,
            zlib.crc32(start_id.encode()),
            zlib.crc32(end_id.encode()),
        ])
        return PathConnection(
            id=f"route_{start.id}_{end.id}",
            road_class=RoadClass.ROUTE,
            width=self.path_width,
            endpoints=(start.id, end.id),
            points=self._sample_curve(start.position, end.position, 5, rng),
        )

    def shortest_route(self, start_id: str, end_id: str) -> RoutePlan | None:
        """Shortest route between two locations over the existing paths.

        Dijkstra over the graph formed by each path's node chain (start,
        junctions, end), weighted by the sampled arc length between
        consecutive nodes.

        Returns:
            The route, or None if the locations are not connected.

        Raises:
            UnknownLocationError: If either location does not exist.
        """
        source = self._location_node(start_id).id
        target = self._location_node(end_id).id
        adjacency = self._adjacency()

        distances: dict[str, float] = {source: 0.0}
        previous: dict[str, tuple[str, tuple[Point3D, ...]]] = {}
        queue: list[tuple[float, str]] = [(0.0, source)]
        visited: set[str] = set()

        while queue:
            distance, node_id = heapq.heappop(queue)
            if node_id in visited:
                continue
            visited.add(node_id)
            if node_id == target:
                break

            for neighbour, weight, segment in adjacency.get(node_id, ()):
                candidate = distance + weight
                if candidate < distances.get(neighbour, math.inf):
                    distances[neighbour] = candidate
                    previous[neighbour] = (node_id, segment)
                    heapq.heappush(queue, (candidate, neighbour))

        if target not in visited:
            return None

        node_ids = [target]
        segments: list[tuple[Point3D, ...]] = []
        while node_ids[-1] != source:
            prior, segment = previous[node_ids[-1]]
            node_ids.append(prior)
            segments.append(segment)
        node_ids.reverse()
        segments.reverse()

        # Start on the path sample, not the location node, to keep the clearance
        points: list[Point3D] = (
            [segments[0][0]] if segments else [self._nodes_by_id[source].position]
        )
        for segment in segments:
            points.extend(segment[1:])

        return RoutePlan(
            node_ids=tuple(node_ids),
            points=tuple(points),
            length=distances[target],
        )

    def _adjacency(self) -> dict[str, list[tuple[str, float, tuple[Point3D, ...]]]]:
        adjacency: dict[str, list[tuple[str, float, tuple[Point3D, ...]]]] = {}
        for path in self._connections:
            chain = self._path_nodes[path.id]
            for (a, i), (b, j) in zip(chain, chain[1:]):
                segment = path.points[i : j + 1]
                weight = polyline_length(segment)
                adjacency.setdefault(a, []).append((b, weight, segment))
                adjacency.setdefault(b, []).append((a, weight, segment[::-1]))
        return adjacency

    def _sample_curve(
        self,
        start: Point3D,
        end: Point3D,
        subdivisions: int,
        rng: np.random.Generator,
    ) -> tuple[Point3D, ...]:
        p0 = np.array([start.x, start.y, start.z])
        p2 = np.array([end.x, end.y, end.z])
        direction = p2 - p0
        distance = float(np.linalg.norm(direction))

        perpendicular = np.array([-direction[2], 0.0, direction[0]])
        perpendicular_length = float(np.linalg.norm(perpendicular))
        if perpendicular_length > 0:
            perpendicular /= perpendicular_length

        offset = (rng.random() - 0.5) * 2
        control = p0 + direction * 0.5 + perpendicular * (distance * CURVE_FACTOR * offset)

        count = subdivisions + 2
        t = np.linspace(0.0, 1.0, count)[:, np.newaxis]
        samples = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * control + t**2 * p2

        return tuple(
            Point3D(
                x=float(x),
                y=self.heightfield.height_at(float(x), float(z)) + PATH_CLEARANCE,
                z=float(z),
            )
            for x, _, z in samples
        )

    def _location_node(self, location_id: str) -> Node:
        self.get_location(location_id)
        return self._nodes_by_id[f"node_{location_id}"]

    def _add_node(self, node: Node) -> None:
        self._nodes.append(node)
        self._nodes_by_id[node.id] = node

    def _unique_path_id(self, base: str) -> str:
        if base not in self._connection_ids:
            return base
        suffix = 1
        while f"{base}_{suffix}" in self._connection_ids:
            suffix += 1
        return f"{base}_{suffix}"

    def _check_open(self) -> None:
        if self._frozen:
            raise FrozenStructureError("Cannot modify the route network after the world is built")
