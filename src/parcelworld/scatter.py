"""Scatter pass: trees, rocks, plants and decorations on a jittered grid."""

import math
from dataclasses import dataclass

import numpy as np
import structlog

from .catalogs import (
    DECORATION_TYPES,
    PLANT_TYPES,
    ROCK_TYPES,
    TREE_TYPES,
    CrownShape,
    PlantShape,
    RockShape,
)
from .terrain.heightfield import HeightfieldGenerator
from .terrain_types import TerrainClass
from .types import Point3D
from .zones import ZoneManager

logger = structlog.get_logger()

# Sub-stream of the world seed; each cell adds its own grid indices.
_SCATTER_STREAM = 43

# Jitter within a cell as a fraction of the grid spacing.
CELL_JITTER = 0.8

# Steepest slope a decoration may sit on.
DECORATION_MAX_SLOPE = 0.2


@dataclass(frozen=True)
class Tree:
    position: Point3D
    kind: str
    trunk_height: float
    trunk_radius: float
    leaves_radius: float
    trunk_color: str
    leaves_color: str
    shape: CrownShape
    animation_offset: float


@dataclass(frozen=True)
class Rock:
    position: Point3D
    size: float
    color: str
    shape: RockShape
    rotation: tuple[float, float, float]


@dataclass(frozen=True)
class Plant:
    position: Point3D
    size: float
    color: str
    shape: PlantShape
    rotation: float


@dataclass(frozen=True)
class Decoration:
    position: Point3D
    kind: str
    size: float
    color: str
    shape: str
    rotation: float
    district_id: str


EnvironmentElement = Tree | Rock | Plant | Decoration


@dataclass(frozen=True)
class ScatterResult:
    """The four placement sequences, in grid-walk order."""

    trees: tuple[Tree, ...] = ()
    rocks: tuple[Rock, ...] = ()
    plants: tuple[Plant, ...] = ()
    decorations: tuple[Decoration, ...] = ()

    def __len__(self) -> int:
        return len(self.trees) + len(self.rocks) + len(self.plants) + len(self.decorations)

    @property
    def elements(self) -> tuple[EnvironmentElement, ...]:
        """All placements, category by category."""
        return self.trees + self.rocks + self.plants + self.decorations


def vary_color(color: str, amount: float, rng: np.random.Generator) -> str:
    """Shift each RGB channel of a ``#rrggbb`` color by up to +-amount."""
    channels = [int(color[i : i + 2], 16) for i in (1, 3, 5)]
    varied = [
        int(min(255.0, max(0.0, c + (rng.random() - 0.5) * amount * 2)))
        for c in channels
    ]
    return "#" + "".join(f"{c:02x}" for c in varied)


def _uniform(bounds: tuple[float, float], rng: np.random.Generator) -> float:
    low, high = bounds
    return low + rng.random() * (high - low)


class ScatterEngine:
    """Walks a uniform grid and places environment elements.

    Each cell draws from its own generator seeded by the world seed and
    the cell's grid indices, so cells are independent of each other and
    of the order they are visited in.
    """

    def __init__(
        self,
        heightfield: HeightfieldGenerator,
        zones: ZoneManager | None = None,
        *,
        seed: int | None = None,
        tree_density: float = 0.5,
        rock_density: float = 0.3,
        plant_density: float = 0.6,
        decoration_density: float = 0.4,
        grid_size: float = 5.0,
    ) -> None:
        self.heightfield = heightfield
        self.zones = zones
        self.seed = heightfield.seed if seed is None else seed
        self.tree_density = tree_density
        self.rock_density = rock_density
        self.plant_density = plant_density
        self.decoration_density = decoration_density
        self.grid_size = grid_size

    def cell_origins(self) -> np.ndarray:
        """Lower cell corner coordinates along either axis; samples use the centers."""
        half = self.heightfield.half_size
        return np.arange(-half, half, self.grid_size)

    def generate(self) -> ScatterResult:
        """Run the scatter pass over every grid cell."""
        trees: list[Tree] = []
        rocks: list[Rock] = []
        plants: list[Plant] = []
        decorations: list[Decoration] = []

        origins = self.cell_origins()
        for i, cell_x in enumerate(origins):
            for j, cell_z in enumerate(origins):
                rng = np.random.default_rng([self.seed, _SCATTER_STREAM, i, j])
                position = self.sample_position(float(cell_x), float(cell_z), rng)
                terrain_class = self.heightfield.terrain_class_at(position.x, position.z)

                tree = self.try_place_tree(position, terrain_class, rng)
                if tree is not None:
                    trees.append(tree)
                rock = self.try_place_rock(position, terrain_class, rng)
                if rock is not None:
                    rocks.append(rock)
                plant = self.try_place_plant(position, terrain_class, rng)
                if plant is not None:
                    plants.append(plant)
                decoration = self.try_place_decoration(position, terrain_class, rng)
                if decoration is not None:
                    decorations.append(decoration)

        result = ScatterResult(
            trees=tuple(trees),
            rocks=tuple(rocks),
            plants=tuple(plants),
            decorations=tuple(decorations),
        )
        logger.info(
            "scatter_complete",
            cells=len(origins) ** 2,
            trees=len(trees),
            rocks=len(rocks),
            plants=len(plants),
            decorations=len(decorations),
        )
        return result

    def sample_position(
        self, cell_x: float, cell_z: float, rng: np.random.Generator
    ) -> Point3D:
        """Point jittered around the cell center, on the terrain surface.

        A trailing partial cell can put its center past the edge, so
        samples are clamped to the world.
        """
        half = self.heightfield.half_size
        center = self.grid_size / 2
        x = cell_x + center + (rng.random() - 0.5) * self.grid_size * CELL_JITTER
        z = cell_z + center + (rng.random() - 0.5) * self.grid_size * CELL_JITTER
        x = min(max(x, -half), half)
        z = min(max(z, -half), half)
        return Point3D(x=x, y=self.heightfield.height_at(x, z), z=z)

    def try_place_tree(
        self,
        position: Point3D,
        terrain_class: TerrainClass,
        rng: np.random.Generator,
    ) -> Tree | None:
        if terrain_class is TerrainClass.WATER:
            return None

        if self.zones is not None:
            if not self.zones.should_place_tree_at(position):
                return None
            kind = self.zones.tree_type_at(position, rng)
        else:
            if rng.random() >= self.tree_density:
                return None
            kinds = tuple(TREE_TYPES)
            kind = kinds[int(rng.integers(len(kinds)))]

        archetype = TREE_TYPES[kind]
        return Tree(
            position=position,
            kind=kind,
            trunk_height=_uniform(archetype.trunk_height, rng),
            trunk_radius=_uniform(archetype.trunk_radius, rng),
            leaves_radius=_uniform(archetype.leaves_radius, rng),
            trunk_color=vary_color(archetype.trunk_color, 10, rng),
            leaves_color=vary_color(archetype.leaves_color, 10, rng),
            shape=archetype.shape,
            animation_offset=rng.random(),
        )

    def try_place_rock(
        self,
        position: Point3D,
        terrain_class: TerrainClass,
        rng: np.random.Generator,
    ) -> Rock | None:
        if terrain_class in (TerrainClass.WATER, TerrainClass.BEACH):
            return None

        density = self.rock_density
        if terrain_class is TerrainClass.MOUNTAIN:
            density *= 3
        if rng.random() > density:
            return None

        archetype = ROCK_TYPES[int(rng.integers(len(ROCK_TYPES)))]
        return Rock(
            position=position,
            size=_uniform(archetype.size, rng),
            color=vary_color(archetype.color, 20, rng),
            shape=archetype.shape,
            rotation=(
                rng.random() * math.pi,
                rng.random() * math.pi * 2,
                rng.random() * math.pi,
            ),
        )

    def try_place_plant(
        self,
        position: Point3D,
        terrain_class: TerrainClass,
        rng: np.random.Generator,
    ) -> Plant | None:
        if terrain_class is TerrainClass.WATER:
            return None

        density = self.plant_density
        if terrain_class in (TerrainClass.FOREST, TerrainClass.GRASS):
            density *= 2
        elif terrain_class in (TerrainClass.MOUNTAIN, TerrainClass.BEACH):
            density *= 0.5
        if rng.random() > density:
            return None

        archetype = PLANT_TYPES[int(rng.integers(len(PLANT_TYPES)))]
        return Plant(
            position=position,
            size=_uniform(archetype.size, rng),
            color=vary_color(archetype.color, 20, rng),
            shape=archetype.shape,
            rotation=rng.random() * math.pi * 2,
        )

    def try_place_decoration(
        self,
        position: Point3D,
        terrain_class: TerrainClass,
        rng: np.random.Generator,
    ) -> Decoration | None:
        if self.zones is None or terrain_class is TerrainClass.WATER:
            return None

        params = self.zones.decoration_params_at(position, rng)

        if self.heightfield.slope_at(position.x, position.z) > DECORATION_MAX_SLOPE:
            return None

        archetype = DECORATION_TYPES.get(params.kind)
        if archetype is None:
            return None

        if rng.random() > self.decoration_density:
            return None

        return Decoration(
            position=position,
            kind=params.kind,
            size=archetype.size * params.scale,
            color=vary_color(archetype.color, 10, rng),
            shape=archetype.shape,
            rotation=params.rotation,
            district_id=params.district_id,
        )
