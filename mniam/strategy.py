"""Game-state bookkeeping and the movement strategy of the player."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .packets import MAX_OBJECT_UPDATES, ObjectState, ObjectType

log = logging.getLogger(__name__)

SPARK_LIMIT = 5
DANGER_RADIUS = 100.0
AVOID_CONE = math.pi / 3


@dataclass
class GameState:
    """Everything the player knows about the running game."""

    objects: List[ObjectState] = field(default_factory=list)
    my_player_number: int = 0
    map_width: float = 0.0
    map_height: float = 0.0
    game_active: bool = False
    current_game_time: int = 0
    stored_sparks: List[Tuple[float, float]] = field(default_factory=list)

    def start_game(self, player_number: int, map_width: float, map_height: float) -> None:
        """Record the parameters of a new game and mark it active."""
        self.my_player_number = player_number
        self.map_width = map_width
        self.map_height = map_height
        self.game_active = True
        log.info("Player number: %d, map: %.1fx%.1f", player_number, map_width, map_height)

    def end_game(self) -> None:
        """Mark the game as finished."""
        self.game_active = False

    def update_objects(self, states: Iterable[ObjectState]) -> None:
        """Merge object updates, refresh the stored sparks and drop dead objects."""
        states = list(states)
        if not states:
            return
        for state in states:
            index = next(
                (
                    i
                    for i, known in enumerate(self.objects)
                    if known.object_no == state.object_no
                    and known.object_type == state.object_type
                ),
                None,
            )
            if index is not None:
                self.objects[index] = state
                log.debug("Updated existing object %d", state.object_no)
            elif len(self.objects) < MAX_OBJECT_UPDATES:
                self.objects.append(state)
                log.debug("Added new object %d", state.object_no)
        log.debug("Total objects in game state: %d", len(self.objects))
        self.store_nearest_sparks()
        self.remove_dead_objects()

    def remove_dead_objects(self) -> None:
        """Forget every object whose hit points dropped to zero or below."""
        for obj in self.objects:
            if obj.hp <= 0:
                log.debug("Removing dead object %d of type %d", obj.object_no, obj.object_type)
        self.objects = [obj for obj in self.objects if obj.hp > 0]

    def store_nearest_sparks(self) -> None:
        """Remember the positions of the first few sparks among the known objects."""
        sparks = (obj for obj in self.objects if obj.object_type == ObjectType.SPARK)
        self.stored_sparks = [(obj.x, obj.y) for _, obj in zip(range(SPARK_LIMIT), sparks)]
        log.debug("Total sparks stored: %d", len(self.stored_sparks))

    def threat_score(self, target_x: float, target_y: float) -> float:
        """Rate how dangerous a point is because of nearby living opponents."""
        threat = 0.0
        for obj in self.objects:
            if (
                obj.object_type == ObjectType.PLAYER
                and obj.object_no != self.my_player_number
                and obj.hp > 0
            ):
                distance = math.hypot(target_x - obj.x, target_y - obj.y)
                if distance < DANGER_RADIUS:
                    threat += (obj.hp / 10.0) * (1.0 - distance / DANGER_RADIUS)
        return threat

    def avoid_spark_trajectory(
        self, target_x: float, target_y: float, my_x: float, my_y: float
    ) -> float:
        """Return the heading towards a target, turned aside from a close spark in the way."""
        base_angle = math.atan2(target_y - my_y, target_x - my_x)
        for spark_x, spark_y in self.stored_sparks:
            dx = spark_x - my_x
            dy = spark_y - my_y
            distance = math.hypot(dx, dy)
            if distance >= DANGER_RADIUS:
                continue
            spark_angle = math.atan2(dy, dx)
            if abs(spark_angle - base_angle) < AVOID_CONE:
                log.debug("Avoiding spark at (%.1f, %.1f), distance %.1f", spark_x, spark_y, distance)
                if spark_angle > base_angle:
                    base_angle -= math.pi / 2
                else:
                    base_angle += math.pi / 2
                break
        return base_angle

    def calculate_movement(self) -> float:
        """Pick the heading for the next move: towards the nearest food, around sparks."""
        if not self.game_active or not self.objects:
            return 0.0
        self.store_nearest_sparks()

        my_x, my_y = 0.0, 0.0
        found_myself = False
        for obj in self.objects:
            if obj.object_type == ObjectType.PLAYER and obj.object_no == self.my_player_number:
                my_x, my_y = obj.x, obj.y
                found_myself = True
        if not found_myself:
            log.info("Could not find my player")

        best_angle = 0.0
        min_distance = math.inf
        found_food = False
        for obj in self.objects:
            if obj.object_type != ObjectType.FOOD:
                continue
            distance = math.hypot(obj.x - my_x, obj.y - my_y)
            if distance < min_distance:
                min_distance = distance
                best_angle = self.avoid_spark_trajectory(obj.x, obj.y, my_x, my_y)
                found_food = True

        if not found_food:
            log.info("No food found")
            return 0.0
        log.debug("Moving towards nearest food: angle %.2f rad, distance %.1f", best_angle, min_distance)
        return best_angle