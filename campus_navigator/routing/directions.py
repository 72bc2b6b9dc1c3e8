"""DirectionSynthesizer - Turn-by-turn steps from a route polyline.

Walks the route coordinates and compares the heading into each interior
vertex with the heading out of it. Only bearing changes above the turn
threshold produce a step; straighter vertices just add to the distance
of the next step. The arrival step always carries the exact total length.

Legs shorter than MIN_LEG_M (typically the merge jog between two stitched
road segments) are walked but never used as a heading, so they cannot
produce phantom turns.

Bearing change buckets (DirectionConfig):
    |diff| < 30°        continue straight
    30° <= |diff| < 60°  bear left/right
    60° <= |diff| < 120° turn left/right
    |diff| >= 120°       sharp left/right
Positive differences are clockwise (right).
"""

import logging
from collections.abc import Sequence
from typing import Optional

from campus_navigator.constants import DirectionConfig
from campus_navigator.core.geo_calculator import GeoCalculator
from campus_navigator.model.coordinate import Coordinate
from campus_navigator.model.route import DirectionStep, Maneuver

logger = logging.getLogger(__name__)


class DirectionSynthesizer:
    """Generates DirectionSteps with configurable turn thresholds.

    Example:
        steps = DirectionSynthesizer().synthesize(
            coordinates=route.coordinates,
            start_label="PCE Main Gate",
            end_label="Library",
        )
    """

    def __init__(
        self,
        turn_threshold_deg: float = DirectionConfig.TURN_THRESHOLD_DEG,
        bear_min_deg: float = DirectionConfig.BEAR_MIN_DEG,
        bear_max_deg: float = DirectionConfig.BEAR_MAX_DEG,
        turn_max_deg: float = DirectionConfig.TURN_MAX_DEG,
        min_leg_m: float = DirectionConfig.MIN_LEG_M,
    ) -> None:
        if not 0 <= turn_threshold_deg < 180:
            raise ValueError(f"turn_threshold_deg must be in [0, 180), got {turn_threshold_deg}")
        if not 0 < bear_min_deg < bear_max_deg < turn_max_deg <= 180:
            raise ValueError(
                f"Turn buckets must satisfy 0 < bear_min < bear_max < turn_max <= 180, "
                f"got {bear_min_deg}, {bear_max_deg}, {turn_max_deg}"
            )
        if min_leg_m < 0:
            raise ValueError(f"min_leg_m must be non-negative, got {min_leg_m}")
        self.turn_threshold_deg = turn_threshold_deg
        self.bear_min_deg = bear_min_deg
        self.bear_max_deg = bear_max_deg
        self.turn_max_deg = turn_max_deg
        self.min_leg_m = min_leg_m

    def classify_turn(self, bearing_change_deg: float) -> Maneuver:
        """Map a signed bearing change (-180..180) to a Maneuver."""
        magnitude = abs(bearing_change_deg)
        if magnitude < self.bear_min_deg:
            return Maneuver.STRAIGHT
        right = bearing_change_deg > 0
        if magnitude < self.bear_max_deg:
            return Maneuver.BEAR_RIGHT if right else Maneuver.BEAR_LEFT
        if magnitude < self.turn_max_deg:
            return Maneuver.TURN_RIGHT if right else Maneuver.TURN_LEFT
        return Maneuver.SHARP_RIGHT if right else Maneuver.SHARP_LEFT

    def _heading_vertices(self, points: list[Coordinate]) -> list[int]:
        """Indices of points that define headings, skipping short legs.

        Always keeps the first and last point.
        """
        kept = [0]
        for i in range(1, len(points)):
            if points[kept[-1]].distance_to(points[i]) >= self.min_leg_m:
                kept.append(i)
        last = len(points) - 1
        if kept[-1] != last:
            if len(kept) > 1:
                kept[-1] = last
            else:
                kept.append(last)
        return kept

    def synthesize(
        self,
        coordinates: Sequence[Coordinate],
        start_label: Optional[str] = None,
        end_label: Optional[str] = None,
    ) -> list[DirectionStep]:
        """Build direction steps for a route.

        Args:
            coordinates: Route geometry in travel order
            start_label: Origin name; None means the route starts at a raw position
            end_label: Destination name

        Returns:
            [start, turns..., arrival]; a single arrival step for a one-point route;
            empty for an empty route.
        """
        destination = end_label or DirectionConfig.DEFAULT_END_LABEL

        points: list[Coordinate] = []
        for coord in coordinates:
            if not points or coord != points[-1]:
                points.append(coord)

        if not points:
            return []
        if len(points) == 1:
            return [
                DirectionStep(
                    instruction=f"You are already at {destination}",
                    distance_m=0.0,
                    maneuver=Maneuver.ARRIVE,
                    coordinate=points[0],
                )
            ]

        # Distance walked from the start up to each point
        walked_m = [0.0]
        for prev_pt, next_pt in zip(points, points[1:]):
            walked_m.append(walked_m[-1] + prev_pt.distance_to(next_pt))

        vertices = self._heading_vertices(points)

        first_bearing = points[vertices[0]].bearing_to(points[vertices[1]])
        heading = GeoCalculator.compass_direction(bearing_deg=first_bearing)
        if start_label is None:
            start_text = f"Head {heading} towards {destination}"
        else:
            start_text = f"Start from {start_label} and head {heading}"
        steps = [DirectionStep(instruction=start_text, distance_m=0.0, maneuver=Maneuver.START, coordinate=points[0])]

        last_step_m = 0.0
        for prev_i, i, next_i in zip(vertices, vertices[1:], vertices[2:]):
            current = points[i]
            bearing_in = points[prev_i].bearing_to(current)
            bearing_out = current.bearing_to(points[next_i])
            change = GeoCalculator.bearing_difference_deg(from_bearing=bearing_in, to_bearing=bearing_out)
            if abs(change) <= self.turn_threshold_deg:
                continue

            maneuver = self.classify_turn(bearing_change_deg=change)
            heading = GeoCalculator.compass_direction(bearing_deg=bearing_out)
            if maneuver is Maneuver.STRAIGHT:
                # Only reachable with a threshold below the bear bucket
                instruction = f"Continue straight {heading}"
            else:
                instruction = f"{maneuver.phrase} and continue {heading}"
            steps.append(
                DirectionStep(
                    instruction=instruction,
                    distance_m=walked_m[i] - last_step_m,
                    maneuver=maneuver,
                    coordinate=current,
                )
            )
            last_step_m = walked_m[i]

        total_m = walked_m[-1]
        steps.append(
            DirectionStep(
                instruction=f"Arrive at {destination}",
                distance_m=total_m,
                maneuver=Maneuver.ARRIVE,
                coordinate=points[-1],
            )
        )

        logger.debug(f"Synthesized {len(steps)} steps over {total_m:.0f}m from {len(points)} points")
        return steps


def synthesize_directions(
    coordinates: Sequence[Coordinate],
    start_label: Optional[str] = None,
    end_label: Optional[str] = None,
) -> list[DirectionStep]:
    """Direction steps with the default thresholds."""
    return DirectionSynthesizer().synthesize(coordinates=coordinates, start_label=start_label, end_label=end_label)
