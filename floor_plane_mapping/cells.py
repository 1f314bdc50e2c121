import math
from abc import ABC, abstractmethod


class Cell(ABC):
    """
    Probabilistic occupancy state of a single grid cell.

    A cell that is neither occupied nor free is unknown.
    """

    def __init__(self):
        # Number of reinforcements applied since the last reset
        self.observations = 0

    @abstractmethod
    def is_occupied(self):
        ...

    @abstractmethod
    def is_free(self):
        ...

    @abstractmethod
    def occupancy_probability(self):
        ...

    @abstractmethod
    def _apply(self, delta):
        """Move the state by delta (positive = towards occupied)."""

    @abstractmethod
    def reset(self):
        ...

    def is_unknown(self):
        return not (self.is_occupied() or self.is_free())

    def reinforce_occupied(self, weight=1.0):
        self._apply(self._check_weight(weight))
        self.observations += 1

    def reinforce_free(self, weight=1.0):
        self._apply(-self._check_weight(weight))
        self.observations += 1

    @staticmethod
    def _check_weight(weight):
        weight = float(weight)
        if not weight >= 0.0:
            raise ValueError(f"Reinforcement weight must be non-negative, got {weight}")
        return weight


class LogOddsCell(Cell):
    """Log-odds accumulator saturating at +/- LIMIT (hector_mapping style)."""

    INCREMENT = 0.5
    THRESHOLD = 1e-6
    LIMIT = 30.0

    def __init__(self):
        super().__init__()
        self.logodds = 0.0

    def is_occupied(self):
        return self.logodds > self.THRESHOLD

    def is_free(self):
        return self.logodds < -self.THRESHOLD

    def occupancy_probability(self):
        return 1.0 / (1.0 + math.exp(-self.logodds))

    def _apply(self, delta):
        value = self.logodds + delta * self.INCREMENT
        self.logodds = min(self.LIMIT, max(-self.LIMIT, value))

    def reset(self):
        self.logodds = 0.0
        self.observations = 0


class RunningAverageCell(Cell):
    """Probability nudged by a fixed step, kept strictly inside (0, 1)."""

    STEP = 0.1
    THRESHOLD = 0.5
    MIN_PROBABILITY = 0.01
    MAX_PROBABILITY = 0.99

    def __init__(self):
        super().__init__()
        self.probability = 0.5

    def is_occupied(self):
        return self.probability > self.THRESHOLD

    def is_free(self):
        return self.probability < self.THRESHOLD

    def occupancy_probability(self):
        return self.probability

    def _apply(self, delta):
        value = self.probability + delta * self.STEP
        self.probability = min(self.MAX_PROBABILITY, max(self.MIN_PROBABILITY, value))

    def reset(self):
        self.probability = 0.5
        self.observations = 0


CELL_POLICIES = {
    'log_odds': LogOddsCell,
    'running_average': RunningAverageCell,
}


def cell_policy(name):
    """Look up a cell class by its policy name."""
    try:
        return CELL_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown cell policy '{name}', expected one of {sorted(CELL_POLICIES)}"
        ) from None
