from dataclasses import dataclass, fields
import os

import yaml


@dataclass
class AntConfig:
    # Belief map
    INITIAL_MAP_SIZE: int = 5          # Side length before the first growth
    FOOD_DECAY_TICKS: int = 50         # Ticks per unit of remembered food lost
    OCCUPANCY_DECAY_TICKS: int = 5     # Ticks per remembered ant lost

    # Home zone
    INITIAL_RADIUS: int = 40           # Search radius around the anthill
    RADIUS_GRACE_ACTIONS: int = 30     # Actions before the radius starts shrinking
    RADIUS_SHRINK_INTERVAL: int = 10   # Actions per unit of radius lost
    HOME_BAND: int = 5                 # Max axis offset for a delivery cell

    # Modes
    START_AS_SCOUT: bool = True
    SCOUT_WINDOW: int = 20             # Actions spent scouting before gathering

    # Diagnostics
    STRICT_PLANS: bool = True          # Raise on plan/map divergence instead of halting
    METRICS_INTERVAL: int = 100        # Actions between metrics records

    def __post_init__(self):
        for name in ("INITIAL_MAP_SIZE", "FOOD_DECAY_TICKS", "OCCUPANCY_DECAY_TICKS",
                     "RADIUS_SHRINK_INTERVAL", "METRICS_INTERVAL"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        for name in ("INITIAL_RADIUS", "RADIUS_GRACE_ACTIONS", "SCOUT_WINDOW", "HOME_BAND"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")


# Safe load of ant.yaml, ignoring unknown keys
def load_config(path: str = "ant.yaml") -> AntConfig:
    """Load configuration from YAML, filter to AntConfig fields."""
    if not os.path.exists(path):
        return AntConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must hold a mapping of settings, got {type(raw).__name__}")
    valid = {f.name for f in fields(AntConfig)}
    filtered = {k: v for k, v in raw.items() if k in valid}
    return AntConfig(**filtered)
