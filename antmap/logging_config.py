"""Logging configuration for ant runs.

Creates two output files per run:
- <runs_dir>/latest.log: Human-readable narrative of plans, exchanges, errors
- <runs_dir>/latest_metrics.jsonl: Structured agent snapshots every N actions
"""

import logging
import json
from datetime import datetime
from pathlib import Path
from typing import Optional


DEFAULT_RUNS_DIR = Path.cwd() / "runs"

# Set by setup_logging(); metrics are dropped until then
METRICS_FILE: Optional[Path] = None


def setup_logging(runs_dir: Optional[Path] = None) -> logging.Logger:
    """Configure logging for a new run. Clears previous log files."""
    global METRICS_FILE

    runs_dir = Path(runs_dir) if runs_dir is not None else DEFAULT_RUNS_DIR
    runs_dir.mkdir(parents=True, exist_ok=True)
    log_file = runs_dir / "latest.log"
    METRICS_FILE = runs_dir / "latest_metrics.jsonl"

    # Clear previous log files
    if log_file.exists():
        log_file.unlink()
    if METRICS_FILE.exists():
        METRICS_FILE.unlink()

    # Create main logger
    logger = logging.getLogger("antmap")
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # File handler for narrative log (overwrites each run)
    file_handler = logging.FileHandler(log_file, mode='w')
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    # Console handler (INFO and above)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_format = logging.Formatter('[%(name)s] %(message)s')
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # Peer exchange logger (child of antmap)
    logging.getLogger("antmap.exchange").setLevel(logging.DEBUG)

    # Metrics logger (child of antmap)
    logging.getLogger("antmap.metrics").setLevel(logging.DEBUG)

    # Write run header
    logger.info(f"=== Ant Run Started: {datetime.now().isoformat()} ===")

    return logger


def get_logger(name: str = "antmap") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def log_metrics(tick: int, agent_state: dict):
    """
    Write metrics to JSONL file.

    Called every N actions to capture agent state for analysis.
    """
    if METRICS_FILE is None:
        return

    metrics = {
        "tick": tick,
        "timestamp": datetime.now().isoformat(),
        # Position and cargo
        "pos": list(agent_state.get("pos", (0, 0))),
        "has_food": agent_state.get("has_food", False),
        # Mode and planning
        "mode": agent_state.get("mode", ""),
        "radius": agent_state.get("radius", 0),
        "plan_goal": agent_state.get("plan_goal", ""),
        "plan_steps_remaining": agent_state.get("plan_steps_remaining", 0),
        "plans_made": agent_state.get("plans_made", 0),
        "plans_failed": agent_state.get("plans_failed", 0),
        # Map
        "map_size": agent_state.get("map_size", 0),
        "cells_known": agent_state.get("cells_known", 0),
        # Counters
        "actions_taken": agent_state.get("actions_taken", 0),
        "food_delivered": agent_state.get("food_delivered", 0),
        "exchanges": agent_state.get("exchanges", 0),
    }

    with open(METRICS_FILE, 'a') as f:
        f.write(json.dumps(metrics) + '\n')
    logging.getLogger("antmap.metrics").debug(f"metrics t={tick}")


def log_exchange(event_type: str, tick: int, **kwargs):
    """
    Log peer exchange events with structured data.

    Event types: SEND, RECV, REJECT
    """
    logger = logging.getLogger("antmap.exchange")

    msg_parts = [f"t={tick}", f"event={event_type}"]
    for key, value in kwargs.items():
        if isinstance(value, str) and len(value) > 60:
            value = value[:60] + "..."
        msg_parts.append(f"{key}={value}")

    if event_type == "REJECT":
        logger.warning(" | ".join(msg_parts))
    else:
        logger.info(" | ".join(msg_parts))


def log_divergence(tick: int, pos: tuple, action: str, snapshot: str):
    """Log a plan step the map refuses, with the map as the ant saw it."""
    logger = logging.getLogger("antmap")
    logger.error(
        f"DIVERGENCE t={tick} | pos={pos} action={action}\n{snapshot}"
    )
