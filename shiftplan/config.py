"""Configuration module for constants, penalty weights, and settings."""

from typing import Dict, List, Optional
from pydantic_settings import BaseSettings


# Planning horizon (days are numbered 1..HORIZON_LENGTH at the interface)
HORIZON_LENGTH = 30


# Default shift values in dollars: net is what lands in the account
SHIFT_VALUES: Dict[str, Dict[str, float]] = {
    "large": {
        "net": 86.5,
        "gross": 94.5,
    },
    "medium": {
        "net": 67.5,
        "gross": 75.5,
    },
    "small": {
        "net": 56.0,
        "gross": 64.0,
    },
}


# Fitness weights - violations must dominate every other term
FITNESS_WEIGHTS = {
    "BALANCE": {
        "FINAL_BALANCE_PENALTY": 100,
        "VIOLATION_PENALTY": 5000,
        "CRITICAL_DAY_BUFFER": 200,
        "OVERSHOOT_MULTIPLIER": 2,
        "FIXED_BALANCE_PENALTY": 1000,
        "TARGET_MISS_PENALTY": 1000,  # Crisis mode only: flat penalty for ending under target
    },
    "WORK_DAYS": {
        "WORK_DAY_DIFF_PENALTY": 200,
        "CONSECUTIVE_DAY_PENALTY": 500,
        "MAX_CONSECUTIVE_DAYS": 5,
        "SMALL_GAP_PENALTY": 150,
        "MIN_GAP_DAYS": 2,
        "GAP_VARIANCE_WEIGHT": 150,
    },
    "CLUSTERING": {
        "WINDOW_SIZE": 5,
        "MAX_WORK_DAYS_IN_WINDOW": 3,
        "CLUSTERING_PENALTY": 300,
    },
}


# Probability distributions for schedule generation and mutation.
# Double shifts are written "first+second".
PROBABILITIES = {
    "CRISIS_MODE": {
        # Critical days (first pass)
        "FIRST_PASS": {
            "large+large": 0.4,
            "mixed_large": 0.4,  # medium+large or large+medium
            "medium+medium": 0.2,
        },
        # Remaining work days (second pass)
        "SECOND_PASS": {
            "large+large": 0.3,
            "mixed_large": 0.4,
            "medium+medium": 0.3,
        },
    },
    "NORMAL_MODE": {
        "large": 0.6,
        "medium": 0.2,
        "small": 0.2,
    },
    "SHIFT_PLACEMENT": {
        "large": 0.5,
        "medium": 0.3,
        "small": 0.2,
    },
    # Chance of stacking a second small/medium shift on a non-large fill day
    "DOUBLE_SHIFT": 0.3,
    "MUTATION": {
        "REMOVE": 0.2,
        "TO_SMALL": 0.3,
        "TO_MEDIUM": 0.2,
        "TO_LARGE": 0.15,
        "ADD_SHIFT": 0.5,
        "KEEP_WELL_SPACED": 0.8,
        "ADD_ADJACENT": 0.2,
    },
}


CRITICAL_DAY_PARAMS = {
    "MIN_DAYS_BEFORE": 2,
    "MAX_DAYS_BEFORE": 5,
    "RANDOM_RANGE": 4,
    "CRISIS_MODE_USAGE": 0.9,
}


# Application configuration
class Config(BaseSettings):
    """Application configuration with environment variable support."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "shiftplan.log"
    PROGRESS_LOG_FILE: Optional[str] = None  # JSONL trace of progress events

    # API server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: List[str] = ["*"]
    SERVER_REGION: str = "local"  # Reported in performance metrics

    # Optimization runs
    EVENT_QUEUE_SIZE: int = 16  # Progress events buffered per run
    MAX_RUN_HISTORY: int = 50   # Finished runs kept for polling

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
