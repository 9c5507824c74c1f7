"""Genetic algorithm modules for shift schedule optimization."""

from shiftplan.genetic.config import GeneticConfig, FAST_CONFIG, ACCURATE_CONFIG
from shiftplan.genetic.types import Evaluation, Individual, RunState
from shiftplan.genetic.crisis import CrisisContext, analyze_crisis
from shiftplan.genetic.fitness import evaluate_fitness
from shiftplan.genetic.optimizer import GeneticOptimizer

__all__ = [
    "GeneticConfig",
    "FAST_CONFIG",
    "ACCURATE_CONFIG",
    "Evaluation",
    "Individual",
    "RunState",
    "CrisisContext",
    "analyze_crisis",
    "evaluate_fitness",
    "GeneticOptimizer",
]
