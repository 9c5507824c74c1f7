"""Configuration for the genetic algorithm.

Contains every tunable of the optimizer loop. Defaults give a population of
200 over 500 generations, which settles a 30-day month in a few seconds.

## OPTIMIZATION NOTES:

Speed vs Accuracy tradeoff:
- FAST: pop=60, gens=150 (~9k evals) - interactive previews
- DEFAULT: pop=200, gens=500 (~100k evals)
- ACCURATE: pop=300, gens=800 (~240k evals) - crisis months

Early termination usually stops a default run well before 500 generations
once the best fitness stagnates.
"""

from dataclasses import dataclass


@dataclass
class GeneticConfig:
    """Configuration for genetic algorithm.

    Elite size is max(min_elite_size, elite_percentage * population_size),
    clamped to the population size.
    """
    # Core GA parameters
    population_size: int = 200
    generations: int = 500
    mutation_rate: float = 0.15   # Per day slot
    crossover_rate: float = 0.7
    elite_percentage: float = 0.2
    min_elite_size: int = 30
    tournament_size: int = 7

    # Stagnation
    stagnation_limit: int = 150
    improvement_threshold: float = 0.99  # Relative factor: new best must beat old * 0.99

    # Early termination (checks count remaining generations)
    first_check: int = 300
    second_check: int = 100
    final_check: int = 50
    fitness_threshold: float = 1000.0
    extended_threshold: float = 100.0
    balance_tolerance: float = 5.0

    # Reporting
    progress_interval: int = 50
    log_interval: int = 100

    # Refinement of the best individual after the loop
    use_local_search: bool = True
    local_search_iterations: int = 5

    @property
    def elite_size(self) -> int:
        size = max(self.min_elite_size, int(self.elite_percentage * self.population_size))
        return min(size, self.population_size)


# Alternative configs for different scenarios
FAST_CONFIG = GeneticConfig(
    population_size=60,
    generations=150,
    min_elite_size=10,
    stagnation_limit=50,
    first_check=90,
    second_check=30,
    final_check=15,
    progress_interval=10,
    log_interval=25,
    use_local_search=False,
)

ACCURATE_CONFIG = GeneticConfig(
    population_size=300,
    generations=800,
    stagnation_limit=200,
    local_search_iterations=10,
)
