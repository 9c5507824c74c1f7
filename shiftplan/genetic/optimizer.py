"""Generational driver for the shift schedule optimizer.

Key Design Decisions:
- Horizon: 30 days, one DayAssignment gene per day
- Fitness: penalty sum from genetic.fitness (lower is better, 0 is ideal)
- Elitism: elites keep their cached score; only new genomes are evaluated
- Determinism: every random draw goes through one random.Random(seed)
- Cancellation: checked once per generation boundary, best-so-far returned
- Progress: pushed to an optional callback, never awaited

Termination (remaining = generations left in the budget):
- stagnation counter reaches stagnation_limit
- remaining <= final_check, best <= extended_threshold, no violations and
  final balance within balance_tolerance of the target
- remaining <= second_check and best <= fitness_threshold
- remaining <= first_check and best == 0
- generation budget exhausted
"""

import logging
import random
import threading
import time
from typing import Callable, List, Optional, Sequence

from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.shift import ShiftCatalog
from shiftplan.models.schedule import DayAssignment, build_day_schedules
from shiftplan.models.optimization import OptimizationResult, ProgressEvent, RunStatus
from shiftplan.utils import format_computation_time

from shiftplan.genetic.config import GeneticConfig
from shiftplan.genetic.types import Evaluation, Individual, RunState
from shiftplan.genetic.crisis import CrisisContext, analyze_crisis
from shiftplan.genetic.fitness import evaluate_fitness
from shiftplan.genetic.initialization import initialize_population, locked_template
from shiftplan.genetic.operators import crossover, mutate, select_elites, tournament_selection
from shiftplan.genetic.optimizations import local_search

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class GeneticOptimizer:
    """Genetic algorithm over 30-day shift schedules.

    One instance executes one configuration. All run state lives on the
    instance, so separate instances can run concurrently without sharing.
    """

    def __init__(
        self,
        config: FinancialConfiguration,
        catalog: Optional[ShiftCatalog] = None,
        ga_config: Optional[GeneticConfig] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the optimizer.

        Args:
            config: Financial configuration to plan for
            catalog: Shift catalog (default values when omitted)
            ga_config: Genetic algorithm parameters (defaults when omitted)
            seed: Seed for the run's random stream; same seed, same result
        """
        self.config = config
        self.catalog = catalog or ShiftCatalog()
        self.ga_config = ga_config or GeneticConfig()
        self.seed = seed
        self.rng = random.Random(seed)
        self.state = RunState()
        self.context: Optional[CrisisContext] = None

        logger.info(
            f"GeneticOptimizer initialized: pop={self.ga_config.population_size}, "
            f"gens={self.ga_config.generations}, elites={self.ga_config.elite_size}, "
            f"tournament={self.ga_config.tournament_size}, seed={seed}"
        )

    def evaluate(self, genes: Sequence[DayAssignment]) -> Evaluation:
        """Score a genome against this run's configuration."""
        return evaluate_fitness(genes, self.config, self.catalog, self.context)

    def _evaluate_individual(self, individual: Individual) -> None:
        if individual.evaluation is None:
            individual.evaluation = self.evaluate(individual.genes)
            individual.fitness = individual.evaluation.fitness

    def run(
        self,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> OptimizationResult:
        """Run the genetic algorithm to completion or cancellation.

        Args:
            progress_callback: Receives a ProgressEvent every progress_interval generations
            cancel_event: Set by the caller to stop the run at the next generation boundary

        Returns:
            OptimizationResult with status CONVERGED or STOPPED

        Raises:
            UnknownShiftType: If a manual constraint references an unknown shift
        """
        started = time.perf_counter()
        ga = self.ga_config

        self.context = analyze_crisis(self.config, self.catalog, self.rng)
        self.state = RunState(is_crisis=self.context.is_crisis)

        population = initialize_population(ga, locked_template(self.config), self.context, self.rng)
        for individual in population:
            self._evaluate_individual(individual)
        population.sort(key=lambda ind: ind.fitness)
        self._update_best(population[0])

        logger.info(
            f"GA Initial: best={self.state.best_fitness:.2f}, pop={len(population)}, "
            f"target_work_days={self.context.target_work_days}, crisis={self.context.is_crisis}"
        )

        status = RunStatus.CONVERGED
        for generation in range(ga.generations):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"GA cancelled at gen {generation}: best={self.state.best_fitness:.2f}")
                status = RunStatus.STOPPED
                break

            self.state.generation = generation
            if progress_callback is not None and generation % ga.progress_interval == 0:
                progress_callback(self._progress_event(generation))
            if generation % ga.log_interval == 0:
                logger.debug(
                    f"Gen {generation}: best={self.state.best_fitness:.2f}, "
                    f"stagnation={self.state.stagnation}"
                )

            reason = self._termination_reason(ga.generations - generation)
            if reason:
                logger.info(f"GA converged at gen {generation} ({reason}): best={self.state.best_fitness:.2f}")
                break

            population = self._next_generation(population)
            self.state.generation = generation + 1
            self._update_best(population[0])
            self.state.fitness_history.append(population[0].fitness)

        best = self.state.best
        if status == RunStatus.CONVERGED and ga.use_local_search:
            refined = local_search(best, self.evaluate, self.context, ga.local_search_iterations)
            if refined.fitness < best.fitness:
                logger.info(f"Local search improved: {best.fitness:.2f} -> {refined.fitness:.2f}")
                best = refined
                self.state.best = best
                self.state.best_fitness = best.fitness

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"GA Final: status={status.value}, best={best.fitness:.2f} after "
            f"{self.state.generation} gens in {format_computation_time(elapsed_ms)}"
        )
        return self._build_result(status, best, elapsed_ms)

    def _next_generation(self, population: List[Individual]) -> List[Individual]:
        """Elites, then evaluated offspring, sorted by fitness (stable)."""
        ga = self.ga_config
        new_population = select_elites(population, ga.elite_size)

        while len(new_population) < ga.population_size:
            parent1 = tournament_selection(population, ga.tournament_size, self.rng)
            parent2 = tournament_selection(population, ga.tournament_size, self.rng)

            if self.rng.random() < ga.crossover_rate:
                child1, child2 = crossover(parent1, parent2, self.rng)
            else:
                child1, child2 = parent1.copy(), parent2.copy()

            mutate(child1, self.context, ga.mutation_rate, self.rng)
            mutate(child2, self.context, ga.mutation_rate, self.rng)

            self._evaluate_individual(child1)
            new_population.append(child1)
            if len(new_population) < ga.population_size:
                self._evaluate_individual(child2)
                new_population.append(child2)

        new_population.sort(key=lambda ind: ind.fitness)
        return new_population

    def _update_best(self, candidate: Individual) -> None:
        """Track best-ever individual and the stagnation counter."""
        state = self.state
        if candidate.fitness < state.best_fitness:
            if state.best is not None:
                logger.debug(
                    f"Gen {state.generation}: best={candidate.fitness:.2f} "
                    f"(improved {state.best_fitness - candidate.fitness:.2f})"
                )
            state.best = candidate.copy()
            state.best_fitness = candidate.fitness

        if candidate.fitness < state.stagnation_reference * self.ga_config.improvement_threshold:
            state.stagnation_reference = candidate.fitness
            state.stagnation = 0
        else:
            state.stagnation += 1

    def _termination_reason(self, remaining: int) -> Optional[str]:
        ga = self.ga_config
        state = self.state
        evaluation = state.best.evaluation

        if state.stagnation >= ga.stagnation_limit:
            return "stagnation"
        if (
            remaining <= ga.final_check
            and state.best_fitness <= ga.extended_threshold
            and evaluation.violations == 0
            and abs(evaluation.final_balance - self.config.target_ending_balance) <= ga.balance_tolerance
        ):
            return "target balance reached"
        if remaining <= ga.second_check and state.best_fitness <= ga.fitness_threshold:
            return "fitness threshold"
        if remaining <= ga.first_check and state.best_fitness == 0:
            return "optimal"
        return None

    def _progress_event(self, generation: int) -> ProgressEvent:
        best = self.state.best
        return ProgressEvent(
            generation=generation,
            progress=100.0 * generation / self.ga_config.generations,
            best_fitness=best.fitness,
            best_schedule_preview=best.preview(),
            violations=best.evaluation.violations,
            work_days=best.evaluation.work_days,
            balance=best.evaluation.final_balance,
            is_crisis_mode=self.state.is_crisis,
        )

    def _build_result(self, status: RunStatus, best: Individual, elapsed_ms: int) -> OptimizationResult:
        evaluation = best.evaluation
        return OptimizationResult(
            status=status,
            best_schedule=best.preview(),
            formatted_schedule=build_day_schedules(best.genes, self.config, self.catalog),
            best_fitness=best.fitness,
            final_balance=evaluation.final_balance,
            min_balance=evaluation.min_balance,
            total_earnings=evaluation.total_earnings,
            work_days=evaluation.work_days_list,
            work_days_count=evaluation.work_days,
            violations=evaluation.violations,
            generations_run=self.state.generation,
            elapsed_ms=elapsed_ms,
            computation_time=format_computation_time(elapsed_ms),
            is_crisis_mode=self.state.is_crisis,
            fitness_history=list(self.state.fitness_history),
        )
