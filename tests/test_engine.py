import random

import pytest
from pydantic import ValidationError

from traitevo import Click, ConfigError, EngineConfig, EvolutionEngine, Hover
from traitevo.exceptions import EvolutionError, UnknownIndividualError


def _by_id(engine):
    return {ind.id: ind for ind in engine.individuals()}


class TestConfig:
    @pytest.mark.parametrize(
        "override",
        [
            {"population_size": 0},
            {"genome_length": 0},
            {"mutation_rate": 1.5},
            {"crossover_rate": -0.1},
            {"elitism_rate": 1.0},
            {"population_sise": 10},
        ],
    )
    def test_invalid_config_raises(self, small_config, override):
        with pytest.raises(ConfigError):
            EvolutionEngine({**small_config, **override}, seed=1)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            EvolutionEngine({"population_size": -3})

    def test_full_mutation_rate_is_allowed(self, small_config):
        engine = EvolutionEngine({**small_config, "mutation_rate": 1.0}, seed=1)
        assert engine.config.mutation_rate == 1.0

    def test_model_validation_errors(self):
        with pytest.raises(ValidationError):
            EngineConfig(population_size=0)

    def test_defaults(self):
        config = EngineConfig()
        assert config.population_size == 50
        assert config.genome_length == 128
        assert config.mutation_rate == 0.15
        assert config.crossover_rate == 0.8
        assert config.elitism_rate == 0.1

    def test_rng_and_seed_are_exclusive(self, small_config):
        with pytest.raises(ValueError):
            EvolutionEngine(small_config, rng=random.Random(1), seed=1)


class TestTick:
    def test_initial_state(self, engine):
        stats = engine.stats()
        assert stats.generation == 0
        assert stats.population_size == 10
        assert stats.fitness_history == ()
        assert stats.active_pressures == ()
        assert len({ind.id for ind in engine.individuals()}) == 10

    def test_population_size_is_constant(self, engine):
        for expected in range(1, 8):
            engine.tick()
            assert len(engine.individuals()) == 10
            assert engine.generation == expected

    def test_everything_stays_bounded(self, small_config):
        engine = EvolutionEngine({**small_config, "mutation_rate": 1.0}, seed=3)
        for _ in range(15):
            engine.tick()
        for ind in engine.individuals():
            assert 0.0 <= ind.fitness <= 1.0
            assert all(0.0 <= g <= 1.0 for g in ind.genome)
            assert all(0.0 <= v <= 1.0 for v in ind.performance.scalars())
            assert all(0.0 <= v <= 1.0 for v in ind.adaptive_state.scalars())
            assert len(ind.parent_ids) in (0, 2)

    def test_elites_survive_unchanged(self, engine):
        engine.tick()
        pressures = engine.environment.active
        before = engine.individuals()
        expected = sorted(
            ((engine.evaluator(ind, pressures), ind) for ind in before),
            key=lambda pair: pair[0],
            reverse=True,
        )[:2]

        engine.tick()

        after = _by_id(engine)
        for fitness, elite in expected:
            assert elite.id in after
            survivor = after[elite.id]
            assert survivor.genome == elite.genome
            assert survivor.fitness == pytest.approx(fitness)

    def test_top_two_before_tick_carry_over(self, engine):
        # generations 1..9 share one pressure set; a resample rescores everyone
        for _ in range(9):
            before = sorted(engine.individuals(), key=lambda ind: ind.fitness, reverse=True)[:2]

            engine.tick()

            after = _by_id(engine)
            for elite in before:
                assert elite.id in after
                assert after[elite.id].genome == elite.genome
                assert after[elite.id].fitness == elite.fitness

    def test_stored_fitness_is_current(self, engine):
        for _ in range(3):
            engine.tick()
        pressures = engine.environment.active
        for ind in engine.individuals():
            assert ind.fitness == engine.evaluator(ind, pressures)

    def test_same_seed_same_run(self, small_config):
        a = EvolutionEngine(small_config, seed=11)
        b = EvolutionEngine(small_config, seed=11)
        for _ in range(12):
            a.tick()
            b.tick()
        assert a.top_k(10) == b.top_k(10)
        assert a.stats() == b.stats()

    def test_same_seed_same_run_with_interactions(self, small_config):
        a = EvolutionEngine(small_config, seed=13)
        b = EvolutionEngine(small_config, seed=13)
        for step in range(12):
            for engine in (a, b):
                leader = engine.top_k(1)[0].id
                engine.report_interaction(leader, Click())
                if step % 3 == 0:
                    trailer = engine.top_k(10)[-1].id
                    engine.report_interaction(trailer, Hover())
                engine.tick()
            assert a.stats() == b.stats()
            assert a.top_k(10) == b.top_k(10)

    def test_engines_do_not_share_state(self, small_config):
        a = EvolutionEngine(small_config, seed=5)
        b = EvolutionEngine(small_config, seed=6)
        b_ids = set(_by_id(b))
        a.tick()
        a.tick()
        assert b.generation == 0
        assert set(_by_id(b)) == b_ids

    def test_crossover_offspring_differ_from_parents(self):
        engine = EvolutionEngine(
            {
                "population_size": 10,
                "genome_length": 8,
                "mutation_rate": 0.0,
                "crossover_rate": 1.0,
                "elitism_rate": 0.0,
            },
            seed=21,
        )
        parents = _by_id(engine)

        engine.tick()

        for child in engine.individuals():
            assert child.id not in parents
            assert len(child.parent_ids) == 2
            assert child.generation == 1
            assert child.mutation_count == 0
            p1, p2 = (parents[pid] for pid in child.parent_ids)
            assert p1.id != p2.id
            assert child.genome != p1.genome
            assert child.genome != p2.genome

    def test_full_mutation_touches_every_offspring(self):
        engine = EvolutionEngine(
            {
                "population_size": 10,
                "genome_length": 8,
                "mutation_rate": 1.0,
                "elitism_rate": 0.0,
            },
            seed=8,
        )
        engine.tick()
        for ind in engine.individuals():
            assert ind.mutation_count >= 8
            assert ind.history[-1].generation == 1
            assert ind.history[-1].mutated_genes == tuple(range(8))
        assert engine.stats().total_mutations >= 80
        assert engine.metrics.mutations_applied == 10

    def test_offspring_carry_their_birth_generation(self):
        engine = EvolutionEngine(
            {
                "population_size": 10,
                "genome_length": 8,
                "mutation_rate": 0.0,
                "crossover_rate": 0.0,
                "elitism_rate": 0.0,
            },
            seed=3,
        )
        engine.tick()
        engine.tick()
        for ind in engine.individuals():
            assert ind.generation == 2
            assert ind.parent_ids == []

    def test_pressures_resample_on_interval(self, small_config):
        engine = EvolutionEngine({**small_config, "pressure_probability": 1.0}, seed=2)
        for _ in range(9):
            engine.tick()
        assert engine.stats().active_pressures == ()

        engine.tick()
        assert engine.stats().active_pressures == (
            "mobile_first",
            "accessibility",
            "performance",
        )
        assert engine.metrics.environment_shifts == 1

    def test_pressures_never_exceed_cap(self, engine):
        for _ in range(40):
            engine.tick()
            assert len(engine.stats().active_pressures) <= 3

    def test_failed_step_is_wrapped(self, engine, monkeypatch):
        def _boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(engine.population, "step", _boom)
        with pytest.raises(EvolutionError):
            engine.tick()
        assert engine.generation == 0


class TestInteractions:
    def test_click_updates_metrics(self, engine):
        target = engine.individuals()[0]
        engine.report_interaction(target.id, Click())

        updated = _by_id(engine)[target.id]
        assert updated.performance.effectiveness == pytest.approx(
            min(1.0, target.performance.effectiveness + 0.04)
        )
        assert updated.performance.engagement == pytest.approx(
            min(1.0, target.performance.engagement + 0.05)
        )
        assert engine.metrics.interactions == 1

    def test_click_clamps_effectiveness(self, engine):
        target_id = engine.individuals()[0].id
        engine.population.find(target_id).performance.effectiveness = 0.99

        engine.report_interaction(target_id, Click())

        assert _by_id(engine)[target_id].performance.effectiveness == 1.0

    def test_unknown_id_changes_nothing(self, engine):
        before = [ind.model_dump() for ind in engine.individuals()]
        with pytest.raises(UnknownIndividualError) as excinfo:
            engine.report_interaction("not-an-id", Hover())
        assert excinfo.value.individual_id == "not-an-id"
        assert [ind.model_dump() for ind in engine.individuals()] == before
        assert engine.metrics.interactions == 0

    def test_unknown_id_is_key_error(self, engine):
        with pytest.raises(KeyError):
            engine.report_interaction("missing", Click())

    def test_fitness_waits_for_next_evaluation(self, engine):
        engine.tick()
        target = engine.individuals()[0]
        for _ in range(5):
            engine.report_interaction(target.id, Click())
        assert _by_id(engine)[target.id].fitness == target.fitness

    def test_retired_individual_is_unknown(self):
        engine = EvolutionEngine(
            {"population_size": 5, "genome_length": 8, "elitism_rate": 0.0}, seed=4
        )
        old_id = engine.individuals()[0].id
        engine.tick()
        with pytest.raises(UnknownIndividualError):
            engine.report_interaction(old_id, Click())


class TestReads:
    def test_top_k_is_sorted(self, engine):
        for _ in range(3):
            engine.tick()
        top = engine.top_k(5)
        assert len(top) == 5
        fitness = [entry.fitness for entry in top]
        assert fitness == sorted(fitness, reverse=True)
        assert top[0].fitness == engine.stats().best_fitness

    def test_top_k_bounds(self, engine):
        engine.tick()
        assert engine.top_k(0) == []
        assert len(engine.top_k(100)) == 10
        with pytest.raises(ValueError):
            engine.top_k(-1)

    def test_top_k_carries_decoded_traits(self, engine):
        engine.tick()
        entry = engine.top_k(1)[0]
        assert entry.traits == _by_id(engine)[entry.id].traits

    def test_fitness_history(self, engine):
        for _ in range(4):
            engine.tick()
        stats = engine.stats()
        assert stats.generation == 4
        assert len(stats.fitness_history) == 4
        assert all(0.0 <= f <= 1.0 for f in stats.fitness_history)

    def test_snapshot_edits_do_not_leak(self, engine):
        engine.tick()
        leader = engine.top_k(1)[0]
        victim = engine.individuals()[-1]
        original = victim.model_dump()
        victim.fitness = 1.0
        victim.performance.engagement = 1.0

        assert engine.top_k(1)[0] == leader
        assert engine.individuals()[-1].model_dump() == original
        assert engine.population.find(victim.id) is not victim
        assert engine.stats().best_fitness == leader.fitness

    def test_each_read_returns_fresh_copies(self, engine):
        first = engine.individuals()
        second = engine.individuals()
        assert first == second
        assert all(a is not b for a, b in zip(first, second))

    def test_status(self, engine):
        engine.tick()
        status = engine.get_status()
        assert status["generation"] == 1
        assert status["total_generations"] == 1
        assert status["crossovers"] + status["clones"] == 8
