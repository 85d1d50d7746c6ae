import math

import pytest

from traitevo.evolution.environment import EnvironmentDeltas, Pressure, adaptation_score
from traitevo.evolution.fitness import FitnessEvaluator, FitnessWeights, genome_entropy
from traitevo.individuals.codec import decode
from traitevo.individuals.individual import AdaptiveState, PerformanceMetrics


class TestGenomeEntropy:
    def test_uniform_histogram_is_maximal(self):
        genome = [0.05 + 0.1 * i for i in range(10)]
        assert genome_entropy(genome) == pytest.approx(1.0)

    def test_single_bucket_scores_zero(self):
        assert genome_entropy([0.31, 0.32, 0.35, 0.39]) == 0.0

    def test_gene_of_one_lands_in_last_bucket(self):
        assert genome_entropy([1.0, 0.95, 0.91]) == 0.0

    def test_two_even_buckets(self):
        assert genome_entropy([0.0, 0.0, 0.5, 0.5]) == pytest.approx(1 / math.log2(10))

    def test_empty_genome(self):
        assert genome_entropy([]) == 0.0


class TestEnvironmentAdaptation:
    def test_no_pressures_is_baseline(self):
        assert adaptation_score(decode((0.0,) * 30), ()) == 0.5

    def test_all_ruled_pressures(self):
        # zero genome: scale 0.8 (pass), lightness 30 (fail), duration 0.3 (pass), hover 0 (fail)
        traits = decode((0.0,) * 30)
        pressures = (
            Pressure.MOBILE_FIRST,
            Pressure.ACCESSIBILITY,
            Pressure.PERFORMANCE,
            Pressure.USER_ENGAGEMENT,
        )
        assert adaptation_score(traits, pressures) == pytest.approx(0.6)

    def test_unruled_pressures_change_nothing(self):
        traits = decode((0.7,) * 30)
        assert adaptation_score(traits, (Pressure.MINIMALISM, Pressure.COHERENCE)) == 0.5

    def test_result_is_clamped(self):
        deltas = EnvironmentDeltas(baseline=1.0, reward=0.5, penalty=0.0)
        traits = decode((0.0,) * 30)
        assert adaptation_score(traits, (Pressure.MOBILE_FIRST,), deltas) == 1.0


class TestFitnessEvaluator:
    def test_weighted_sum(self, individual_factory):
        ind = individual_factory(
            performance=PerformanceMetrics(
                engagement=0.5,
                appeal=0.5,
                effectiveness=0.5,
                adaptation_success=0.5,
                resonance=0.5,
                coherence=0.5,
            ),
            adaptive_state=AdaptiveState(
                awareness=0.2,
                self_modification=0.2,
                foresight=0.2,
                creativity=0.2,
                empathy=0.2,
                insight=0.2,
            ),
        )
        result = FitnessEvaluator().breakdown(ind)

        assert result.aesthetic == pytest.approx(0.5)
        assert result.functional == pytest.approx(0.5)
        assert result.cognitive == pytest.approx(0.2)
        assert result.coherence == pytest.approx(0.5)
        assert result.diversity == 0.0
        assert result.environment == 0.5
        assert result.adaptive_bonus == pytest.approx(0.4)
        assert result.total == pytest.approx(
            0.125 + 0.125 + 0.03 + 0.05 + 0.0 + 0.05 + 0.02
        )

    def test_total_is_clamped(self, individual_factory):
        ind = individual_factory(
            performance=PerformanceMetrics(
                engagement=1.0, appeal=1.0, effectiveness=1.0, adaptation_success=1.0
            )
        )
        heavy = FitnessWeights(aesthetic=5.0, functional=5.0)
        assert FitnessEvaluator(heavy)(ind) == 1.0

    def test_zero_individual_is_finite(self, individual_factory):
        score = FitnessEvaluator()(individual_factory())
        assert not math.isnan(score)
        assert 0.0 <= score <= 1.0

    def test_pressures_feed_environment_term(self, individual_factory):
        ind = individual_factory()
        evaluator = FitnessEvaluator()
        plain = evaluator(ind)
        pressed = evaluator(ind, (Pressure.MOBILE_FIRST,))
        assert pressed - plain == pytest.approx(0.1 * 0.1)
