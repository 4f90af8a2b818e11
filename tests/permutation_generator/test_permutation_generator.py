import numpy as np
import pytest

from modules.permutation_generator import PermutationGenerator, random_candidate, sample
from modules.search_space import Candidate, SearchBoundaries, schema_from_config
from utils.exceptions import ConfigurationError


@pytest.fixture
def schema():
    return schema_from_config([
        {'name': 'x', 'kind': 'numeric-continuous'},
        {'name': 'mode', 'kind': 'categorical'},
    ])


@pytest.fixture
def boundaries():
    return SearchBoundaries({'x': [0.0, 1.0]}, {'mode': ['a', 'b']})


@pytest.fixture
def generator(schema, boundaries):
    return PermutationGenerator(schema, boundaries, points_per_dimension=3)


class TestFullSpace:
    def test_cartesian_product_last_dimension_fastest(self, generator):
        space = generator.build_full_space()
        assert len(space) == 6
        assert generator.space_size() == 6
        assert [c.as_dict() for c in space[:3]] == [
            {'x': 0.0, 'mode': 'a'},
            {'x': 0.0, 'mode': 'b'},
            {'x': 0.5, 'mode': 'a'},
        ]
        assert len(set(space)) == 6

    def test_candidate_at_matches_materialized_order(self, generator):
        space = generator.build_full_space()
        assert [generator.candidate_at(i) for i in range(len(space))] == space

    def test_single_point_dimension_collapses(self, schema):
        generator = PermutationGenerator(schema, SearchBoundaries({'x': [0.3, 0.3]}, {'mode': ['a', 'b']}), 5)
        assert [c['x'] for c in generator.build_full_space()] == [0.3, 0.3]

    def test_materialization_limit(self, schema, boundaries):
        generator = PermutationGenerator(schema, boundaries, 3, max_permutations=5)
        with pytest.raises(ConfigurationError, match="safety limit"):
            generator.build_full_space()

    def test_invalid_boundaries_rejected_up_front(self, schema):
        with pytest.raises(ConfigurationError, match="'mode'"):
            PermutationGenerator(schema, SearchBoundaries({'x': [0, 1]}, {'mode': []}), 3)


class TestSample:
    def test_sample_is_distinct_subset(self, generator):
        space = generator.build_full_space()
        drawn = sample(space, 3, seed=1)
        assert len(drawn) == 3
        assert len(set(drawn)) == 3
        assert set(drawn) <= set(space)

    def test_same_seed_same_sample(self, generator):
        space = generator.build_full_space()
        assert sample(space, 4, seed=42) == sample(space, 4, seed=42)

    def test_target_at_least_space_size_returns_full_space(self, generator):
        space = generator.build_full_space()
        assert sample(space, 6, seed=3) == space
        assert sample(space, 100, seed=3) == space

    def test_negative_target_rejected(self, generator):
        with pytest.raises(ConfigurationError):
            sample(generator.build_full_space(), -1, seed=0)

    def test_sample_space_matches_materialized_sample(self, generator):
        space = generator.build_full_space()
        for seed in (0, 1, 99):
            assert generator.sample_space(4, seed) == sample(space, 4, seed)
        assert generator.sample_space(10, 0) == space

    def test_sample_space_beyond_materialization_limit(self):
        schema = schema_from_config([{'name': f'x{i}', 'kind': 'numeric-continuous'} for i in range(8)])
        boundaries = SearchBoundaries({f'x{i}': [0, 1] for i in range(8)})
        generator = PermutationGenerator(schema, boundaries, 10, max_permutations=1000)
        drawn = generator.sample_space(20, seed=5)
        assert len(set(drawn)) == 20
        assert generator.space_size() == 10 ** 8

    def test_space_beyond_int64(self):
        names = [f'x{i}' for i in range(12)]
        schema = schema_from_config([{'name': n, 'kind': 'numeric-continuous'} for n in names])
        boundaries = SearchBoundaries({n: [0, 1] for n in names})
        generator = PermutationGenerator(schema, boundaries, 50)
        assert generator.space_size() == 50 ** 12

        drawn = generator.sample_space(25, seed=3)
        assert len(set(drawn)) == 25
        assert drawn == generator.sample_space(25, seed=3)
        grid = set(generator.value_arrays['x0'])
        assert all(c[n] in grid for c in drawn for n in names)


class TestRandomCandidate:
    def test_draws_stay_inside_boundaries(self):
        schema = schema_from_config([
            {'name': 'x', 'kind': 'numeric-continuous'},
            {'name': 'n', 'kind': 'numeric-integer'},
            {'name': 'mode', 'kind': 'categorical'},
            {'name': 'flag', 'kind': 'boolean'},
        ])
        boundaries = SearchBoundaries({'x': [-1.0, 1.0], 'n': [2, 4]}, {'mode': ['a', 'b', 'c']})
        rng = np.random.default_rng(0)
        for _ in range(200):
            candidate = random_candidate(schema, boundaries, rng)
            assert isinstance(candidate, Candidate)
            assert -1.0 <= candidate['x'] <= 1.0
            assert candidate['n'] in (2, 3, 4)
            assert candidate['mode'] in ('a', 'b', 'c')
            assert candidate['flag'] in (True, False)
