import numpy as np
import pytest

from modules.mutation_engine import CandidateMutator, MutationPolicy
from modules.search_space import Candidate, SearchBoundaries, schema_from_config
from utils.exceptions import ConfigurationError


@pytest.fixture
def schema():
    return schema_from_config([
        {'name': 'x', 'kind': 'numeric-continuous'},
        {'name': 'n', 'kind': 'numeric-integer'},
        {'name': 'mode', 'kind': 'categorical'},
        {'name': 'flag', 'kind': 'boolean'},
    ])


@pytest.fixture
def boundaries():
    return SearchBoundaries({'x': [0.0, 10.0], 'n': [1, 5]}, {'mode': ['a', 'b', 'c']})


@pytest.fixture
def parent():
    return Candidate.from_dict({'x': 2.0, 'n': 1, 'mode': 'a', 'flag': True})


@pytest.fixture
def other():
    return Candidate.from_dict({'x': 8.0, 'n': 5, 'mode': 'c', 'flag': False})


def make_mutator(schema, boundaries, mix, count=4, seed=0):
    return CandidateMutator(schema, boundaries, mix, MutationPolicy.fixed(count), np.random.default_rng(seed))


class TestMutate:
    def test_children_stay_inside_boundaries(self, schema, boundaries, parent):
        mutator = make_mutator(schema, boundaries, 0.5)
        for _ in range(300):
            child = mutator.mutate(parent)
            assert 0.0 <= child['x'] <= 10.0
            assert child['n'] in (1, 2, 3, 4, 5)
            assert isinstance(child['n'], int)
            assert child['mode'] in ('a', 'b', 'c')
            assert child['flag'] in (True, False)

    def test_full_mixing_keeps_parent(self, schema, boundaries, parent, other):
        mutator = make_mutator(schema, boundaries, 1.0)
        assert mutator.mutate(parent, secondary=other) == parent

    def test_zero_mixing_takes_counterpart_numerics(self, schema, boundaries, parent, other):
        mutator = make_mutator(schema, boundaries, 0.0)
        child = mutator.mutate(parent, secondary=other)
        assert child['x'] == 8.0
        assert child['n'] == 5

    def test_weighted_blend(self, schema, boundaries, parent, other):
        mutator = make_mutator(schema, boundaries, 0.75)
        child = mutator.mutate(parent, secondary=other)
        assert child['x'] == pytest.approx(2.0 * 0.75 + 8.0 * 0.25)
        assert child['n'] == 2

    def test_mutation_count_limits_changed_dimensions(self, schema, boundaries, parent, other):
        mutator = make_mutator(schema, boundaries, 0.0, count=1)
        for _ in range(50):
            child = mutator.mutate(parent, secondary=other)
            changed = [name for name in schema.names if child[name] != parent[name]]
            assert len(changed) <= 1

    def test_same_seed_same_children(self, schema, boundaries, parent):
        first = make_mutator(schema, boundaries, 0.5, seed=11)
        second = make_mutator(schema, boundaries, 0.5, seed=11)
        assert [first.mutate(parent) for _ in range(10)] == [second.mutate(parent) for _ in range(10)]

    def test_key_set_matches_schema(self, schema, boundaries, parent):
        child = make_mutator(schema, boundaries, 0.3).mutate(parent)
        assert child.names == tuple(schema.names)


class TestBreed:
    def test_single_parent_uses_random_counterpart(self, schema, boundaries, parent):
        mutator = make_mutator(schema, boundaries, 0.5)
        children = [mutator.breed([parent], generation=0) for _ in range(20)]
        assert any(child != parent for child in children)

    def test_empty_pool_rejected(self, schema, boundaries):
        with pytest.raises(ValueError):
            make_mutator(schema, boundaries, 0.5).breed([])


def test_mixing_outside_unit_interval_rejected(schema, boundaries):
    with pytest.raises(ConfigurationError, match="genetic_mixing"):
        make_mutator(schema, boundaries, 1.5)
