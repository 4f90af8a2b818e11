"""
Mutation Engine
===============

Responsibility:
- Per-generation mutation-count policy (linear decay or fixed).
- Child candidate construction via weighted numeric blending and
  categorical inheritance.
"""

from .mutation_policy import MutationPolicy
from .candidate_mutator import CandidateMutator

__all__ = ['MutationPolicy', 'CandidateMutator']
