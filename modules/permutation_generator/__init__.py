"""
Permutation Generator
=====================

Responsibility:
- Cartesian-product configuration space per model family schema.
- Seeded random subsampling without replacement.
- Uniform random candidates drawn straight from the boundaries.
"""

from .permutation_generator import PermutationGenerator, sample, random_candidate

__all__ = ['PermutationGenerator', 'sample', 'random_candidate']
