"""
Configuration Manager Module
============================

Responsibility:
- Centralized loading and validation of JSON tuning configuration.
- Enforcement of schema constraints and logical rules (strategies, ratios, boundaries).
- Permutation space guardrails.
- Deterministic seed propagation for reproducibility.
"""

from .config_manager import ConfigurationManager

__all__ = ['ConfigurationManager']
