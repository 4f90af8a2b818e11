"""
Custom exception hierarchy for the Evolutionary Hyperparameter Tuning Engine.
"""

class TuningException(Exception):
    """Base exception for all system errors."""
    pass

class ConfigurationError(TuningException):
    """Configuration validation failed."""
    pass

class DataValidationError(TuningException):
    """Input dataset could not be used for tuning."""
    pass

class EvaluationError(TuningException):
    """A single candidate evaluation failed inside the trainer."""
    pass

class EvolutionError(TuningException):
    """
    Run-level fatal condition (e.g. no eligible parents left to mutate from).

    The population collected up to the failure is attached for postmortem inspection.
    """

    def __init__(self, message: str, population=None):
        super().__init__(message)
        self.population = population
