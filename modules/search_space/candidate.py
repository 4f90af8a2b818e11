from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Tuple


@dataclass(frozen=True)
class Candidate:
    """
    One concrete hyperparameter assignment.

    Stored as an ordered tuple of (name, value) pairs so the object is immutable,
    hashable and compared purely by value. Provenance (sequence id, generation)
    is carried by the EvaluationResult, not by the candidate itself.
    """
    values: Tuple[Tuple[str, Any], ...]

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> 'Candidate':
        return cls(tuple(params.items()))

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.values)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.values)

    def __getitem__(self, name: str) -> Any:
        for key, value in self.values:
            if key == name:
                return value
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.values)
        return f"Candidate({inner})"
