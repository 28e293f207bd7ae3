"""Base classes for all symbolic derivation stages."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import numpy as np
import sympy as sp


class Derivation(ABC):
    """Base class for a stage that produces immutable symbolic artifacts.

    Subclasses receive the outputs of earlier stages as constructor arguments
    and implement :meth:`derive`, which returns a dict of named artifacts.
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = config or {}
        self.results = {}

    @abstractmethod
    def derive(self) -> Dict[str, Any]:
        """Build the symbolic artifacts of this stage."""
        pass

    def to_json_compatible(self) -> Dict:
        """Convert results to JSON-serializable format."""
        return self._convert_to_json(self.results)

    def _convert_to_json(self, obj: Any) -> Any:
        """Recursively convert sympy and numpy types to Python native."""
        if isinstance(obj, sp.MatrixBase):
            return [[str(v) for v in row] for row in obj.tolist()]
        if isinstance(obj, sp.Basic):
            return str(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, dict):
            return {str(k): self._convert_to_json(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [self._convert_to_json(v) for v in obj]
        if hasattr(obj, '__dict__'):  # Handle dataclasses
            return self._convert_to_json(obj.__dict__)
        return obj


class CompositeDerivation(Derivation):
    """Run several independent derivations and combine their results."""

    def __init__(self, derivations: Dict[str, Derivation]):
        super().__init__()
        self.derivations = derivations

    def derive(self) -> Dict[str, Any]:
        results = {}
        for name, derivation in self.derivations.items():
            results[name] = derivation.derive()
        self.results = results
        return results
