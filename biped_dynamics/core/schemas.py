"""Numeric parameter sets for the five-link biped.

Links are numbered from the stance foot outwards:
  1 - stance tibia, 2 - stance femur, 3 - torso, 4 - swing femur, 5 - swing tibia
"""

from typing import Dict, Tuple, Any
from dataclasses import dataclass
import math

from .errors import InvalidParameterError

NUM_LINKS = 5
LINK_NAMES = ('stance_tibia', 'stance_femur', 'torso', 'swing_femur', 'swing_tibia')


@dataclass(frozen=True)
class LinkParameters:
    """Physical parameters of a single rigid link."""
    mass: float                 # kg
    com_offset: float           # m, from the joint the CoM is measured from
    length: float               # m
    inertia: float              # kg·m², about the link CoM

    def validate(self, name: str = 'link') -> None:
        for attr in ('mass', 'com_offset', 'length', 'inertia'):
            value = getattr(self, attr)
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name}.{attr} must be finite, got {value!r}")
        if self.mass <= 0:
            raise InvalidParameterError(f"{name}.mass must be positive, got {self.mass}")
        if self.length <= 0:
            raise InvalidParameterError(f"{name}.length must be positive, got {self.length}")
        if self.inertia <= 0:
            raise InvalidParameterError(f"{name}.inertia must be positive, got {self.inertia}")
        if self.com_offset < 0:
            raise InvalidParameterError(
                f"{name}.com_offset must be non-negative, got {self.com_offset}")


@dataclass(frozen=True)
class BipedParameters:
    """Complete parameter set: five links plus gravity."""
    links: Tuple[LinkParameters, ...]
    gravity: float = 9.81       # m/s²

    def __post_init__(self):
        object.__setattr__(self, 'links', tuple(self.links))
        self.validate()

    def validate(self) -> None:
        if len(self.links) != NUM_LINKS:
            raise InvalidParameterError(
                f"expected {NUM_LINKS} links, got {len(self.links)}")
        for name, link in zip(LINK_NAMES, self.links):
            link.validate(name)
        if not math.isfinite(self.gravity) or self.gravity < 0:
            raise InvalidParameterError(
                f"gravity must be finite and non-negative, got {self.gravity!r}")

    @property
    def total_mass(self) -> float:
        return float(sum(link.mass for link in self.links))

    def symbol_values(self) -> Dict[str, float]:
        """Map evaluator argument names (m1, I1, l1, c1, ..., g) to values."""
        values: Dict[str, float] = {}
        for i, link in enumerate(self.links, start=1):
            values[f'm{i}'] = link.mass
            values[f'I{i}'] = link.inertia
            values[f'l{i}'] = link.length
            values[f'c{i}'] = link.com_offset
        values['g'] = self.gravity
        return values

    def to_dict(self) -> Dict[str, Any]:
        return {
            'links': [
                {'name': name, 'mass': l.mass, 'com_offset': l.com_offset,
                 'length': l.length, 'inertia': l.inertia}
                for name, l in zip(LINK_NAMES, self.links)
            ],
            'gravity': self.gravity,
        }


def default_parameters() -> BipedParameters:
    """Human-scale parameter set for a 40 kg walker."""
    tibia = LinkParameters(mass=3.2, com_offset=0.2, length=0.4, inertia=0.043)
    femur = LinkParameters(mass=6.8, com_offset=0.2, length=0.4, inertia=0.091)
    torso = LinkParameters(mass=20.0, com_offset=0.2, length=0.625, inertia=0.65)
    return BipedParameters(links=(tibia, femur, torso, femur, tibia), gravity=9.81)
