"""Parameter loaders for various data formats."""

import json
from pathlib import Path
from typing import Any, Dict, Union

from ..core.schemas import LINK_NAMES, NUM_LINKS, BipedParameters, LinkParameters

_LINK_FIELDS = ('mass', 'com_offset', 'length', 'inertia')
_SHORT_KEYS = {'m': 'mass', 'c': 'com_offset', 'l': 'length', 'I': 'inertia'}


def _link_from_dict(entry: Dict[str, Any]) -> LinkParameters:
    missing = [f for f in _LINK_FIELDS if f not in entry]
    if missing:
        raise ValueError(f"link entry is missing {', '.join(missing)}")
    return LinkParameters(**{f: float(entry[f]) for f in _LINK_FIELDS})


def parameters_from_dict(data: Dict[str, Any]) -> BipedParameters:
    """
    Build a parameter set from a plain dictionary.

    Three layouts are accepted:
      - ``{"links": [{"mass": ..., "com_offset": ..., "length": ..., "inertia": ...}, ...],
        "gravity": 9.81}``, a list of five link entries in link order
        (entries may also be keyed by link name, e.g. ``"torso"``);
      - ``{"m": [...], "c": [...], "l": [...], "I": [...], "g": 9.81}``, per-quantity
        arrays of length five;
      - ``{"m1": ..., "c1": ..., "l1": ..., "I1": ..., ..., "g": 9.81}``, the flat
        evaluator-argument naming.
    """
    gravity = float(data.get('gravity', data.get('g', 9.81)))

    if 'links' in data:
        links = data['links']
        if isinstance(links, dict):
            try:
                links = [links[name] for name in LINK_NAMES]
            except KeyError as exc:
                raise ValueError(f"missing link {exc.args[0]!r}") from None
        return BipedParameters(links=tuple(_link_from_dict(e) for e in links),
                               gravity=gravity)

    if all(key in data for key in _SHORT_KEYS):
        arrays = {_SHORT_KEYS[k]: list(data[k]) for k in _SHORT_KEYS}
        for field_name, values in arrays.items():
            if len(values) != NUM_LINKS:
                raise ValueError(f"{field_name} must have {NUM_LINKS} values, got {len(values)}")
        links = [
            _link_from_dict({f: arrays[f][i] for f in _LINK_FIELDS})
            for i in range(NUM_LINKS)
        ]
        return BipedParameters(links=tuple(links), gravity=gravity)

    if all(f'{k}{i}' in data for k in _SHORT_KEYS for i in range(1, NUM_LINKS + 1)):
        links = [
            _link_from_dict({_SHORT_KEYS[k]: data[f'{k}{i}'] for k in _SHORT_KEYS})
            for i in range(1, NUM_LINKS + 1)
        ]
        return BipedParameters(links=tuple(links), gravity=gravity)

    raise ValueError("Unsupported parameter dictionary format")


def load_parameters(path: Union[str, Path]) -> BipedParameters:
    """
    Load a parameter set from a JSON file.

    Args:
        path: JSON file in any layout accepted by :func:`parameters_from_dict`.

    Returns:
        Validated BipedParameters.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Parameter file not found: {path}")
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Unsupported JSON format for parameters")
    return parameters_from_dict(data)


def save_parameters(params: BipedParameters, path: Union[str, Path]) -> None:
    """Write a parameter set as JSON in the ``links`` layout."""
    with open(path, 'w') as f:
        json.dump(params.to_dict(), f, indent=2)
