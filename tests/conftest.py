"""Shared fixtures and path setup for tests."""

import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path so 'biped_dynamics' is importable
_repo_root = Path(__file__).resolve().parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

from biped_dynamics import default_parameters, derive_biped_model  # noqa: E402


@pytest.fixture(scope='session')
def biped_model():
    """Model in the default joint-balance form; derived once per session."""
    return derive_biped_model()


@pytest.fixture(scope='session')
def symmetric_model():
    return derive_biped_model({'mass_matrix_form': 'symmetric'})


@pytest.fixture(scope='session')
def params():
    return default_parameters()
