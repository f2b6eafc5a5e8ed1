"""
Test configuration for lasernoise.
"""

import pytest
import sys
import os

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))


@pytest.fixture
def rng():
    """Seeded random generator."""
    import numpy as np
    return np.random.default_rng(1234)


@pytest.fixture
def lorentzian_param():
    """Lorentzian source laser of 100 kHz linewidth."""
    return {'Fs': 80e9, 'Lnoise': 2**10, 'linewidth': 1e5, 'Power': (5, 'dBm')}


@pytest.fixture
def scl_param():
    """Semiconductor laser parameters (traversal mode)."""
    return {'LFLW1GHZ': 1e6, 'HFLW': 1e5, 'fr': 1e9, 'K': .3e-9, 'alpha': 3,
            'L': 2**8, 'Power': (5, 'dBm')}
