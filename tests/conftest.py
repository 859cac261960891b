"""
missingkit - Pytest Configuration
Shared fixtures and configuration for all tests
"""

import pytest
import pandas as pd
import numpy as np
from pathlib import Path
import sys

# Add project root to path
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from missingkit.config.settings import settings


# ==================== DATA FIXTURES ====================

@pytest.fixture
def df_with_missing():
    """DataFrame with missing values"""
    df = pd.DataFrame({
        'col1': [1, 2, np.nan, 4, 5, np.nan, 7, 8, 9, 10],
        'col2': [1.1, np.nan, 3.3, np.nan, 5.5, 6.6, np.nan, 8.8, 9.9, 10.1],
        'col3': ['a', 'b', None, 'd', 'e', 'f', 'g', None, 'i', 'j']
    })
    return df


@pytest.fixture
def mixed_df():
    """One column per kind, each with missing values"""
    return pd.DataFrame({
        'age': pd.array([30, None, 50, 40], dtype='Int64'),
        'smoker': [True, None, False, True],
        'city': pd.Series(['Oslo', 'Rome', None, 'Oslo'], dtype='category'),
        'visited': pd.to_datetime(['2023-01-01', None, '2023-03-01', '2023-04-01']),
        'target': [1, 0, None, 1],
    })


@pytest.fixture
def numeric_df():
    """Numeric-only DataFrame for KNN imputation"""
    rng = np.random.default_rng(42)
    df = pd.DataFrame({
        'feature1': rng.normal(size=40),
        'feature2': rng.normal(loc=10, scale=3, size=40),
        'feature3': rng.integers(0, 10, size=40).astype(float),
    })
    df.loc[[1, 5, 9], 'feature1'] = np.nan
    df.loc[[2, 5, 30], 'feature2'] = np.nan
    return df


@pytest.fixture
def train_test_frames():
    """Train / new-data pair with the same schema"""
    train = pd.DataFrame({
        'x': [1.0, np.nan, 3.0, 5.0],
        'color': ['red', 'blue', 'red', None],
        'flag': [True, False, None, True],
    })
    test = pd.DataFrame({
        'x': [np.nan, 2.0],
        'color': [None, 'blue'],
        'flag': [None, False],
    })
    return train, test


class ZeroFillImputer:
    """Neighbour imputer stand-in: fills numeric gaps with 0 and records calls"""

    def __init__(self):
        self.calls = []

    def fit(self, table):
        self.calls.append(('fit', list(table.columns)))
        return table.fillna(0.0), {'fitted_on': list(table.columns)}

    def apply(self, state, table):
        self.calls.append(('apply', list(table.columns)))
        return table.fillna(0.0)


class FailingImputer:
    """Neighbour imputer stand-in that always fails"""

    def fit(self, table):
        raise RuntimeError("neighbour search exploded")

    def apply(self, state, table):
        raise RuntimeError("neighbour search exploded")


@pytest.fixture
def zero_fill_imputer():
    return ZeroFillImputer()


@pytest.fixture
def failing_imputer():
    return FailingImputer()


# ==================== CONFIGURATION FIXTURES ====================

@pytest.fixture(autouse=True)
def test_settings():
    """Test settings"""
    # Override settings for testing
    original_test_mode = settings.TEST_MODE

    settings.TEST_MODE = True

    yield settings

    # Restore
    settings.TEST_MODE = original_test_mode


# ==================== PYTEST CONFIGURATION ====================

def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
