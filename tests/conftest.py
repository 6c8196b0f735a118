"""
Pytest fixtures and configuration for support interval tests.
"""

import pytest
import numpy as np
from dataclasses import dataclass
from scipy import stats

# Set random seed for reproducibility
RANDOM_SEED = 42


@dataclass
class NormalPair:
    """Normal prior and posterior used to generate draws."""
    mu0: float  # Prior mean
    sigma0: float  # Prior std
    mu1: float  # Posterior mean
    sigma1: float  # Posterior std

    def draws(self, n: int, rng: np.random.Generator):
        """Draw (prior, posterior) samples of size n."""
        return rng.normal(self.mu0, self.sigma0, n), rng.normal(self.mu1, self.sigma1, n)


@dataclass
class TestConfig:
    """Configuration for sampling-based tests."""
    n_draws: int = 1000  # Draws per sample
    n_large: int = 20000  # Draws for asymptotic checks
    seed: int = RANDOM_SEED
    precision: int = 256  # Grid points


@pytest.fixture
def config():
    """Standard test configuration."""
    return TestConfig()


@pytest.fixture
def seed():
    """Random seed for reproducibility."""
    return RANDOM_SEED


@pytest.fixture
def rng(seed):
    """Numpy random generator."""
    return np.random.default_rng(seed)


@pytest.fixture
def shifted_normal():
    """Prior N(0, 1), posterior N(0.5, 0.3): one clearly supported region."""
    return NormalPair(mu0=0.0, sigma0=1.0, mu1=0.5, sigma1=0.3)


@pytest.fixture
def normal_draws(shifted_normal, rng, config):
    """Prior and posterior draws for the shifted normal example."""
    return shifted_normal.draws(config.n_draws, rng)


@pytest.fixture
def bimodal_draws(rng):
    """Wide prior, posterior concentrated at -3 and +3 (two supported regions)."""
    prior = rng.normal(0.0, 3.0, 5000)
    posterior = np.concatenate([
        rng.normal(-3.0, 0.3, 2500),
        rng.normal(3.0, 0.3, 2500),
    ])
    return prior, posterior


# Helper functions for tests
def normal_fitter(sample, **kwargs):
    """Density fitter using a fitted normal distribution instead of a KDE."""
    sample = np.asarray(sample, dtype=float)
    return stats.norm(np.mean(sample), np.std(sample)).pdf


def normal_ratio_roots(
    mu0: float,
    sigma0: float,
    mu1: float,
    sigma1: float,
    BF: float = 1.0,
) -> np.ndarray:
    """Points where N(mu1, sigma1) / N(mu0, sigma0) equals BF.

    log ratio = log(sigma0 / sigma1) - (x - mu1)^2 / (2 sigma1^2)
                + (x - mu0)^2 / (2 sigma0^2)
    which is quadratic in x.
    """
    a = -1 / (2 * sigma1**2) + 1 / (2 * sigma0**2)
    b = mu1 / sigma1**2 - mu0 / sigma0**2
    c = (np.log(sigma0 / sigma1) - mu1**2 / (2 * sigma1**2)
         + mu0**2 / (2 * sigma0**2) - np.log(BF))
    return np.sort(np.roots([a, b, c]).real)


def grid_spacing(grid: np.ndarray) -> float:
    """Distance between neighbouring grid points."""
    return float(grid[1] - grid[0])


# Pytest configuration
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "tier1: Tier 1 grid and density tests")
    config.addinivalue_line("markers", "tier2: Tier 2 ratio and region tests")
    config.addinivalue_line("markers", "tier3: Tier 3 single-parameter tests")
    config.addinivalue_line("markers", "tier4: Tier 4 batch tests")
    config.addinivalue_line("markers", "tier5: Tier 5 integration tests")
