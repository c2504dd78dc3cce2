"""Gaussian noise generation."""

from __future__ import annotations

import random


def gauss_noise(mean: float, sigma: float, count: int) -> list[float]:
    """Return ``count`` samples from a normal distribution."""
    if count < 0:
        raise ValueError(f"count must not be negative: {count}")
    if sigma < 0:
        raise ValueError(f"sigma must not be negative: {sigma}")
    rng = random.Random()
    return [rng.gauss(mean, sigma) for _ in range(count)]


def gauss_noise_simd(mean: float, sigma: float, count: int) -> list[float]:
    """Same as :func:`gauss_noise`."""
    return gauss_noise(mean, sigma, count)