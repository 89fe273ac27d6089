#!/usr/bin/env python3
"""
stats_helpers.py - Statistical test helpers (test-only)

Chi-squared critical values for checking the Gaussian sampler's empirical
distribution against its table.
"""

from scipy.stats import chi2


def chi_sq_critical(df: int, confidence: float = 0.95) -> float:
    """
    Critical value of the chi-squared distribution.

    Args:
        df: degrees of freedom (>= 1)
        confidence: probability mass below the returned value

    Returns:
        x such that P(X <= x) = confidence for X ~ χ²(df)
    """
    if df < 1:
        raise ValueError(f"degrees of freedom must be >= 1, got {df}")
    return float(chi2.ppf(confidence, df))


def chi_sq_95(df: int) -> float:
    """95% critical value"""
    return chi_sq_critical(df, 0.95)
