from math import inf, nan

import numpy as np
from scipy.special import gammaln, logsumexp
from statsmodels.stats.multitest import multipletests

from models import InvalidInput


ADJUSTMENT_ALIASES = {
    'bh': 'fdr_bh',
    'fdr': 'fdr_bh',
    'benjamini-hochberg': 'fdr_bh',
}

# methods which are delegated to statsmodels
DELEGATED_ADJUSTMENTS = {
    'bonferroni', 'sidak', 'holm-sidak', 'holm', 'simes-hochberg',
    'hommel', 'fdr_by', 'fdr_tsbh', 'fdr_tsbky'
}


def log_binomial(n, k):
    """Natural logarithm of the binomial coefficient "n choose k" (k may be an array)."""
    return gammaln(n + 1) - gammaln(k + 1) - gammaln(n - k + 1)


def hypergeom_support(N: int, m: int, n: int):
    """Smallest and largest count of category items possible in `n` draws."""
    return max(0, n - (N - m)), min(m, n)


def hypergeom_log_pmf(k, N: int, m: int, n: int):
    """Logarithm of the probability of drawing exactly `k` items of the category.

    Args:
        k: count (or array of counts) of drawn category items
        N: size of the population (universe)
        m: count of category items in the population
        n: count of draws (without replacement)
    """
    k = np.asarray(k)
    return log_binomial(m, k) + log_binomial(N - m, n - k) - log_binomial(N, n)


def _tail_probability(counts, N, m, n):
    # the sum is accumulated in log space, so terms spanning many
    # orders of magnitude do not underflow before being added up
    log_p = logsumexp(hypergeom_log_pmf(counts, N, m, n))
    return float(np.clip(np.exp(log_p), 0, 1))


def hypergeom_sf(k: int, N: int, m: int, n: int) -> float:
    """Probability of drawing at least `k` category items: P(X >= k).

    Upper tail of the hypergeometric distribution, used to test for
    over-representation of the category among drawn items.
    """
    low, high = hypergeom_support(N, m, n)
    if k <= low:
        return 1.0
    if k > high:
        return 0.0
    return _tail_probability(np.arange(k, high + 1), N, m, n)


def hypergeom_cdf(k: int, N: int, m: int, n: int) -> float:
    """Probability of drawing at most `k` category items: P(X <= k).

    Lower tail of the hypergeometric distribution, used to test for
    under-representation of the category among drawn items.
    """
    low, high = hypergeom_support(N, m, n)
    if k >= high:
        return 1.0
    if k < low:
        return 0.0
    return _tail_probability(np.arange(low, k + 1), N, m, n)


def odds_ratio(k: int, m: int, n: int, N: int) -> float:
    """Odds of drawing a category item versus drawing any other item.

    Computed as (k * (B - b)) / (b * (m - k)) where B = N - m
    is the count of items outside of the category and b = n - k
    is the count of drawn items outside of the category.

    Returns:
        the odds ratio; if the denominator is zero: inf when
        the nominator is positive, nan when it is zero as well
    """
    outside = N - m
    drawn_outside = n - k

    nominator = k * (outside - drawn_outside)
    denominator = drawn_outside * (m - k)

    if not denominator:
        return inf if nominator else nan

    return nominator / denominator


def expected_count(m: int, n: int, N: int) -> float:
    """Expected count of category items among `n` draws."""
    return m * n / N


def benjamini_hochberg(p_values) -> np.ndarray:
    """Benjamini-Hochberg step-up procedure controlling false discovery rate.

    Order of the provided p-values is preserved in the returned array.
    """
    p_values = np.asarray(p_values, dtype=float)
    count = len(p_values)

    if not count:
        return p_values

    order = np.argsort(p_values, kind='mergesort')
    ranks = np.arange(1, count + 1)

    candidates = p_values[order] * (count / ranks)

    # going from the largest rank down, no value can exceed its successor
    monotonic = np.minimum.accumulate(candidates[::-1])[::-1]

    adjusted = np.empty(count)
    adjusted[order] = np.clip(monotonic, 0, 1)
    return adjusted


def resolve_adjustment(method: str) -> str:
    """Translate user-provided name of adjustment method to its canonical form."""
    name = ADJUSTMENT_ALIASES.get(method.lower(), method.lower())

    if name != 'fdr_bh' and name not in DELEGATED_ADJUSTMENTS:
        allowed = ', '.join(sorted(DELEGATED_ADJUSTMENTS | {'fdr_bh'} | set(ADJUSTMENT_ALIASES)))
        raise InvalidInput(f'Unknown p-value adjustment method: "{method}". Use one of: {allowed}.')

    return name


def adjust(p_values, method: str='fdr_bh') -> np.ndarray:
    """Adjust p-values for multiple hypothesis testing.

    Args:
        p_values: sequence of raw p-values; the order is preserved
        method: 'fdr_bh' (Benjamini-Hochberg, default) or any
            other method supported by `statsmodels` multipletests,
            e.g. 'bonferroni' or 'holm'

    Returns:
        array of adjusted p-values, in the order of `p_values`
    """
    method = resolve_adjustment(method)
    p_values = np.asarray(p_values, dtype=float)

    if p_values.ndim != 1:
        raise InvalidInput('P-values have to be provided as a flat sequence.')

    if np.isnan(p_values).any() or (p_values < 0).any() or (p_values > 1).any():
        raise InvalidInput('P-values have to be numbers in [0, 1] range.')

    if method == 'fdr_bh':
        return benjamini_hochberg(p_values)

    if not len(p_values):
        return p_values

    rejected, corrected, alpha_sidak, alpha_bonferroni = multipletests(p_values, method=method)
    return corrected
