from collections import abc
from math import isfinite, isnan, nan
from numbers import Integral
from operator import attrgetter
from typing import List, Mapping, Union
from warnings import warn

import pandas as pd

from methods.method import Method, MethodResult
from models import Assay, CategoryResult, GeneSet, InvalidInput, NumericDegenerate
from parallel import Pool
from stats import adjust, expected_count, hypergeom_cdf, hypergeom_sf, odds_ratio, resolve_adjustment
from .constants import DEFAULT_ADJUSTMENT, DEFAULT_ALPHA, DEFAULT_MAX_SIZE, DEFAULT_MIN_SIZE, REPRESENTATIONS


TAILS = {
    'over': hypergeom_sf,
    'under': hypergeom_cdf,
}


class HypergeometricResult(MethodResult):

    columns = ['name', 'k', 'm', 'n', 'N', 'p_value', 'odds_ratio', 'expected', 'adjusted_p_value']

    description = """
    One-sided hypergeometric test of each category: k significant
    items out of m category items, in n draws from N items.
    """

    def as_frame(self) -> pd.DataFrame:
        """
        Returns:
            `pandas.DataFrame` indexed by category name
        """
        return super().as_frame().set_index('name')

    def significant(self, alpha: float=DEFAULT_ALPHA) -> List[CategoryResult]:
        """Categories with p-value below `alpha`.

        Adjusted p-values are used if these were calculated,
        raw p-values otherwise.
        """
        adjusted = any(not isnan(result.adjusted_p_value) for result in self.scored_list)
        key = attrgetter('adjusted_p_value' if adjusted else 'p_value')
        return [result for result in self.scored_list if key(result) < alpha]


class HypergeometricTest(Method):
    """
    Hypergeometric test evaluates each of provided categories (e.g. pathways),
    looking for such categories which contain more (or less) significant
    items than expected by chance.

    The test models drawing without replacement from an urn of N items
    (the universe) of which m belong to the category. Having observed
    k category items among n draws, the p-value is the probability of
    drawing at least k (over-representation) or at most k
    (under-representation) category items.

    Schematic of pipeline:
        1. Categories are (optionally) clipped to the universe and all
           the input is validated, before any computation starts.
        2. Categories smaller than min_size or larger than max_size are excluded.
        3. For each category:
            - p-value is calculated summing the tail of hypergeometric
              distribution in log space,
            - odds ratio and expected count of significant items are calculated.
        4. Multiple hypothesis testing adjustment is performed
           (Benjamini-Hochberg by default).

    By default the count of draws is equal to the count of significant
    items in the category (n = k). To test against a study set of genes,
    provide its size as `draws`.
    """

    help = __doc__

    name = 'hypergeometric'

    def __init__(
        self, representation: str='over', draws: Union[int, Mapping[str, int]]=None,
        adjustment: str=DEFAULT_ADJUSTMENT, min_size: int=DEFAULT_MIN_SIZE, max_size: int=DEFAULT_MAX_SIZE,
        clip_to_universe=False, processes: int=1, progress=False, sort=False
    ):
        """

        Args:
            representation: 'over' or 'under' - which tail of distribution to test
            draws: count of draws: an integer shared by all categories,
                a mapping from category name to count of draws or None
                to use the count of significant items of each category
            adjustment: p-value adjustment method (e.g. 'fdr_bh', 'bonferroni')
                or None to skip the adjustment
            min_size: categories with less items will not be tested
            max_size: categories with more items will not be tested
            clip_to_universe: remove items absent in the universe from categories
                (instead of rejecting such input)
            processes: a number of processes to use; 0 to utilize all available cores
            progress: show progress bar
            sort: sort results by p-value
        """
        if representation not in REPRESENTATIONS:
            raise InvalidInput(
                f'Unknown representation: "{representation}". '
                f'Use one of: {", ".join(REPRESENTATIONS)}.'
            )
        if adjustment:
            adjustment = resolve_adjustment(adjustment)
        if min_size < 1:
            raise InvalidInput('Minimal size of category has to be a positive integer')
        if max_size is not None and max_size < min_size:
            raise InvalidInput('Maximal size of category cannot be lower than the minimal size')
        if processes < 0:
            raise InvalidInput('Number of processes cannot be negative')

        self.representation = representation
        self.draws = draws
        self.adjustment = adjustment
        self.min_max = min_size, max_size
        self.clip_to_universe = clip_to_universe
        self.processes = processes
        self.progress = progress
        self.sort = sort

    def trim_gene_sets(self, assay: Assay) -> List[GeneSet]:
        """Remove those categories which have less than min or more than max items."""
        min_size, max_size = self.min_max

        trimmed = [
            gene_set
            for gene_set in assay.gene_sets.values()
            if min_size <= len(gene_set) and (max_size is None or len(gene_set) <= max_size)
        ]

        diff = len(assay.gene_sets) - len(trimmed)

        if diff:
            print(
                f'Excluded {diff} categories as having less than '
                f'{min_size} or more than {max_size} items.'
            )
        return trimmed

    def count_draws(self, assay: Assay, gene_sets: List[GeneSet]) -> Mapping[str, int]:
        """Establish the count of draws for each of categories and check if it is feasible."""
        universe_size = len(assay.universe)
        draws = {}

        for gene_set in gene_sets:
            hits = len(assay.significant_of(gene_set.name))

            if self.draws is None:
                draws[gene_set.name] = hits
                continue

            if isinstance(self.draws, abc.Mapping):
                if gene_set.name not in self.draws:
                    raise InvalidInput(f'Count of draws for category "{gene_set.name}" was not provided.')
                n = self.draws[gene_set.name]
            else:
                n = self.draws

            if not isinstance(n, Integral) or isinstance(n, bool):
                raise InvalidInput(
                    f'Count of draws for category "{gene_set.name}" has to be an integer, not {n!r}.'
                )
            if not hits <= n <= universe_size:
                raise InvalidInput(
                    f'Count of draws for category "{gene_set.name}" ({n}) has to be '
                    f'between the count of significant items ({hits}) and the universe size ({universe_size}).'
                )
            if n - hits > universe_size - len(gene_set):
                raise InvalidInput(
                    f'Count of draws for category "{gene_set.name}" ({n}) exceeds the count of '
                    f'significant items ({hits}) plus the count of items outside of the category '
                    f'({universe_size - len(gene_set)}).'
                )
            draws[gene_set.name] = n

        return draws

    def run(self, assay: Assay) -> HypergeometricResult:
        """Return list of categories with p-values, odds ratios and expected counts.

        Categories are listed in order of the assay, unless `sort` was requested.
        """
        if self.clip_to_universe:
            assay = assay.copy()
            assay.clip_to_universe()

        assay.validate()

        gene_sets = self.trim_gene_sets(assay)
        draws = self.count_draws(assay, gene_sets)

        categories = [
            (gene_set.name, len(assay.significant_of(gene_set.name)), len(gene_set), draws[gene_set.name])
            for gene_set in gene_sets
        ]

        args = (len(assay.universe), )

        pool = Pool(self.processes, progress=self.progress)
        results = pool.map(self.analyze_category, categories, shared_args=args)

        degenerate = [result.name for result in results if not isfinite(result.odds_ratio)]
        if degenerate:
            warn(
                f'Odds ratio of {len(degenerate)} categories has zero denominator '
                f'(no drawn items outside of the category or all category items drawn) '
                f'and was reported as inf or nan.',
                NumericDegenerate
            )

        if self.adjustment and results:
            adjusted = adjust([result.p_value for result in results], self.adjustment)
            results = [
                result._replace(adjusted_p_value=float(adjusted_p_value))
                for result, adjusted_p_value in zip(results, adjusted)
            ]

        if self.sort:
            results = sorted(results, key=attrgetter('p_value'))

        return HypergeometricResult(results)

    def analyze_category(self, category, universe_size: int) -> CategoryResult:
        name, k, m, n = category

        tail = TAILS[self.representation]

        return CategoryResult(
            name=name,
            k=k,
            m=m,
            n=n,
            N=universe_size,
            B=universe_size - m,
            p_value=tail(k, universe_size, m, n),
            odds_ratio=odds_ratio(k, m, n, universe_size),
            expected=expected_count(m, n, universe_size),
            adjusted_p_value=nan
        )
