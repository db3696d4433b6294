"""Hypergeometric test of categories for enrichment in significant items.

Example:

    >>> results = run_test(
    ...     universe=genes,
    ...     assayed={'apoptosis': {'BAD', 'TP53', 'BAX'}, ...},
    ...     significant={'apoptosis': {'BAD', 'TP53'}, ...},
    ... )
    >>> adjusted = adjust([result.p_value for result in results])
"""
from typing import Iterable, List, Mapping, Union

from methods import HypergeometricTest
from models import Assay, CategoryResult
from stats import adjust


def run_test(
    universe: Iterable, assayed: Mapping[str, Iterable], significant: Mapping[str, Iterable],
    representation: str='over', draws: Union[int, Mapping[str, int]]=None, **options
) -> List[CategoryResult]:
    """Test every category for over- (or under-) representation of significant items.

    Args:
        universe: all items under consideration
        assayed: mapping from category label to items of the category
        significant: mapping from category label to significant items of the category
        representation: 'over' or 'under'
        draws: count of draws (see `HypergeometricTest`); by default equal
            to the count of significant items of given category
        options: other arguments of `HypergeometricTest`

    Returns:
        one result per category, in order of `assayed`; p-values are not adjusted
        unless `adjustment` is given in options

    Raises:
        InvalidInput: if the containment requirements are not met or an option is invalid
    """
    options.setdefault('adjustment', None)
    method = HypergeometricTest(representation=representation, draws=draws, **options)
    return method.run(Assay(universe, assayed, significant)).scored_list


__all__ = ['run_test', 'adjust']
