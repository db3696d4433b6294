from collections import namedtuple
from typing import Iterable, Mapping
from warnings import warn

from utils import preview


class InvalidInput(ValueError):
    """Input data cannot be tested (bad containment, empty universe, unknown option)."""


class NumericDegenerate(RuntimeWarning):
    """A statistic had a zero denominator and was replaced by a sentinel (inf or nan)."""


class GeneSet:
    """A named category of items (e.g. genes of a pathway).

    Duplicated items collapse, as the genes are stored in a frozenset.
    """

    __slots__ = ('name', 'genes')

    def __init__(self, name: str, genes: Iterable):
        self.name = name
        self.genes = frozenset(genes)

    def restrict_to_genes(self, genes):
        """Drop all genes absent in given collection of genes.

        Returns:
            set of removed genes
        """
        removed = self.genes - set(genes)
        self.genes = self.genes - removed
        return removed

    def __contains__(self, gene):
        return gene in self.genes

    def __iter__(self):
        return iter(self.genes)

    def __len__(self):
        return len(self.genes)

    def __eq__(self, other):
        return isinstance(other, GeneSet) and self.name == other.name and self.genes == other.genes

    def __repr__(self):
        return f'<GeneSet "{self.name}" with {len(self.genes)} genes>'


class CategoryResult(namedtuple(
    'CategoryResult',
    'name, k, m, n, N, B, p_value, odds_ratio, expected, adjusted_p_value'
)):
    """Outcome of the test for a single category.

    Attributes:
        name: category label
        k: number of significant items drawn from the category ("white balls drawn")
        m: category size ("white balls")
        n: number of draws
        N: universe size
        B: N - m, items outside of the category ("black balls")
        p_value: raw p-value of the one-sided hypergeometric test
        odds_ratio: (k * (B - b)) / (b * (m - k)) where b = n - k;
            inf or nan if the denominator is zero
        expected: m * n / N
        adjusted_p_value: p-value adjusted for multiple testing (nan if not adjusted)
    """

    __slots__ = ()

    @property
    def b(self):
        """Count of drawn items which do not belong to the category."""
        return self.n - self.k


class Assay:
    """Stores the data of a single enrichment experiment.

    Args:
        universe: all items under consideration
        assayed: mapping from category label to items of the category
        significant: mapping from category label to items of that
            category which were observed as significant; categories
            which are not present have no significant items
    """

    def __init__(self, universe: Iterable, assayed: Mapping[str, Iterable], significant: Mapping[str, Iterable]=None):
        self.universe = frozenset(universe)
        self.gene_sets = {
            name: GeneSet(name, genes)
            for name, genes in assayed.items()
        }
        significant = significant or {}
        self.significant = {
            name: frozenset(genes)
            for name, genes in significant.items()
        }

    @property
    def categories(self):
        return list(self.gene_sets)

    def significant_of(self, name):
        return self.significant.get(name, frozenset())

    def copy(self):
        """Independent copy of the assay, safe to clip."""
        return Assay(self.universe, self.gene_sets, self.significant)

    def clip_to_universe(self):
        """Remove items absent from the universe from all categories.

        Significant items removed this way are dropped as well;
        categories left with no items are dropped altogether.

        Returns:
            set of all removed items
        """
        all_removed = set()

        for name, gene_set in list(self.gene_sets.items()):
            removed = gene_set.restrict_to_genes(self.universe)
            if not removed:
                continue

            all_removed.update(removed)

            if name in self.significant:
                self.significant[name] = self.significant[name] - removed

            if not len(gene_set):
                del self.gene_sets[name]
                self.significant.pop(name, None)
                warn(f'Category "{name}" has no items in the universe and was dropped')

        if all_removed:
            warn(
                f'Removed {len(all_removed)} items absent from the universe: '
                f'{preview(all_removed)}'
            )
        return all_removed

    def validate(self):
        """Check all containment requirements at once, before any computation.

        Raises:
            InvalidInput: describing the first offending category
        """
        if not self.universe:
            raise InvalidInput('The universe is empty: there is nothing to draw from.')

        for name, gene_set in self.gene_sets.items():
            if not len(gene_set):
                raise InvalidInput(f'Category "{name}" is empty.')

            outside = gene_set.genes - self.universe
            if outside:
                raise InvalidInput(
                    f'Category "{name}" is not a subset of the universe; '
                    f'{len(outside)} items are not in the universe: {preview(outside)}'
                )

            if len(gene_set) == len(self.universe):
                warn(f'{name} has as many genes as the universe')

        unknown = set(self.significant) - set(self.gene_sets)
        if unknown:
            raise InvalidInput(
                f'Significant items were given for unknown categories: {preview(unknown)}'
            )

        for name, genes in self.significant.items():
            outside = genes - self.gene_sets[name].genes
            if outside:
                raise InvalidInput(
                    f'Significant items of category "{name}" are not a subset of the category; '
                    f'{len(outside)} items do not belong to it: {preview(outside)}'
                )

    def __repr__(self):
        return f'<Assay with {len(self.gene_sets)} categories over {len(self.universe)} items>'
