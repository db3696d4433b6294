import pytest

from models import Assay, CategoryResult, GeneSet, InvalidInput


def items(*names):
    return {f'G{i}' for i in names}


UNIVERSE = items(*range(10))


def test_gene_set_init():
    gene_set = GeneSet('apoptosis', ['BAD', 'TP53', 'BAD'])

    assert gene_set.name == 'apoptosis'
    # duplicates collapse
    assert len(gene_set) == 2
    assert 'BAD' in gene_set
    assert 'BRCA2' not in gene_set


def test_gene_set_equality():
    gene_set = GeneSet('apoptosis', ['BAD', 'TP53'])

    assert gene_set == GeneSet('apoptosis', ['TP53', 'BAD', 'BAD'])
    assert gene_set != GeneSet('necrosis', ['BAD', 'TP53'])
    assert gene_set != GeneSet('apoptosis', ['BAD'])
    assert gene_set != {'BAD', 'TP53'}

    assert repr(gene_set) == '<GeneSet "apoptosis" with 2 genes>'


def test_restrict_to_genes():
    gene_set = GeneSet('apoptosis', ['BAD', 'TP53', 'BAX'])

    removed = gene_set.restrict_to_genes(['BAD', 'TP53', 'FUCA2'])

    assert removed == {'BAX'}
    assert gene_set.genes == {'BAD', 'TP53'}


def test_category_result():
    result = CategoryResult(
        name='A', k=3, m=5, n=6, N=20, B=15,
        p_value=0.1, odds_ratio=6.0, expected=1.5, adjusted_p_value=0.3
    )
    assert result.b == 3

    with pytest.raises(AttributeError):
        result.p_value = 0.5


def test_assay_init():
    assay = Assay(UNIVERSE, {'A': items(1, 2, 3), 'B': items(4, 5)}, {'A': items(1)})

    assert assay.categories == ['A', 'B']
    assert isinstance(assay.gene_sets['A'], GeneSet)
    assert assay.significant_of('A') == items(1)
    assert assay.significant_of('B') == set()

    assay.validate()


def test_assay_copy():
    assay = Assay(UNIVERSE, {'A': items(1, 2, 11)}, {'A': items(1, 11)})

    copied = assay.copy()

    assert copied.gene_sets == assay.gene_sets
    assert copied.gene_sets['A'] is not assay.gene_sets['A']

    with pytest.warns(UserWarning):
        copied.clip_to_universe()

    assert assay.gene_sets['A'] == GeneSet('A', items(1, 2, 11))
    assert assay.significant_of('A') == items(1, 11)


def test_empty_universe():
    with pytest.raises(InvalidInput, match='universe is empty'):
        Assay([], {'A': ['G1']}, {}).validate()


def test_category_outside_of_universe():
    assay = Assay(UNIVERSE, {'A': items(1, 2), 'B': items(5, 11, 12)}, {})

    with pytest.raises(InvalidInput, match='Category "B" is not a subset of the universe.*G11, G12'):
        assay.validate()


def test_empty_category():
    with pytest.raises(InvalidInput, match='Category "A" is empty'):
        Assay(UNIVERSE, {'A': []}, {}).validate()


def test_significant_outside_of_category():
    assay = Assay(UNIVERSE, {'A': items(1, 2), 'B': items(3, 4)}, {'B': items(3, 1)})

    with pytest.raises(InvalidInput, match='Significant items of category "B".*G1'):
        assay.validate()


def test_significant_of_unknown_category():
    assay = Assay(UNIVERSE, {'A': items(1, 2)}, {'Z': items(1)})

    with pytest.raises(InvalidInput, match='unknown categories: Z'):
        assay.validate()


def test_category_as_large_as_universe():
    assay = Assay(items(1, 2), {'A': items(1, 2)}, {})

    with pytest.warns(UserWarning, match='as many genes as the universe'):
        assay.validate()


def test_clip_to_universe():
    assay = Assay(
        UNIVERSE,
        {'A': items(1, 2, 11), 'B': items(12, 13), 'C': items(3)},
        {'A': items(1, 11), 'B': items(12)}
    )

    with pytest.warns(UserWarning, match='Removed 3 items absent from the universe'):
        removed = assay.clip_to_universe()

    assert removed == items(11, 12, 13)
    assert assay.gene_sets['A'].genes == items(1, 2)
    assert assay.significant_of('A') == items(1)

    # nothing left of B
    assert assay.categories == ['A', 'C']
    assert 'B' not in assay.significant

    assay.validate()
