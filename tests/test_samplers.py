import pytest

from models import InvalidInput
from samplers import sample_significant

ASSAYED = {
    'small': ['A', 'B'],
    'large': [f'G{i}' for i in range(40)],
}


def test_size():
    picked = sample_significant(ASSAYED, size=5, seed=0)

    # small categories are picked as a whole
    assert picked['small'] == {'A', 'B'}
    assert len(picked['large']) == 5
    assert picked['large'] <= set(ASSAYED['large'])


def test_fraction():
    picked = sample_significant(ASSAYED, fraction=0.25, seed=0)

    assert len(picked['large']) == 10
    assert len(picked['small']) == 0

    assert sample_significant(ASSAYED, fraction=1, seed=0)['large'] == set(ASSAYED['large'])


def test_reproducible():
    assert sample_significant(ASSAYED, size=10, seed=7) == sample_significant(ASSAYED, size=10, seed=7)


def test_invalid_arguments():
    with pytest.raises(InvalidInput, match='either size or fraction'):
        sample_significant(ASSAYED)

    with pytest.raises(InvalidInput, match='either size or fraction'):
        sample_significant(ASSAYED, size=1, fraction=0.5)

    with pytest.raises(InvalidInput):
        sample_significant(ASSAYED, fraction=1.5)

    with pytest.raises(InvalidInput):
        sample_significant(ASSAYED, size=-1)
