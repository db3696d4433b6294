from typing import Iterable, Mapping

import numpy as np

from models import InvalidInput


def sample_significant(assayed: Mapping[str, Iterable], size: int=None, fraction: float=None, seed=None):
    """Randomly pick "significant" items from each of categories.

    Items are drawn without replacement; useful to generate
    demonstration data or a null case for the test.

    Args:
        assayed: mapping from category label to items of the category
        size: count of items to pick from each category
            (categories smaller than that are picked as a whole)
        fraction: part of each category to pick (rounded to the nearest integer)
        seed: seed (or `numpy.random.Generator`) for reproducible draws

    Returns:
        mapping from category label to set of picked items
    """
    if (size is None) == (fraction is None):
        raise InvalidInput('Provide either size or fraction (exactly one of them).')
    if size is not None and size < 0:
        raise InvalidInput('Size of the sample cannot be negative')
    if fraction is not None and not 0 <= fraction <= 1:
        raise InvalidInput('Fraction has to be in [0, 1] range')

    generator = np.random.default_rng(seed)
    picked = {}

    for name, items in assayed.items():
        # sorting makes the draws reproducible regardless of the set ordering
        items = sorted(set(items), key=str)
        count = size if size is not None else int(round(fraction * len(items)))
        count = min(count, len(items))

        chosen = generator.choice(len(items), size=count, replace=False)
        picked[name] = {items[i] for i in chosen}

    return picked
