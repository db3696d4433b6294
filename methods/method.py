from abc import abstractmethod, ABC
from typing import Iterable

import pandas as pd

from models import Assay
from utils import AbstractRegisteringType, abstract_property


class MethodResult(ABC):
    """Result should contain list of scored categories.

    The names of properties of the items (categories) in the list
    which should be used for table creation ought to be enlisted
    in `columns` property.
    """

    description = ''

    @abstract_property
    def columns(self) -> Iterable:
        """List with attributes of objects from `scored_list`,

        which will be used for summary table generation as columns.
        """

    def __init__(self, scored_list, description=None):
        self.scored_list = scored_list
        if description:
            self.description = description

    def as_frame(self) -> pd.DataFrame:
        """
        Returns:
            `pandas.DataFrame` with one row per scored item and `columns` as columns
        """
        return pd.DataFrame(
            [
                [getattr(obj, column) for column in self.columns]
                for obj in self.scored_list
            ],
            columns=self.columns
        )

    def __iter__(self):
        return iter(self.scored_list)

    def __len__(self):
        return len(self.scored_list)


class Method(metaclass=AbstractRegisteringType):
    """Defines method of enrichment analysis & its arguments.

    Arguments of the method are defined as arguments and keyword
    arguments of `__init__`, with defaults given by keyword arguments
    and described in the docstring of `__init__`.

    For example::

        class MyMethod(Method)
            def __init__(self, threshold: float=0.05):
                pass

    All non-abstract subclasses are registered in `Method.members`
    under their `name`.
    """

    @abstract_property
    def help(self) -> str:
        """Return string providing help for this method.

        Use help = __doc__
        """

    @abstract_property
    def name(self) -> str:
        """Return method name used internally.

        The name should not include any spaces."""

    @abstractmethod
    def run(self, assay: Assay) -> MethodResult:
        """Performs analysis and returns results object."""
