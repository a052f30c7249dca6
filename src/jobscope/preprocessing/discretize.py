"""
Equal-width discretization of continuous columns.

A column is cut into ``bins`` intervals of equal width spanning its observed
[min, max]. Value x falls in bin floor((x - min) / (max - min) * bins); the
maximum itself is placed in the last bin.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np

from ..errors import DegenerateColumnError
from ..utils.validation import validate_column

_POLICIES = ('raise', 'zero')


class Discretizer:
    """Equal-width binning of a single column.

    Parameters
    ----------
    bins : int, default=10
        Number of bins
    on_degenerate : {'raise', 'zero'}, default='raise'
        Constant columns raise DegenerateColumnError, or map to bin 0

    Attributes
    ----------
    bin_edges_ : Tensor of shape (bins + 1,)
        Edges of the last fitted column (None for a zeroed constant column)
    """

    def __init__(self, bins: int = 10, on_degenerate: str = 'raise'):
        if isinstance(bins, bool) or not isinstance(bins, (int, np.integer)):
            raise TypeError(f"bins must be int, got {type(bins)}")
        if bins < 1:
            raise ValueError(f"bins must be >= 1, got {bins}")
        if on_degenerate not in _POLICIES:
            raise ValueError(f"on_degenerate must be one of {_POLICIES}, got {on_degenerate!r}")
        self.bins = int(bins)
        self.on_degenerate = on_degenerate
        self.bin_edges_: Optional[Tensor] = None

    def fit_transform(self, column: Union[Tensor, np.ndarray, list],
                      name: Optional[str] = None) -> Tensor:
        """Return the bin index of every value in column.

        Args:
            column: (n,) numeric values
            name: Column name, only used in error messages

        Returns:
            (n,) long tensor with values in [0, bins)
        """
        col = validate_column(column)
        lo = col.min()
        hi = col.max()

        if hi == lo:
            if self.on_degenerate == 'raise':
                label = f"Column {name!r}" if name is not None else "Column"
                raise DegenerateColumnError(f"{label} is constant; its range is 0", column=name)
            self.bin_edges_ = None
            return torch.zeros(col.shape[0], dtype=torch.long, device=col.device)

        # Halved terms keep hi - lo finite for ranges near the float64 limit
        half_width = hi / 2 - lo / 2
        steps = torch.arange(self.bins + 1, dtype=col.dtype, device=col.device) / self.bins
        edges = lo + steps * half_width + steps * half_width
        edges[-1] = hi
        self.bin_edges_ = edges

        scaled = (col / 2 - lo / 2) / half_width * self.bins
        return torch.clamp(torch.floor(scaled).long(), 0, self.bins - 1)


def discretize(column: Union[Tensor, np.ndarray, list],
               bins: int = 10,
               on_degenerate: str = 'raise') -> Tensor:
    """Equal-width bin indices of column.

    Args:
        column: (n,) numeric values
        bins: Number of bins
        on_degenerate: 'raise' (default) or 'zero' for a constant column

    Returns:
        (n,) long tensor of bin indices in [0, bins)

    Raises:
        DegenerateColumnError: Constant column and on_degenerate='raise'
    """
    return Discretizer(bins=bins, on_degenerate=on_degenerate).fit_transform(column)
