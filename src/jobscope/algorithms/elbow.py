"""
Elbow-method sweep over cluster counts.

Runs K-means for every k in a range and records the inertia of each run.
The curve is advisory output for a human reader: no "best" k is chosen
here, the final cluster count is passed explicitly to a later K-means run.
"""

from dataclasses import dataclass
from typing import Optional, List, Tuple, Dict, Iterator, Union
import torch
from torch import Tensor
import numpy as np

from .kmeans import KMeans
from ..errors import InvalidKError
from ..utils.validation import validate_data


@dataclass(frozen=True)
class ElbowCurve:
    """Ordered (k, inertia) pairs from an elbow sweep."""

    ks: Tuple[int, ...]
    inertias: Tuple[float, ...]

    def __post_init__(self):
        if len(self.ks) != len(self.inertias):
            raise ValueError(f"{len(self.ks)} cluster counts but {len(self.inertias)} inertias")

    def __len__(self) -> int:
        return len(self.ks)

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return iter(zip(self.ks, self.inertias))

    def as_pairs(self) -> List[Tuple[int, float]]:
        """Return the curve as a list of (k, inertia) pairs."""
        return list(self)

    def inertia_at(self, k: int) -> float:
        """Inertia recorded for cluster count k."""
        try:
            return self.inertias[self.ks.index(k)]
        except ValueError:
            raise KeyError(f"k={k} is not on the curve (k in {self.ks[0]}..{self.ks[-1]})") from None


class ElbowSelector:
    """Sweep K-means over a range of cluster counts.

    Parameters
    ----------
    k_min : int, default=1
        Smallest cluster count on the curve
    k_max : int, default=10
        Largest cluster count on the curve
    restarts : int, default=10
        Restarts per K-means run
    random_state : int, optional
        Seed shared by every k, so all runs use the same seed configuration
    warm_start : bool, default=True
        For every k > k_min, also run K-means once from the previous best
        centroids plus the point farthest from them, and keep the lower
        inertia. Lloyd iterations never increase inertia, so this keeps the
        curve non-increasing.
    init : str, default='random'
        Initialization method of the seeded restarts
    max_iter : int, default=300
        Iteration cap per restart
    verbose : int, default=0
        Verbosity level
    device : torch.device, optional
        Device for computation

    Attributes
    ----------
    curve_ : ElbowCurve
        Result of the last sweep
    models_ : dict of int to KMeans
        Fitted model kept for every k
    """

    def __init__(self,
                 k_min: int = 1,
                 k_max: int = 10,
                 restarts: int = 10,
                 random_state: Optional[int] = None,
                 warm_start: bool = True,
                 init: str = 'random',
                 max_iter: int = 300,
                 verbose: int = 0,
                 device: Optional[torch.device] = None):
        self.k_min = k_min
        self.k_max = k_max
        self.restarts = restarts
        self.random_state = random_state
        self.warm_start = warm_start
        self.init = init
        self.max_iter = max_iter
        self.verbose = verbose
        self.device = device

        self.curve_: Optional[ElbowCurve] = None
        self.models_: Dict[int, KMeans] = {}

    def _check_range(self, n_points: int) -> None:
        if self.k_min < 1:
            raise InvalidKError(f"k_min must be positive, got {self.k_min}")
        if self.k_max < self.k_min:
            raise InvalidKError(f"k_max ({self.k_max}) is smaller than k_min ({self.k_min})")
        if self.k_max > n_points:
            raise InvalidKError(f"k_max ({self.k_max}) cannot be larger than "
                                f"n_samples ({n_points})")

    def _kmeans(self, k: int, init) -> KMeans:
        return KMeans(
            n_clusters=k,
            init=init,
            restarts=self.restarts,
            max_iter=self.max_iter,
            random_state=self.random_state,
            verbose=max(self.verbose - 1, 0),
            device=self.device
        )

    @staticmethod
    def _grow_centers(X: Tensor, centers: Tensor) -> Tensor:
        """Append the point farthest from its nearest center."""
        distances = torch.cdist(X, centers).min(dim=1).values
        farthest = int(torch.argmax(distances).item())
        return torch.cat([centers, X[farthest].unsqueeze(0)], dim=0)

    def sweep(self, points: Union[Tensor, np.ndarray, list]) -> ElbowCurve:
        """Run K-means for every k in [k_min, k_max].

        Args:
            points: (n, d) data, normally standardized

        Returns:
            ElbowCurve with one (k, inertia) pair per cluster count
        """
        X = validate_data(points, dtype=torch.float64, device=self.device)
        self._check_range(X.shape[0])

        ks: List[int] = []
        inertias: List[float] = []
        self.models_ = {}
        previous_centers: Optional[Tensor] = None

        for k in range(self.k_min, self.k_max + 1):
            best = self._kmeans(k, self.init).fit(X)

            if self.warm_start and previous_centers is not None:
                warm = self._kmeans(k, self._grow_centers(X, previous_centers)).fit(X)
                if warm.inertia_ < best.inertia_:
                    best = warm

            if self.verbose:
                print(f"k={k:3d}: inertia = {best.inertia_:.6f}")

            ks.append(k)
            inertias.append(best.inertia_)
            self.models_[k] = best
            previous_centers = best.cluster_centers_

        self.curve_ = ElbowCurve(ks=tuple(ks), inertias=tuple(inertias))
        return self.curve_


def sweep(points: Union[Tensor, np.ndarray, list],
          k_min: int = 1,
          k_max: int = 10,
          restarts: int = 10,
          seed: Optional[int] = None,
          **kwargs) -> ElbowCurve:
    """Compute the elbow curve of points for k in [k_min, k_max].

    Args:
        points: (n, d) data, normally standardized
        k_min: Smallest cluster count
        k_max: Largest cluster count
        restarts: Restarts per K-means run
        seed: Seed shared by every run
        **kwargs: Further ElbowSelector parameters

    Returns:
        ElbowCurve
    """
    selector = ElbowSelector(k_min=k_min, k_max=k_max, restarts=restarts,
                             random_state=seed, **kwargs)
    return selector.sweep(points)
