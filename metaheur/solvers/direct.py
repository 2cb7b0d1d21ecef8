"""DIRECT (DIviding RECTangles) global search.

Jones, Perttunen & Stuckman (1993), *Lipschitzian optimization without the
Lipschitz constant*. The unit hypercube is partitioned into boxes whose side
lengths are powers of 1/3. Every iteration selects the potentially optimal
boxes (those on the lower-right convex hull of the cost-vs-size diagram) and
trisects each of them along its longest sides.

The budget is checked before each box division; a division evaluates two
points per longest side, so a run may overshoot ``max_evals`` by at most
``2 * n - 1`` evaluations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..core.config import SolverConfig, check_positive
from ..core.problem import Array, Status
from ..core.solver import Solver
from ..logging import get_logger

logger = get_logger(__name__)

# slope sentinels for hull points without smaller / larger neighbours
SLOPE_LOWER = -1.976e14
SLOPE_UPPER = 1.976e14
TIE_TOL = 1e-13


@dataclass
class Box:
    """
    One box of the partition.

    Attributes:
        lengths: Per-dimension number of trisections; the side length along
            dimension ``d`` is ``3 ** -lengths[d]``.
        center: Centre in unit-hypercube coordinates.
        fc: Objective value at the centre.
    """

    lengths: np.ndarray
    center: Array
    fc: float

    @property
    def size(self) -> float:
        """Half the Euclidean norm of the side lengths (centre-to-vertex distance)."""
        return 0.5 * float(np.linalg.norm(3.0 ** -self.lengths.astype(float)))

    @property
    def level(self) -> int:
        """Total number of trisections; boxes of equal level form one size class."""
        return int(self.lengths.sum())


@dataclass(frozen=True)
class DirectConfig(SolverConfig):
    """
    Settings of :class:`Direct`.

    Args:
        ep: Minimal relative improvement a potentially optimal box must
            promise. Defaults to 1e-4.
        maxits: Optional cap on the number of iterations.
        target: Optional known optimum value; enables the percent-error stop.
        target_tol: Percent error below which the run stops when ``target`` is
            set. Defaults to 0.01.
    """

    ep: float = 1e-4
    maxits: Optional[int] = None
    target: Optional[float] = None
    target_tol: float = 0.01

    def __post_init__(self) -> None:
        if self.ep < 0:
            raise ValueError(f"ep must be non-negative, got {self.ep}")
        if self.maxits is not None:
            object.__setattr__(self, "maxits", int(self.maxits))
            check_positive(self.maxits, "maxits")
        check_positive(self.target_tol, "target_tol")


class Direct(Solver):
    """
    Deterministic DIRECT partitioning search.

    The search can be driven manually with :meth:`initialize` followed by
    repeated :meth:`iterate` calls, or one step lower with
    :meth:`find_potentially_optimal` and :meth:`divide`.

    Attributes:
        boxes: All boxes of the partition, in creation order.
        history_iterations: ``(iteration, evalcount, minval)`` after
            initialization and after every iteration.
    """

    name = "direct"
    config_class = DirectConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.initialized = False
        self.boxes: List[Box] = []
        self.history_iterations: List[Tuple[int, int, float]] = []

    @property
    def minval(self) -> float:
        """Lowest centre cost over the whole partition."""
        return min(box.fc for box in self.boxes) if self.boxes else float("inf")

    def _run(self) -> None:
        if not self.initialize():
            return
        while self.iterate():
            pass

    def initialize(self) -> bool:
        """
        Evaluate the centre of the unit hypercube.

        Returns:
            False if the run stopped on the first evaluation.

        Raises:
            RuntimeError: If called twice.
        """
        if self.initialized:
            raise RuntimeError("DIRECT search is already initialized.")
        if self.status is Status.NOT_STARTED:
            self.status = Status.RUNNING
        self.initialized = True

        center = np.full(self.n, 0.5)
        fc = self.evaluate(self._to_problem(center))
        if self.stop_nonfinite(fc):
            return False
        self.boxes.append(Box(np.zeros(self.n, dtype=int), center, fc))
        self._record_iteration()
        return not self._target_reached()

    def iterate(self) -> bool:
        """
        Run one iteration: select potentially optimal boxes and divide them.

        Returns:
            True while the search may continue.
        """
        if not self.initialized:
            raise RuntimeError("Call initialize() before iterate().")
        if self.stopped or self.evalcount >= self.max_evals:
            return False

        for index in self.find_potentially_optimal():
            if self.evalcount >= self.max_evals:
                break
            if not self.divide(index):
                return False

        self.nit += 1
        self._record_iteration()
        if self._target_reached():
            return False
        maxits = self.config.maxits
        if maxits is not None and self.nit >= maxits:
            if self.evalcount < self.max_evals:
                self._stop(Status.MAX_ITERATIONS, f"Reached maxits={maxits} iterations.")
            return False
        return self.evalcount < self.max_evals

    def find_potentially_optimal(self) -> List[int]:
        """
        Indices of the potentially optimal boxes.

        The lowest-cost box of every size class (plus boxes tying it within
        ``1e-13``) is a hull candidate. A candidate is kept if the steepest
        slope to smaller candidates does not exceed the flattest slope to
        larger ones, and if it promises a relative improvement of at least
        ``ep`` over the current minimum.
        """
        levels = np.array([box.level for box in self.boxes])
        fc = np.array([box.fc for box in self.boxes])
        sizes = np.array([box.size for box in self.boxes])

        hull: List[int] = []
        for level in np.unique(levels):
            members = np.flatnonzero(levels == level)
            best = members[np.argmin(fc[members])]
            hull.append(int(best))
            ties = members[np.abs(fc[members] - fc[best]) <= TIE_TOL]
            hull.extend(int(i) for i in ties if i != best)

        hull_idx = np.array(hull)
        hull_levels = levels[hull_idx]
        hull_fc = fc[hull_idx]
        hull_sizes = sizes[hull_idx]
        lbound = np.empty(len(hull))
        ubound = np.empty(len(hull))
        with np.errstate(divide="ignore", invalid="ignore"):
            for i in range(len(hull)):
                smaller = hull_levels > hull_levels[i]
                larger = hull_levels < hull_levels[i]
                if smaller.any():
                    slopes = (hull_fc[i] - hull_fc[smaller]) / (hull_sizes[i] - hull_sizes[smaller])
                    lbound[i] = slopes.max()
                else:
                    lbound[i] = SLOPE_LOWER
                if larger.any():
                    slopes = (hull_fc[larger] - hull_fc[i]) / (hull_sizes[larger] - hull_sizes[i])
                    ubound[i] = slopes.min()
                else:
                    ubound[i] = SLOPE_UPPER

        minval = float(fc.min())
        ep = self.config.ep
        selected: List[int] = []
        for i in range(len(hull)):
            if not lbound[i] - ubound[i] <= 0:
                continue
            if minval != 0:
                gain = (minval - hull_fc[i]) / abs(minval) + hull_sizes[i] * ubound[i] / abs(minval)
                keep = gain >= ep
            else:
                keep = hull_fc[i] - hull_sizes[i] * ubound[i] <= 0
            if keep:
                selected.append(hull[i])

        if not selected:
            # the best box of the largest size class always qualifies in exact arithmetic
            selected.append(hull[0])
            logger.debug("%s: no box passed the hull test, dividing box %d", self.name, hull[0])
        return selected

    def divide(self, index: int) -> bool:
        """
        Trisect box ``index`` along all of its longest sides.

        Both neighbours are sampled along every longest side first. The sides
        are then cut in ascending order of ``(min(f_left, f_right), dim)``, so
        the best samples end up in the largest new boxes. The parent box stays in
        place as the middle third.

        Returns:
            False if the run stopped on a non-finite cost; the partition is
            then left unchanged.
        """
        box = self.boxes[index]
        shortest = int(box.lengths.min())
        dims = np.flatnonzero(box.lengths == shortest)
        delta = 3.0 ** -(shortest + 1)

        samples = []
        for d in dims:
            pair = []
            for offset in (-delta, delta):
                c = box.center.copy()
                c[d] += offset
                fx = self.evaluate(self._to_problem(c))
                if self.stop_nonfinite(fx):
                    return False
                pair.append((c, fx))
            samples.append(pair)

        order = sorted(
            range(len(dims)),
            key=lambda k: (min(samples[k][0][1], samples[k][1][1]), dims[k]),
        )
        for k in order:
            box.lengths[dims[k]] += 1
            for c, fx in samples[k]:
                self.boxes.append(Box(box.lengths.copy(), c, fx))
        return True

    def _to_problem(self, u: Array) -> Array:
        return self.round_integers(self.from_unit(u))

    def _record_iteration(self) -> None:
        self.history_iterations.append((self.nit, self.evalcount, self.minval))
        logger.debug(
            "%s: iteration %d, %d boxes, minval %.6g",
            self.name,
            self.nit,
            len(self.boxes),
            self.minval,
        )

    def _target_reached(self) -> bool:
        cfg = self.config
        if cfg.target is None:
            return False
        if cfg.target != 0:
            perror = 100.0 * (self.minval - cfg.target) / abs(cfg.target)
        else:
            perror = 100.0 * self.minval
        if perror < cfg.target_tol:
            self._stop(
                Status.TARGET_REACHED,
                f"Percent error {perror:.3g} below target_tol={cfg.target_tol}.",
            )
            return True
        return False


__all__ = ["Direct", "DirectConfig", "Box"]
