# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Kinematics Utilities

Standalone numerical helpers used by the constraint solver and the Hermite
paths. These functions are stateless.

## Functions

- svd_pseudoinverse(): Moore-Penrose pseudo-inverse of a (rank deficient) Jacobian
- kernel_projector(): Projector I - J⁺J onto the null space of a Jacobian
- bernstein_basis(): Cubic Bernstein polynomials and their derivatives
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from conpath.spec import Jacobian


def svd_pseudoinverse(
    J: Jacobian,
    rcond: float = 1e-10,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Compute the pseudoinverse of a Jacobian through its SVD.

    Singular values below ``rcond * max(singular values)`` are treated as
    zero, so rank deficient Jacobians (redundant constraints, singular
    configurations) give the minimum norm least-squares solution.

    Args:
        J: m x n Jacobian matrix
        rcond: Relative cut-off for small singular values

    Returns:
        Tuple of (n x m pseudoinverse, singular values in decreasing order)

    Example:
        value, J = projector.compute_value_and_jacobian(q)
        J_pinv, sigmas = svd_pseudoinverse(J)
        dq = -J_pinv @ value
    """
    m, n = J.shape
    if m == 0 or n == 0:
        return np.zeros((n, m)), np.zeros(0)

    U, sigmas, Vt = np.linalg.svd(J, full_matrices=False)
    cutoff = rcond * sigmas[0] if sigmas.size else 0.0
    inv = np.zeros_like(sigmas)
    mask = sigmas > cutoff
    inv[mask] = 1.0 / sigmas[mask]
    J_pinv: NDArray[np.float64] = (Vt.T * inv) @ U.T
    return J_pinv, sigmas


def matrix_rank(sigmas: NDArray[np.float64], rcond: float = 1e-10) -> int:
    """Rank from singular values returned by svd_pseudoinverse()."""
    if sigmas.size == 0:
        return 0
    return int(np.count_nonzero(sigmas > rcond * sigmas[0]))


def kernel_projector(J: Jacobian, rcond: float = 1e-10) -> NDArray[np.float64]:
    """Compute the orthogonal projector onto the null space of J.

    P = I - J⁺J. For any vector v, J @ (P @ v) == 0 up to round-off.

    Args:
        J: m x n Jacobian matrix

    Returns:
        n x n projector matrix
    """
    n = J.shape[1]
    J_pinv, _ = svd_pseudoinverse(J, rcond)
    result: NDArray[np.float64] = np.eye(n) - J_pinv @ J
    return result


def bernstein_basis(u: float, order: int = 0) -> NDArray[np.float64]:
    """Cubic Bernstein polynomials (or their derivatives) at u in [0, 1].

    Derivatives are with respect to u. Orders above 3 are identically zero.

    Args:
        u: Normalized parameter
        order: Derivative order

    Returns:
        Array of the 4 basis values
    """
    if order == 0:
        v = 1.0 - u
        return np.array([v**3, 3 * u * v**2, 3 * u**2 * v, u**3])
    if order == 1:
        v = 1.0 - u
        return 3.0 * np.array([-(v**2), v**2 - 2 * u * v, 2 * u * v - u**2, u**2])
    if order == 2:
        return 6.0 * np.array([1.0 - u, 3 * u - 2.0, 1.0 - 3 * u, u])
    if order == 3:
        return 6.0 * np.array([-1.0, 3.0, -3.0, 1.0])
    return np.zeros(4)
