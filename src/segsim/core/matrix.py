"""
Matrix operations for substitution processes.

This module provides the rate matrix construction and eigendecomposition
needed to compute transition probabilities along branches.
"""

import numpy as np


def eigen_decompose_rev(Q: np.ndarray, pi: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Eigendecompose reversible rate matrix Q = U @ diag(eigenvalues) @ V.

    Uses symmetrization trick for reversible (time-reversible) rate matrices:
    Transform Q to symmetric matrix Q' = √D @ Q @ √D^(-1), where D = diag(pi),
    then eigendecompose Q' and transform back.

    Parameters
    ----------
    Q : ndarray, shape (n, n)
        Reversible rate matrix satisfying detailed balance: π_i * Q[i,j] = π_j * Q[j,i]
    pi : ndarray, shape (n,)
        Stationary distribution (equilibrium frequencies)

    Returns
    -------
    eigenvalues : ndarray, shape (n,)
        Eigenvalues of Q, sorted in ascending order
    U : ndarray, shape (n, n)
        Left eigenvector matrix
    V : ndarray, shape (n, n)
        Right eigenvector matrix

    Notes
    -----
    The decomposition satisfies:
    - Q = U @ diag(eigenvalues) @ V
    - P(t) = U @ diag(exp(eigenvalues * t)) @ V

    Examples
    --------
    >>> pi = np.array([0.25, 0.25, 0.25, 0.25])
    >>> Q = create_reversible_Q(np.ones((4, 4)), pi)
    >>> eigenvalues, U, V = eigen_decompose_rev(Q, pi)
    >>> np.allclose(Q, U @ np.diag(eigenvalues) @ V)
    True
    """
    sqrt_pi = np.sqrt(pi)

    # Symmetric if Q satisfies detailed balance
    Q_sym = Q * sqrt_pi[:, np.newaxis] / sqrt_pi[np.newaxis, :]
    eigenvalues, eigenvectors = np.linalg.eigh(Q_sym)

    U = eigenvectors / sqrt_pi[:, np.newaxis]
    V = eigenvectors.T * sqrt_pi[np.newaxis, :]

    return eigenvalues, U, V


def create_reversible_Q(
    rates: np.ndarray, pi: np.ndarray, normalize: bool = True
) -> np.ndarray:
    """
    Create a reversible rate matrix from exchangeability rates and stationary distribution.

    Parameters
    ----------
    rates : ndarray, shape (n, n)
        Symmetric exchangeability matrix (r[i,j] = r[j,i])
    pi : ndarray, shape (n,)
        Stationary distribution (equilibrium frequencies)
    normalize : bool, default=True
        If True, scale Q so that expected rate is 1 substitution per time unit

    Returns
    -------
    Q : ndarray, shape (n, n)
        Reversible rate matrix satisfying detailed balance

    Notes
    -----
    The rate matrix is constructed as Q[i,j] = r[i,j] * pi[j] for i ≠ j,
    and Q[i,i] = -sum(Q[i,j] for j ≠ i).
    """
    Q = rates * pi[np.newaxis, :]

    np.fill_diagonal(Q, 0.0)
    np.fill_diagonal(Q, -np.sum(Q, axis=1))

    if normalize:
        expected_rate = -np.dot(pi, Q.diagonal())
        Q /= expected_rate

    return Q


def transition_matrices(
    eigenvalues: np.ndarray, U: np.ndarray, V: np.ndarray, times: np.ndarray
) -> np.ndarray:
    """
    Compute P(t) = exp(Qt) for a batch of times.

    Parameters
    ----------
    eigenvalues, U, V : ndarray
        Eigendecomposition from :func:`eigen_decompose_rev`
    times : ndarray, shape (m,)
        Times (branch length scaled by site rate)

    Returns
    -------
    ndarray, shape (m, n, n)
        One stochastic matrix per time
    """
    exp_eigvals = np.exp(np.multiply.outer(times, eigenvalues))
    P = np.einsum('ik,mk,kj->mij', U, exp_eigvals, V)

    # Clip floating point noise and renormalise rows
    P = np.maximum(P, 0.0)
    P /= P.sum(axis=2, keepdims=True)
    return P
