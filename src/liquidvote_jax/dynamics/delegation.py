from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from warnings import warn

# Import from core
from ..core import ITERATIONS, TOLERANCE, assert_valid_delegation_matrix
from ..errors import DegenerateInfluence, DegenerateInfluenceWarning

SOLVERS = ("power_series", "fundamental_matrix")


@partial(jax.jit, static_argnames=("iterations",))
def _accumulate_powers(M, iterations):
    """returns (M^iterations, I + M + ... + M^iterations)"""
    eye = jnp.eye(M.shape[0], dtype=M.dtype)

    # Pass M as part of carry to avoid closure capture
    def step(_, carry):
        A, S, M = carry
        A = jnp.dot(A, M)
        return (A, S + A, M)

    A, S, _ = jax.lax.fori_loop(0, iterations, step, (eye, eye, M))
    return A, S


def _vote_window(vote_columns, number_of_voters, size):
    if vote_columns is None:
        return number_of_voters
    if isinstance(vote_columns, bool) or not isinstance(vote_columns, int):
        raise ValueError(f"vote_columns must be an int or None, got {vote_columns!r}")
    if not 0 <= vote_columns <= size:
        raise ValueError(f"vote_columns={vote_columns} outside 0..{size}")
    return vote_columns


def _check_iterations(iterations):
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 0:
        raise ValueError(f"iterations must be a non-negative int, got {iterations!r}")


def resolve_power_series(M, number_of_voters, *, iterations=ITERATIONS, vote_columns=None):
    """
    Resolve transitive delegation by accumulating matrix powers.

    A and S start at the identity; each of the `iterations` steps sets
    A <- A.M and S <- S + A. There is no early exit.

    Args:
        M: (n + p, n + p) delegation matrix
        number_of_voters: n
        iterations: number of steps (default ITERATIONS)
        vote_columns: number of leading columns of the final power summed into
            the vote totals. None sums over all n voter columns.

    Returns:
        (vote_totals, influence): arrays of length p and n
    """
    _check_iterations(iterations)
    M = jnp.asarray(M)
    n = number_of_voters
    window = _vote_window(vote_columns, n, M.shape[0])
    A, S = _accumulate_powers(M, iterations)

    # voter-to-voter block of the accumulated powers
    Svv = S[:n, :n]
    received = Svv.sum(axis=1)
    self_weight = jnp.diagonal(Svv)
    influence = received / self_weight

    vote_totals = A[:, :window].sum(axis=1)[n:]
    return vote_totals, influence


def resolve_fundamental_matrix(M, number_of_voters, *, vote_columns=None):
    """
    Closed-form limit of resolve_power_series.

    With Q = M[:n, :n] (voter to voter) and R = M[n:, :n] (voter to policy),
    the accumulated voter block converges to the fundamental matrix
    N = (I - Q)^-1 and the policy rows of the final power converge to R.N.
    Results match the power series within tolerance only when the series has
    converged, i.e. when all delegated weight is absorbed within ITERATIONS
    steps; otherwise RuntimeError is raised.
    """
    M = jnp.asarray(M)
    n = number_of_voters
    size = M.shape[0]
    p = size - n
    window = _vote_window(vote_columns, n, size)

    Q = M[:n, :n]
    R = M[n:, :n]
    error_unable_msg = "unable to solve for fundamental matrix "
    if n == 0:
        empty = jnp.zeros((0,), dtype=M.dtype)
        vote_totals = (jnp.arange(p) < window).astype(M.dtype)
        return vote_totals, empty
    # weight still circulating among voters after ITERATIONS steps; the power
    # series has not converged, and I - Q may be singular up to rounding
    remaining = float(jnp.max(jnp.abs(jnp.linalg.matrix_power(Q, ITERATIONS))))
    if not remaining <= TOLERANCE:
        raise RuntimeError(error_unable_msg+"(some weight is never absorbed: "
                           +str(remaining)+" left after "+str(ITERATIONS)+" steps)")
    N = jnp.linalg.solve(jnp.eye(n, dtype=M.dtype) - Q, jnp.eye(n, dtype=M.dtype))
    if not bool(jnp.all(jnp.isfinite(N))):
        raise RuntimeError(error_unable_msg+"(nan)")

    influence = N.sum(axis=1) / jnp.diagonal(N)
    absorbed = jnp.dot(R, N)
    vote_totals = absorbed[:, :min(window, n)].sum(axis=1)
    # columns past the voters are policy columns, identity on the policy rows
    vote_totals = vote_totals + (jnp.arange(p) < window - n).astype(M.dtype)
    return vote_totals, influence


class DelegationChain:
    def __init__(self, *, M, number_of_voters):
        """initializes a DelegationChain by copying in the delegation
        matrix M and checking that its policy columns are absorbing"""
        self.M = jnp.asarray(M)  # copy delegation matrix to JAX array
        assert_valid_delegation_matrix(self.M, number_of_voters)
        self.number_of_voters = number_of_voters
        self.number_of_policies = self.M.shape[0] - number_of_voters
        self.absorbing_points = jnp.equal(jnp.diagonal(self.M), 1.0)

    def evolve(self, x):
        """ move the weight vector x one delegation step by returning M.x """
        return jnp.dot(self.M, x)

    def resolve(self, *, solver="power_series", iterations=ITERATIONS, vote_columns=None, strict=False):
        """
        Resolves delegation into vote totals per policy and influence per voter.

        Args:
            solver: Strategy to use. Options:
                - "power_series": (Default) Accumulates M^0..M^iterations.
                - "fundamental_matrix": Closed-form limit via a linear solve.
                  Ignores iterations.
            iterations: Number of delegation steps for "power_series".
            vote_columns: Leading columns of the final power summed into the
                vote totals (default: all voter columns).
            strict: Raise DegenerateInfluence instead of warning when an
                influence score is Inf or NaN.

        Returns:
            (vote_totals, influence)
        """
        if solver == "power_series":
            vote_totals, influence = resolve_power_series(
                self.M, self.number_of_voters,
                iterations=iterations,
                vote_columns=vote_columns
            )
        elif solver == "fundamental_matrix":
            vote_totals, influence = resolve_fundamental_matrix(
                self.M, self.number_of_voters,
                vote_columns=vote_columns
            )
        else:
            raise ValueError(f"Unknown solver: {solver}")

        degenerate = [int(i) for i in jnp.flatnonzero(~jnp.isfinite(influence))]
        if degenerate:
            if strict:
                raise DegenerateInfluence(degenerate)
            warn(f"non-finite influence for voter index(es) {degenerate}",
                 DegenerateInfluenceWarning)

        self.vote_totals = vote_totals
        self.influence = influence
        return vote_totals, influence
