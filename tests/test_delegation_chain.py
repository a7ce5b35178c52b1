import jax.numpy as jnp
import pytest
import liquidvote_jax as lv
from liquidvote_jax import DelegationChain, build_delegation_matrix
from liquidvote_jax.dynamics import resolve_power_series


def assert_vectors_close(v1, v2, tol=lv.TOLERANCE):
    """Assert two result vectors agree in L1 norm within tol."""
    v1 = jnp.asarray(v1)
    v2 = jnp.asarray(v2)
    assert v1.shape == v2.shape
    diff = float(jnp.linalg.norm(v1 - v2, ord=1)) if v1.size else 0.0
    assert diff < tol, f"L1 diff {diff} exceeds tolerance {tol}"


def _chain(voters, policies, votes):
    M = build_delegation_matrix(voters, policies, votes)
    return DelegationChain(M=M, number_of_voters=len(voters))


@pytest.mark.parametrize("p,target", [(1, 0), (2, 1), (5, 3)])
def test_unanimous_policy_receives_every_vote(p, target):
    model = lv.unanimous_policy(n=4, p=p, target=target).analyze()
    expected = jnp.zeros(p).at[target].set(4.0)
    assert_vectors_close(model.vote_totals, expected)


def test_single_voter_single_policy():
    chain = _chain(["A"], ["P"], {"A": {"P": 1.0}})
    vote_totals, influence = chain.resolve()
    assert_vectors_close(vote_totals, [1.0])
    assert_vectors_close(influence, [1.0])


def test_two_voter_chain():
    """A: 0.5 -> B, 0.5 -> P.  B: 1.0 -> P."""
    model = lv.two_voter_chain().analyze()
    assert_vectors_close(model.vote_totals, [2.0])
    # A receives only its own weight; B also receives half of A's
    assert_vectors_close(model.influence, [1.0, 1.5])


def test_self_contained_voter_has_unit_influence():
    model = lv.self_contained_voter().analyze()
    assert float(model.influence[0]) == 1.0
    assert_vectors_close(model.vote_totals, [0.0])


def test_resolve_is_bit_identical_across_calls():
    M = lv.delegation_ring(n=5, p=2).analyze().DelegationChain.M
    first = resolve_power_series(M, 5)
    second = resolve_power_series(M, 5)
    assert jnp.array_equal(first[0], second[0])
    assert jnp.array_equal(first[1], second[1])


def test_zero_iterations_is_identity():
    chain = _chain(["A", "B"], ["P"], {"A": {"B": 1.0}, "B": {"P": 1.0}})
    vote_totals, influence = chain.resolve(iterations=0)
    assert_vectors_close(vote_totals, [0.0])
    assert_vectors_close(influence, [1.0, 1.0])


def test_iteration_budget_truncates_chain():
    """With one step, weight passed along a chain has not reached the policy."""
    chain = _chain(["A", "B"], ["P"], {"A": {"B": 1.0}, "B": {"P": 1.0}})
    vote_totals, influence = chain.resolve(iterations=1)
    # M^1 restricted to policy row: only B's column reaches P
    assert_vectors_close(vote_totals, [1.0])
    vote_totals, _ = chain.resolve(iterations=2)
    assert_vectors_close(vote_totals, [2.0])


def test_ring_influence():
    """Each voter in a ring keeps 1/(1 - 0.9^n) of the 10 units it sees."""
    n = 4
    model = lv.delegation_ring(n=n, p=2, leak=0.1).analyze()
    expected = 10.0 * (1.0 - 0.9 ** n)
    assert_vectors_close(model.influence, [expected] * n, tol=1e-9)
    assert_vectors_close(model.vote_totals, [float(n), 0.0], tol=1e-9)


@pytest.mark.parametrize("n,p", [(2, 1), (4, 2), (7, 3)])
def test_fundamental_matrix_matches_power_series(n, p):
    chain = lv.delegation_ring(n=n, p=p, leak=0.2).analyze().DelegationChain
    series = chain.resolve(solver="power_series")
    closed = chain.resolve(solver="fundamental_matrix")
    assert_vectors_close(series[0], closed[0], tol=1e-9)
    assert_vectors_close(series[1], closed[1], tol=1e-9)


def test_fundamental_matrix_singular_when_weight_never_absorbed():
    chain = lv.self_contained_voter().analyze().DelegationChain
    with pytest.raises(RuntimeError):
        chain.resolve(solver="fundamental_matrix")


@pytest.mark.parametrize("w", [(1/3, 1/3, 1/3), (0.1, 0.2, 0.7), (0.7, 0.2, 0.1)])
def test_fundamental_matrix_rejects_closed_cycle(w):
    """Weight circulating among voters forever makes I - Q singular up to rounding."""
    voters = ["a", "b", "c"]
    votes = {v: dict(zip(voters, w)) for v in voters}
    chain = _chain(voters, ["P"], votes)
    with pytest.raises(RuntimeError, match="never absorbed"):
        chain.resolve(solver="fundamental_matrix")
    # the reference power series still resolves
    _, influence = chain.resolve()
    assert bool(jnp.all(jnp.isfinite(influence)))


def test_fundamental_matrix_rejects_slow_absorption():
    """Weight not absorbed within the iteration budget is rejected."""
    chain = lv.delegation_ring(n=3, p=1, leak=0.001).analyze().DelegationChain
    with pytest.raises(RuntimeError):
        chain.resolve(solver="fundamental_matrix")


def test_legacy_three_column_window():
    """vote_columns=3 sums the first three columns, policy columns included."""
    model = lv.two_voter_chain().analyze(vote_columns=3)
    # two voter columns deliver 2.0, the P column itself adds 1.0
    assert_vectors_close(model.vote_totals, [3.0])

    model = lv.unanimous_policy(n=5, p=1).analyze(vote_columns=3)
    assert_vectors_close(model.vote_totals, [3.0])


def test_vote_columns_agree_between_solvers():
    chain = lv.delegation_ring(n=3, p=2, leak=0.5).analyze().DelegationChain
    for k in range(0, 6):
        series = chain.resolve(vote_columns=k)
        closed = chain.resolve(solver="fundamental_matrix", vote_columns=k)
        assert_vectors_close(series[0], closed[0], tol=1e-9)


@pytest.mark.parametrize("bad", [-1, 4, 2.0, True])
def test_vote_columns_out_of_range(bad):
    chain = _chain(["A", "B"], ["P"], {"A": {"P": 1.0}, "B": {"P": 1.0}})
    with pytest.raises(ValueError):
        chain.resolve(vote_columns=bad)


@pytest.mark.parametrize("bad", [-1, 1.5, None])
def test_invalid_iterations(bad):
    chain = _chain(["A"], ["P"], {"A": {"P": 1.0}})
    with pytest.raises(ValueError):
        chain.resolve(iterations=bad)


def test_unknown_solver():
    chain = _chain(["A"], ["P"], {"A": {"P": 1.0}})
    with pytest.raises(ValueError, match="Unknown solver"):
        chain.resolve(solver="eigen")


def test_degenerate_influence_warns():
    """Weight that grows every step overflows; the score is kept as NaN."""
    chain = _chain(["solo"], ["P"], {"solo": {"solo": 10.0}})
    with pytest.warns(lv.DegenerateInfluenceWarning):
        _, influence = chain.resolve()
    assert not bool(jnp.isfinite(influence[0]))


def test_degenerate_influence_strict():
    chain = _chain(["ok", "solo"], ["P"], {"ok": {"P": 1.0}, "solo": {"solo": 10.0}})
    with pytest.raises(lv.DegenerateInfluence) as excinfo:
        chain.resolve(strict=True)
    assert excinfo.value.voters == [1]


def test_chain_rejects_non_absorbing_policy_columns():
    M = jnp.array([[0.0, 0.5], [1.0, 0.5]])
    with pytest.raises(AssertionError):
        DelegationChain(M=M, number_of_voters=1)


def test_chain_rejects_non_square_matrix():
    with pytest.raises(AssertionError):
        DelegationChain(M=jnp.zeros((3, 2)), number_of_voters=1)


def test_chain_absorbing_points():
    chain = lv.two_voter_chain().analyze().DelegationChain
    assert chain.number_of_policies == 1
    assert chain.absorbing_points.tolist() == [False, False, True]
    # one step moves A's unit of weight half to B, half to P
    x = chain.evolve(jnp.array([1.0, 0.0, 0.0]))
    assert_vectors_close(x, [0.0, 0.5, 0.5])
