"""Construction of the delegation matrix from a vote table.

The matrix M has size (n + p) x (n + p). Rows and columns are indexed by the
n voters first, then the p policies. Column j of a voter holds the weights
that voter passes to every row target in one step; policy columns are fixed
to the identity on the policy rows, so policies are absorbing states.
"""

import numpy as np
import jax.numpy as jnp
from warnings import warn

from ..errors import MissingVoterRecord, UnresolvedTarget, UnresolvedTargetWarning
from ..settings import Policy

UNRESOLVED_POLICIES = ("warn", "raise", "ignore")


def build_delegation_matrix(voters, policies, votes, *, on_unresolved="warn"):
    """
    Build the (n + p) x (n + p) delegation matrix.

    Args:
        voters: ordered voter names (index 0..n-1)
        policies: ordered policies, Policy instances or bare names (index n..n+p-1)
        votes: mapping voter -> {target -> weight}
        on_unresolved: what to do with an entry whose target is neither a voter
            nor a policy name: "warn" (drop it and emit UnresolvedTargetWarning),
            "raise" (UnresolvedTarget) or "ignore" (drop silently)

    Returns:
        jax.Array of shape (n + p, n + p)

    Raises:
        MissingVoterRecord: a voter has no entry in votes
    """
    if on_unresolved not in UNRESOLVED_POLICIES:
        raise ValueError(
            f"on_unresolved must be one of {UNRESOLVED_POLICIES}, got {on_unresolved!r}"
        )
    voters = list(voters)
    policy_names = [Policy.coerce(p).name for p in policies]
    n = len(voters)
    p = len(policy_names)

    # first occurrence wins when looking up a name, voters before policies
    row_index = {}
    for i, name in enumerate(voters):
        row_index.setdefault(name, i)
    for i, name in enumerate(policy_names):
        row_index.setdefault(name, n + i)

    m0 = np.zeros((n + p, n), dtype=jnp.result_type(float))
    for col, voter in enumerate(voters):
        if voter not in votes:
            raise MissingVoterRecord(voter)
        for target, weight in votes[voter].items():
            row = row_index.get(target)
            if row is None:
                if on_unresolved == "raise":
                    raise UnresolvedTarget(voter, target)
                if on_unresolved == "warn":
                    warn(f"dropping weight {weight} from voter {voter!r} "
                         f"to unknown target {target!r}", UnresolvedTargetWarning)
                continue
            m0[row, col] = weight

    # policy rows of the block are [0 | I]; transposed they become the policy columns
    policy_block = jnp.hstack([
        jnp.zeros((p, n), dtype=m0.dtype),
        jnp.eye(p, dtype=m0.dtype)
    ])
    return jnp.concatenate([jnp.asarray(m0), policy_block.T], axis=1)
