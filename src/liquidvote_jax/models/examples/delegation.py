"""Small delegation settings with known outcomes."""

from ..base import DelegationModel
from ...settings import Setting


def two_voter_chain(on_unresolved="warn"):
    """
    A passes half its weight to B and half to P; B passes everything to P.

    Resolves to P = 2.0, influence A = 1.0, B = 1.5.
    """
    return DelegationModel(
        setting=Setting(
            title="two voter chain",
            voters=["A", "B"],
            policies=["P"],
            votes={
                "A": {"B": 0.5, "P": 0.5},
                "B": {"P": 1.0},
            },
        ),
        on_unresolved=on_unresolved
    )


def unanimous_policy(n=3, p=2, target=0):
    """
    Every one of n voters puts its whole weight on policy number target.

    Args:
        n: Number of voters
        p: Number of policies
        target: Index of the chosen policy
    """
    voters = [f"v{i}" for i in range(n)]
    policies = [f"p{j}" for j in range(p)]
    return DelegationModel(
        setting=Setting(
            title="unanimous policy",
            voters=voters,
            policies=policies,
            votes={v: {policies[target]: 1.0} for v in voters},
        )
    )


def self_contained_voter():
    """A single voter keeping all of its weight; no policy receives anything."""
    return DelegationModel(
        setting=Setting(
            title="self contained voter",
            voters=["solo"],
            policies=["P"],
            votes={"solo": {"solo": 1.0}},
        )
    )


def delegation_ring(n=4, p=2, leak=0.1):
    """
    Voters in a cycle, each passing 1 - leak of its weight to the next voter
    and leak to the first policy. All weight is eventually absorbed by it.
    """
    voters = [f"r{i}" for i in range(n)]
    policies = [f"p{j}" for j in range(p)]
    votes = {}
    for i, v in enumerate(voters):
        votes[v] = {voters[(i + 1) % n]: 1.0 - leak, policies[0]: leak}
    return DelegationModel(
        setting=Setting(
            title=f"delegation ring n={n}",
            voters=voters,
            policies=policies,
            votes=votes,
        )
    )
