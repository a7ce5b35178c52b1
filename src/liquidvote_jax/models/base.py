import jax.numpy as jnp

# Import from dynamics and sibling modules
from ..dynamics import DelegationChain
from ..settings import Setting
from .delegation_matrix import build_delegation_matrix


def format_results(voters, policies, vote_totals, influence):
    """zips the ordered policy and voter names with the resolved sequences
    into name -> float mappings"""
    policy_names = [getattr(p, "name", p) for p in policies]
    return {
        'votes': {name: float(v) for name, v in zip(policy_names, vote_totals)},
        'influence': {name: float(v) for name, v in zip(voters, influence)},
    }


class DelegationModel:
    def __init__(self, *, setting, on_unresolved="warn"):
        """initializes a DelegationModel from a snapshot of setting (a Setting
        or its dict form) and the policy for vote entries naming unknown targets
        ("warn", "raise" or "ignore")"""
        if isinstance(setting, dict):
            setting = Setting.from_dict(setting)
        self.setting = setting.snapshot()
        self.voters = self.setting.voter_names
        self.policies = list(self.setting.policies)
        self.number_of_voters = len(self.voters)
        self.number_of_policies = len(self.policies)
        self.on_unresolved = on_unresolved
        self.analyzed = False

    @classmethod
    def from_file(cls, path, **kwargs):
        from ..settings import load_setting
        return cls(setting=load_setting(path), **kwargs)

    def analyze(self, *, solver="power_series", **kwargs):
        """
        Resolves delegation for the setting.

        Args:
            solver:
                - "power_series" (Default)
                - "fundamental_matrix"
            **kwargs: Passed to DelegationChain.resolve (iterations, vote_columns, strict).
        """
        self.DelegationChain = DelegationChain(
            M=self._get_delegation_matrix(),
            number_of_voters=self.number_of_voters
        )
        self.vote_totals, self.influence = self.DelegationChain.resolve(
            solver=solver,
            **kwargs
        )
        self.analyzed = True
        return self

    def _get_delegation_matrix(self):
        return build_delegation_matrix(
            self.voters,
            self.policies,
            self.setting.votes,
            on_unresolved=self.on_unresolved
        )

    def summarize(self):
        """returns the title with vote totals per policy name and influence per voter name"""
        if not self.analyzed:
            raise RuntimeError("call analyze() before summarize()")
        summary = {'title': self.setting.title}
        summary.update(format_results(
            self.voters, self.policies, self.vote_totals, self.influence
        ))
        return summary

    def what_delegates_to(self, *, voter):
        """returns names of the other voters and policies that voter passes nonzero weight to"""
        assert self.analyzed
        col = self.voters.index(voter)
        weights = self.DelegationChain.M[:, col]
        weights = weights.at[col].set(0)
        return [self._name(i) for i in jnp.flatnonzero(weights > 0)]

    def who_delegates_to(self, *, target):
        """returns names of the other voters passing nonzero weight directly to target"""
        assert self.analyzed
        names = self.voters + [p.name for p in self.policies]
        row = names.index(target)
        weights = self.DelegationChain.M[row, :self.number_of_voters]
        if row < self.number_of_voters:
            weights = weights.at[row].set(0)
        return [self.voters[int(i)] for i in jnp.flatnonzero(weights > 0)]

    def _name(self, index):
        index = int(index)
        if index < self.number_of_voters:
            return self.voters[index]
        return self.policies[index - self.number_of_voters].name
