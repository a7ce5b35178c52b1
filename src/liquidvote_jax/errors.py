"""Errors and warnings raised while building or resolving a delegation matrix."""


class LiquidVoteError(Exception):
    """Base error for malformed vote settings or unusable results."""


class MissingVoterRecord(LiquidVoteError, KeyError):
    """A voter is listed but has no entry in the vote table."""

    def __init__(self, voter):
        self.voter = voter
        super().__init__(f"no vote record for voter {voter!r}")

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class UnresolvedTarget(LiquidVoteError, ValueError):
    """A vote entry names neither a known voter nor a known policy."""

    def __init__(self, voter, target):
        self.voter = voter
        self.target = target
        super().__init__(
            f"voter {voter!r} delegates to unknown target {target!r}"
        )


class DegenerateInfluence(LiquidVoteError, ArithmeticError):
    """Influence scores are not finite (zero self-weight or overflow)."""

    def __init__(self, voters):
        self.voters = list(voters)
        super().__init__(
            f"non-finite influence for voter index(es) {self.voters}"
        )


class UnresolvedTargetWarning(UserWarning):
    pass


class DegenerateInfluenceWarning(RuntimeWarning):
    pass
