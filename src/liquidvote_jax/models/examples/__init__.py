"""Example delegation models."""

from .delegation import (
    two_voter_chain,
    unanimous_policy,
    self_contained_voter,
    delegation_ring
)

__all__ = ['two_voter_chain', 'unanimous_policy', 'self_contained_voter', 'delegation_ring']
