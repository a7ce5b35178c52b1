"""Delegation dynamics module."""

from .delegation import (
    DelegationChain,
    resolve_power_series,
    resolve_fundamental_matrix,
    SOLVERS
)

__all__ = ['DelegationChain', 'resolve_power_series', 'resolve_fundamental_matrix', 'SOLVERS']
