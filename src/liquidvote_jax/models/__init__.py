"""Delegation models module."""

from .base import DelegationModel, format_results
from .delegation_matrix import build_delegation_matrix

__all__ = ['DelegationModel', 'format_results', 'build_delegation_matrix']
