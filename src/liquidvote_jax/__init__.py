__version__ = "0.1.0"

# Core configuration and types
from .core import (
    TOLERANCE,
    ITERATIONS,
    enable_float64,
    device_type,
    use_accelerator
)

from .errors import (
    LiquidVoteError,
    MissingVoterRecord,
    UnresolvedTarget,
    DegenerateInfluence,
    UnresolvedTargetWarning,
    DegenerateInfluenceWarning
)

# Vote settings
from .settings import Policy, Setting, load_setting, save_setting

# Delegation dynamics
from .dynamics import DelegationChain
from .models import DelegationModel, build_delegation_matrix, format_results
from .models.examples import (
    two_voter_chain,
    unanimous_policy,
    self_contained_voter,
    delegation_ring
)
