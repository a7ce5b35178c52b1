import os
import jax
import jax.numpy as jnp
import chex
from warnings import warn

# Fixed number of delegation steps accumulated by the power-series resolver
ITERATIONS = 1000

# Default tolerance for comparing resolved weights (float64)
TOLERANCE = 1e-10

def enable_float64():
    """Enable 64-bit floating point precision in JAX.

    JAX uses 32-bit floats unless told otherwise. Delegation weights are
    resolved in double precision, so this is called when the package is
    imported. Set LV_FLOAT32=1 in the environment to skip it.

    This is a global configuration that affects all subsequent JAX operations.
    See: https://docs.jax.dev/en/latest/default_dtypes.html
    """
    jax.config.update("jax_enable_x64", True)

if os.environ.get('LV_FLOAT32', '0') != '1':
    enable_float64()

# Device detection with LV_FORCE_CPU override
use_accelerator = False
device_type = 'cpu'

# We perform device detection at module load time
if os.environ.get('LV_FORCE_CPU', '0') != '1':
    # Check for available accelerators (TPU > GPU > CPU)
    try:
        devices = jax.devices()
        if devices:
            default_device = devices[0]
            device_type = default_device.platform
            if device_type in ['gpu', 'tpu']:
                use_accelerator = True
                warn(f"JAX using {device_type.upper()}: {default_device}")
    except RuntimeError:
         # Fallback if JAX cannot find backend or other init error
         warn("JAX initialization failed to detect devices, falling back to CPU")
else:
    jax.config.update("jax_platforms", "cpu")
    warn("LV_FORCE_CPU=1: JAX forced to CPU-only mode")


def assert_valid_delegation_matrix(M, number_of_voters):
    """asserts that M is square and that every policy column forwards weight
    only to its own policy row (zero on voter rows, identity on policy rows)"""
    M = jnp.asarray(M)
    chex.assert_rank(M, 2)
    size = M.shape[0]
    chex.assert_shape(M, (size, size))  # Ensure square matrix
    if not 0 <= number_of_voters <= size:
        raise ValueError(
            f"number_of_voters={number_of_voters} outside matrix size {size}"
        )
    number_of_policies = size - number_of_voters
    policy_columns = M[:, number_of_voters:]
    chex.assert_trees_all_equal(
        policy_columns[:number_of_voters],
        jnp.zeros((number_of_voters, number_of_policies), dtype=M.dtype)
    )
    chex.assert_trees_all_equal(
        policy_columns[number_of_voters:],
        jnp.eye(number_of_policies, dtype=M.dtype)
    )
