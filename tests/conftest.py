"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax
import jax.numpy as jnp
from chipvm import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state(jax.random.PRNGKey(0))


@pytest.fixture
def strict_state():
    """Provide a fresh state that raises on stack overflow and underflow."""
    return create_state(jax.random.PRNGKey(0), strict_stack=True)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def with_registers(state, **registers):
    """Helper to set registers by name, e.g. ``with_registers(state, V1=0x10)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def program_state(program, rng_seed=0):
    """Helper returning a fresh state with ``program`` loaded at 0x200."""
    return load_program(create_state(jax.random.PRNGKey(rng_seed)), bytes(program))
