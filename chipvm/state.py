"""CHIP-8 machine state structures."""

import secrets
from typing import Iterable, Optional

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipvm.constants import (
    FONT_DATA, FONT_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    PROGRAM_START, SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)
from chipvm.errors import CapacityError
from chipvm.logging import get_logger

logger = get_logger(__name__)


class StackState(PyTreeNode):
    """Fixed-capacity return address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 machine state.

    The display is indexed column-major as ``display[x, y]``. ``strict_stack``
    is a static field selecting how stack overflow and underflow are handled
    (see :mod:`chipvm.stack`).
    """
    rng: jax.Array = field(default_factory=lambda: jax.random.PRNGKey(0))
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    strict_stack: bool = field(pytree_node=False, default=False)


def create_state(rng: Optional[jax.Array] = None, strict_stack: bool = False) -> EmulatorState:
    """Create initial machine state with font data loaded.

    Without an explicit ``rng`` the random source is seeded from OS entropy.
    """
    if rng is None:
        rng = jax.random.PRNGKey(secrets.randbits(31))
    state = EmulatorState(rng=rng, strict_stack=strict_stack)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise CapacityError(len(data), MAX_PROGRAM_SIZE)

    logger.debug(f"Loading {len(data)} byte program at 0x{PROGRAM_START:03X}")
    if not data:
        return state

    program = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(program)
    return state.replace(memory=new_memory)


def tick_timers(state: EmulatorState) -> tuple[EmulatorState, bool]:
    """Decrement both timers once, flooring at zero.

    Returns the new state and whether the sound timer reached zero on this
    tick, which is the host's cue to stop the tone.
    """
    sound_stopped = bool(state.sound_timer == 1)
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, 0).astype(jnp.uint8),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, 0).astype(jnp.uint8),
    ), sound_stopped


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Latch the pressed state of one logical key."""
    if not 0 <= index < NUM_KEYS:
        raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {index}")
    return state.replace(keypad=state.keypad.at[index].set(pressed))


def set_keys(state: EmulatorState, pressed: Iterable[int]) -> EmulatorState:
    """Replace the whole keypad latch with the given set of pressed keys."""
    keypad = jnp.zeros(NUM_KEYS, dtype=jnp.bool_)
    for index in pressed:
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {index}")
        keypad = keypad.at[index].set(True)
    return state.replace(keypad=keypad)


def stack_depth(state: EmulatorState) -> int:
    """Number of return addresses currently on the stack."""
    return int(state.stack.pointer)
