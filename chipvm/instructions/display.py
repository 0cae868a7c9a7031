"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FLAG_REGISTER, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Bit shifts selecting sprite columns, most significant bit first
column_shifts = 7 - jnp.arange(SPRITE_WIDTH)


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Coordinates wrap around both screen edges. VF is set when any lit pixel
    is switched off.
    """
    if instruction.n == 0:
        return state.replace(V=state.V.at[FLAG_REGISTER].set(0))

    origin_x = int(state.V[instruction.x])
    origin_y = int(state.V[instruction.y])
    rows = jnp.arange(instruction.n)

    sprite_bytes = state.memory[(int(state.I) + rows) % MEMORY_SIZE]
    bits = ((sprite_bytes[:, None] >> column_shifts[None, :]) & 1).astype(jnp.bool_)

    xs = (origin_x + jnp.arange(SPRITE_WIDTH)) % SCREEN_WIDTH
    ys = (origin_y + rows) % SCREEN_HEIGHT
    sprite = jnp.zeros_like(state.display).at[xs[None, :], ys[:, None]].set(bits)

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(collision.astype(jnp.uint8))
    )
