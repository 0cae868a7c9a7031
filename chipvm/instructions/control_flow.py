"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.errors import UnimplementedOpcode
from chipvm.stack import push


def _set_pc(state: EmulatorState, address: int) -> EmulatorState:
    return state.replace(pc=jnp.asarray(address, dtype=jnp.uint16))


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return _set_pc(state, instruction.nnn)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, int(state.pc), strict=state.strict_stack))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn, requires_zero_n: bool = False):
    """Factory for skip instructions.

    ``requires_zero_n`` rejects register-compare forms whose low nibble is not 0.
    """
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if requires_zero_n and instruction.n != 0:
            raise UnimplementedOpcode(instruction.raw)
        if condition_fn(state, instruction):
            return _set_pc(state, int(state.pc) + 2)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y]),
    requires_zero_n=True,
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y]),
    requires_zero_n=True,
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0.

    The target is not masked; a target past the end of memory fails on the
    next fetch.
    """
    return _set_pc(state, instruction.nnn + int(state.V[0]))


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    if instruction.nn not in (0x9E, 0xA1):
        raise UnimplementedOpcode(instruction.raw)

    key_index = int(state.V[instruction.x]) & 0xF
    key_pressed = bool(state.keypad[key_index])
    is_not_instruction = instruction.nn == 0xA1

    if key_pressed ^ is_not_instruction:
        return _set_pc(state, int(state.pc) + 2)
    return state
