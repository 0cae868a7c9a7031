"""Main CHIP-8 interpreter: fetch, decode, execute.

Dispatch happens eagerly in Python on the decoded leading nibble, so invalid
instruction words surface as :class:`~chipvm.errors.UnimplementedOpcode`
rather than being traced away.
"""

from tqdm import tqdm

from chipvm.state import EmulatorState, load_program, tick_timers
from chipvm.decode import decode
from chipvm.errors import OutOfBounds
from chipvm.constants import INSTRUCTIONS_PER_FRAME, MEMORY_SIZE
from chipvm.logging import get_logger
from chipvm.instructions.system import execute_system_instruction
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import execute_misc_instruction

logger = get_logger(__name__)

# Indexed by the leading nibble of the instruction word
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)
    return INSTRUCTION_FAMILIES[decoded_instruction.opcode](state, decoded_instruction)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next big-endian instruction word and advance the PC by 2."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise OutOfBounds(pc)
    instruction = (int(state.memory[pc]) << 8) | int(state.memory[pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def cycle(state: EmulatorState) -> EmulatorState:
    """Run one fetch/execute step."""
    state, instruction = fetch(state)
    return execute(state, instruction)


def run_frame(
    state: EmulatorState, instructions_per_frame: int = INSTRUCTIONS_PER_FRAME
) -> tuple[EmulatorState, bool]:
    """Run one host frame: N cycles followed by a single timer tick.

    Returns the new state and whether the sound timer stopped this frame.
    """
    for _ in range(instructions_per_frame):
        state = cycle(state)
    return tick_timers(state)


def run_frames(
    state: EmulatorState,
    frames: int,
    instructions_per_frame: int = INSTRUCTIONS_PER_FRAME,
    progress: bool = False,
) -> EmulatorState:
    """Run several frames headlessly, optionally with a progress bar."""
    frame_range = range(frames)
    if progress:
        frame_range = tqdm(frame_range, desc="Emulating", unit="frame")

    for _ in frame_range:
        state, _ = run_frame(state, instructions_per_frame)

    logger.debug(f"Ran {frames} frames, PC=0x{int(state.pc):03X}")
    return state


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    logger.info(f"Loaded ROM {filename} ({len(rom_data)} bytes)")
    return load_program(state, rom_data)
