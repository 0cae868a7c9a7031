"""CHIP-8 virtual machine."""

from chipvm.state import (
    EmulatorState, StackState, create_state, load_program, tick_timers, set_key, set_keys, stack_depth,
)
from chipvm.emulator import execute, fetch, cycle, run_frame, run_frames, load_rom
from chipvm.decode import DecodedInstruction, decode
from chipvm.errors import (
    Chip8Error, CapacityError, UnimplementedOpcode, StackOverflow, StackUnderflow, OutOfBounds,
)
from chipvm.constants import *
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "load_program",
    "tick_timers",
    "set_key",
    "set_keys",
    "stack_depth",
    "fetch",
    "execute",
    "cycle",
    "run_frame",
    "run_frames",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "Chip8Error",
    "CapacityError",
    "UnimplementedOpcode",
    "StackOverflow",
    "StackUnderflow",
    "OutOfBounds",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_text",
]
