"""CHIP-8 stack operations.

Two boundary policies are supported. The default mirrors the reference
machine: a push onto a full stack wraps the pointer to slot 0, and a pop from
an empty stack returns slot 0 without moving below zero. With
``strict=True`` both conditions raise instead.
"""

from chipvm.constants import STACK_SIZE, WORD_MASK
from chipvm.errors import StackOverflow, StackUnderflow
from chipvm.logging import get_logger
from chipvm.state import StackState

logger = get_logger(__name__)


def push(stack: StackState, address: int, strict: bool = False) -> StackState:
    """Push address onto stack."""
    address = int(address) & WORD_MASK
    pointer = int(stack.pointer)
    if pointer >= STACK_SIZE:
        if strict:
            raise StackOverflow(address)
        logger.warning(f"Stack overflow pushing 0x{address:03X}, wrapping to slot 0")
        pointer = 0
    new_data = stack.data.at[pointer].set(address)
    return stack.replace(data=new_data, pointer=pointer + 1)


def pop(stack: StackState, strict: bool = False) -> tuple[StackState, int]:
    """Pop address from stack."""
    pointer = int(stack.pointer)
    if pointer == 0:
        if strict:
            raise StackUnderflow()
        logger.warning("Stack underflow on return, reading slot 0")
        pointer = 1
    new_pointer = pointer - 1
    popped_address = int(stack.data[new_pointer])
    return stack.replace(pointer=new_pointer), popped_address

