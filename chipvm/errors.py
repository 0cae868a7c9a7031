"""Errors raised by the CHIP-8 machine and interpreter."""


class Chip8Error(Exception):
    """Base class for fatal emulator conditions."""


class CapacityError(Chip8Error):
    """Program does not fit in memory above the reserved area."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program of {size} bytes exceeds the {capacity} bytes available")


class UnimplementedOpcode(Chip8Error):
    """Instruction word matches no CHIP-8 instruction form."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"Unimplemented opcode: 0x{opcode:04X}")


class StackOverflow(Chip8Error):
    """CALL with a full stack under the strict stack policy."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Stack overflow pushing 0x{address:03X}")


class StackUnderflow(Chip8Error):
    """RET with an empty stack under the strict stack policy."""

    def __init__(self):
        super().__init__("Stack underflow: return with empty stack")


class OutOfBounds(Chip8Error):
    """Instruction fetch past the end of memory."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Instruction fetch out of bounds at 0x{address:04X}")
