"""Tests for control flow instructions."""

import pytest
from chipvm import execute, set_key, stack_depth, StackOverflow, UnimplementedOpcode
from conftest import with_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_keeps_stack(self, fresh_state):
        state = execute(fresh_state, 0x1ABC)
        assert state.pc == 0xABC
        assert stack_depth(state) == 0


class TestCall:
    """Test subroutine calls."""

    def test_call_pushes_pc(self, fresh_state):
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # As after a fetch
        state = execute(state, 0x2456)
        assert state.pc == 0x456
        assert stack_depth(state) == 1
        assert state.stack.data[0] == 0x202

    def test_seventeen_calls_wrap(self, fresh_state):
        state = fresh_state
        for i in range(16):
            state = execute(state, 0x2300 + 2 * i)
        assert stack_depth(state) == 16

        state = execute(state, 0x2500)
        assert stack_depth(state) == 1
        assert state.stack.data[0] == 0x31E

    def test_seventeen_calls_strict(self, strict_state):
        state = strict_state
        for i in range(16):
            state = execute(state, 0x2300)
        with pytest.raises(StackOverflow):
            execute(state, 0x2300)


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = with_registers(fresh_state, V5=0x42)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = with_registers(fresh_state, V5=0x41)
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = with_registers(fresh_state, V3=0x10)
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = with_registers(fresh_state, V3=0x20)
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = with_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = with_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = with_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = with_registers(fresh_state, V7=0xCC, V8=0xCC)
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    def test_skip_with_zero_values(self, fresh_state):
        """V0 == 0 on a fresh machine, so 3000 skips."""
        state = execute(fresh_state, 0x3000)
        assert state.pc == fresh_state.pc + 2

    def test_skip_boundary_values(self, fresh_state):
        state = with_registers(fresh_state, V0=0xFF)
        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == fresh_state.pc + 2

    @pytest.mark.parametrize("instruction", [0x5121, 0x512F, 0x9781, 0x978E])
    def test_register_compare_requires_zero_low_nibble(self, fresh_state, instruction):
        with pytest.raises(UnimplementedOpcode) as excinfo:
            execute(fresh_state, instruction)
        assert excinfo.value.opcode == instruction


class TestJumpWithOffset:
    """Test BNNN."""

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_ignores_other_registers(self, fresh_state):
        state = with_registers(fresh_state, V0=0x10, V2=0x30)
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_not_masked(self, fresh_state):
        state = with_registers(fresh_state, V0=0xFF)
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE


class TestSkipIfKey:
    """Test EX9E/EXA1."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = set_key(with_registers(fresh_state, V4=0xB), 0xB, True)
        state = execute(state, 0xE49E)
        assert state.pc == fresh_state.pc + 2

    def test_no_skip_if_key_released(self, fresh_state):
        state = with_registers(fresh_state, V4=0xB)
        state = execute(state, 0xE49E)
        assert state.pc == fresh_state.pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = with_registers(fresh_state, V4=0xB)
        state = execute(state, 0xE4A1)
        assert state.pc == fresh_state.pc + 2

    def test_no_skip_if_not_pressed_when_pressed(self, fresh_state):
        state = set_key(with_registers(fresh_state, V4=0xB), 0xB, True)
        state = execute(state, 0xE4A1)
        assert state.pc == fresh_state.pc

    def test_other_key_does_not_count(self, fresh_state):
        state = set_key(with_registers(fresh_state, V4=0xB), 0xC, True)
        state = execute(state, 0xE49E)
        assert state.pc == fresh_state.pc

    @pytest.mark.parametrize("instruction", [0xE400, 0xE49F, 0xE4A2, 0xEFFF])
    def test_unknown_key_instruction(self, fresh_state, instruction):
        with pytest.raises(UnimplementedOpcode):
            execute(fresh_state, instruction)
