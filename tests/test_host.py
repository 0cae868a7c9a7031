"""Tests for the pygame host's sound and reset handling."""

import pytest
import jax.numpy as jnp
from omegaconf import OmegaConf
from chipvm import tick_timers

from main import Beeper, reset_machine


class RecordingTone:
    """Stands in for a pygame Sound and records calls."""

    def __init__(self):
        self.calls = []

    def play(self, loops=0):
        self.calls.append("play")

    def stop(self):
        self.calls.append("stop")


def make_config(rom):
    return OmegaConf.create({"rom": str(rom), "seed": 0, "strict_stack": False})


def with_sound(state, value):
    return state.replace(sound_timer=jnp.asarray(value, dtype=jnp.uint8))


class TestBeeper:
    """Test the tone following the sound timer."""

    def test_plays_until_timer_expires(self, fresh_state):
        tone = RecordingTone()
        beeper = Beeper(tone)

        state, stopped = tick_timers(with_sound(fresh_state, 2))
        beeper.update(state, stopped)
        assert tone.calls == ["play"]

        state, stopped = tick_timers(state)
        beeper.update(state, stopped)
        assert tone.calls == ["play", "stop"]
        assert not beeper.beeping

    def test_plays_once_while_running(self, fresh_state):
        tone = RecordingTone()
        beeper = Beeper(tone)
        state = with_sound(fresh_state, 10)
        for _ in range(3):
            state, stopped = tick_timers(state)
            beeper.update(state, stopped)
        assert tone.calls == ["play"]

    def test_reset_silences_tone(self, fresh_state, tmp_path):
        """A reset state has sound timer 0 and never ticks 1 -> 0, so reset must stop the tone."""
        rom = tmp_path / "game.ch8"
        rom.write_bytes(bytes([0x12, 0x00]))
        tone = RecordingTone()
        beeper = Beeper(tone)

        state, stopped = tick_timers(with_sound(fresh_state, 30))
        beeper.update(state, stopped)

        beeper.silence()
        state = reset_machine(make_config(rom), state)
        state, stopped = tick_timers(state)
        beeper.update(state, stopped)

        assert tone.calls == ["play", "stop"]
        assert not beeper.beeping

    def test_pause_silences_and_resume_restarts(self, fresh_state):
        tone = RecordingTone()
        beeper = Beeper(tone)
        state, stopped = tick_timers(with_sound(fresh_state, 30))
        beeper.update(state, stopped)

        beeper.silence()  # Paused, no timer ticks follow
        assert tone.calls == ["play", "stop"]

        state, stopped = tick_timers(state)  # Resumed
        beeper.update(state, stopped)
        assert tone.calls == ["play", "stop", "play"]

    def test_silence_when_idle(self):
        tone = RecordingTone()
        beeper = Beeper(tone)
        beeper.silence()
        assert tone.calls == []

    def test_no_audio_device(self, fresh_state):
        beeper = Beeper(None)
        state, stopped = tick_timers(with_sound(fresh_state, 5))
        beeper.update(state, stopped)
        beeper.silence()
        assert not beeper.beeping


class TestResetMachine:
    """Test reloading the ROM on reset."""

    def test_reset_reloads_rom(self, fresh_state, tmp_path):
        rom = tmp_path / "game.ch8"
        rom.write_bytes(bytes([0xA1, 0x23]))
        running = fresh_state.replace(pc=jnp.asarray(0x300, dtype=jnp.uint16))

        state = reset_machine(make_config(rom), running)

        assert state.pc == 0x200
        assert state.memory[0x200:0x202].tolist() == [0xA1, 0x23]

    def test_reset_keeps_state_when_rom_missing(self, fresh_state, tmp_path):
        running = fresh_state.replace(pc=jnp.asarray(0x300, dtype=jnp.uint16))

        state = reset_machine(make_config(tmp_path / "gone.ch8"), running)

        assert state is running

    def test_reset_keeps_state_when_rom_too_large(self, fresh_state, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(4000))
        running = fresh_state.replace(pc=jnp.asarray(0x300, dtype=jnp.uint16))

        state = reset_machine(make_config(rom), running)

        assert state is running
