"""
pygame front-end for the CHIP-8 virtual machine.

Usage: python main.py rom=path/to/game.ch8 [instructions_per_frame=10] [headless=true]
"""

import numpy as np
import pygame
import hydra
import jax
from hydra.utils import to_absolute_path
from omegaconf import DictConfig

from chipvm import (
    Chip8Error, EmulatorState, create_state, cycle, load_rom, run_frames, set_keys, tick_timers,
    chip8_display_to_rgb, create_color_scheme, display_to_text,
)
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chipvm.logging import get_logger, set_log_level

logger = get_logger("host")

SAMPLE_RATE = 44100

# COSMAC VIP keypad laid over the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def make_tone(frequency: int, sample_rate: int = SAMPLE_RATE) -> pygame.mixer.Sound:
    """One period-aligned second of square wave, played looped while the sound timer runs."""
    samples = np.arange(sample_rate)
    wave = np.where((samples * frequency // (sample_rate // 2)) % 2 == 0, 1, -1)
    return pygame.sndarray.make_sound((wave * 8000).astype(np.int16))


class Beeper:
    """Plays the tone while the sound timer runs.

    ``tone`` is anything with ``play(loops=...)`` and ``stop()``, or None when
    there is no audio device.
    """

    def __init__(self, tone=None):
        self.tone = tone
        self.beeping = False

    def update(self, state: EmulatorState, sound_stopped: bool):
        """Follow the sound timer after a timer tick."""
        if self.tone is None:
            return
        if sound_stopped and self.beeping:
            self.silence()
        elif int(state.sound_timer) > 0 and not self.beeping:
            self.tone.play(loops=-1)
            self.beeping = True

    def silence(self):
        """Stop the tone; used on reset and pause, where no 1->0 tick arrives."""
        if self.tone is not None and self.beeping:
            self.tone.stop()
        self.beeping = False


def new_machine(cfg: DictConfig) -> EmulatorState:
    rng = None if cfg.seed is None else jax.random.PRNGKey(cfg.seed)
    state = create_state(rng, strict_stack=cfg.strict_stack)
    return load_rom(state, to_absolute_path(cfg.rom))


def reset_machine(cfg: DictConfig, state: EmulatorState) -> EmulatorState:
    """Reload the ROM into a fresh machine, keeping ``state`` if that fails."""
    try:
        state = new_machine(cfg)
    except (OSError, Chip8Error) as e:
        logger.error(f"Could not reload {cfg.rom}: {e}")
        return state
    logger.info("Reset")
    return state


def run_headless(cfg: DictConfig):
    """Run a fixed number of frames without a window and print the final screen."""
    state = new_machine(cfg)
    try:
        state = run_frames(state, cfg.frames, cfg.instructions_per_frame, progress=True)
    except Chip8Error as e:
        logger.error(f"Emulation stopped: {e}")
        return
    print(display_to_text(state.display))


def run_emulator(cfg: DictConfig):
    """Main emulator loop: N cycles, one timer tick and one render per frame."""
    pygame.mixer.pre_init(SAMPLE_RATE, -16, 1)
    pygame.init()
    scale = cfg.scale
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()
    on_color, off_color = create_color_scheme(cfg.color_scheme)
    # No audio device leaves the mixer uninitialised; run silently then
    beeper = Beeper(make_tone(cfg.tone_hz) if pygame.mixer.get_init() else None)

    try:
        state = new_machine(cfg)
    except (OSError, Chip8Error) as e:
        logger.error(f"Could not load {cfg.rom}: {e}")
        pygame.quit()
        return

    pressed = set()
    running = True
    paused = False

    logger.info("Controls: ESC=Quit, P=Pause, R=Reset")

    while running:
        clock.tick(cfg.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                    if paused:
                        beeper.silence()
                elif event.key == pygame.K_r:
                    beeper.silence()
                    state = reset_machine(cfg, state)
                    pressed.clear()
                    paused = False
                elif event.key in KEY_MAP:
                    pressed.add(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    pressed.discard(KEY_MAP[event.key])

        if not paused:
            state = set_keys(state, pressed)
            try:
                for _ in range(cfg.instructions_per_frame):
                    state = cycle(state)
            except Chip8Error as e:
                logger.error(f"Emulation paused at PC=0x{int(state.pc):03X}: {e}")
                paused = True
                beeper.silence()
            else:
                state, sound_stopped = tick_timers(state)
                beeper.update(state, sound_stopped)

        frame = chip8_display_to_rgb(state.display, scale, on_color, off_color)
        # surfarray expects (width, height, 3)
        pygame.surfarray.blit_array(screen, frame.swapaxes(0, 1))
        pygame.display.flip()

    pygame.quit()


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    set_log_level(cfg.log_level)
    if cfg.headless:
        run_headless(cfg)
    else:
        run_emulator(cfg)


if __name__ == "__main__":
    main()
