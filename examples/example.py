"""Run a tiny built-in program headlessly and print the screen."""

import jax

from chipvm import create_state, load_program, run_frames, display_to_text

# Draw the glyphs for 0-F in a row, then spin.
PROGRAM = bytes([
    0x60, 0x00,  # 200: V0 = 0        digit
    0x61, 0x00,  # 202: V1 = 0        x
    0x62, 0x02,  # 204: V2 = 2        y
    0xF0, 0x29,  # 206: I = glyph(V0)
    0xD1, 0x25,  # 208: draw at (V1, V2), 5 rows
    0x70, 0x01,  # 20A: V0 += 1
    0x71, 0x04,  # 20C: V1 += 4
    0x30, 0x10,  # 20E: skip if V0 == 16
    0x12, 0x06,  # 210: jump 206
    0x12, 0x12,  # 212: jump 212
])

if __name__ == "__main__":
    state = load_program(create_state(jax.random.PRNGKey(0)), PROGRAM)
    state = run_frames(state, frames=20, instructions_per_frame=10, progress=True)
    print(display_to_text(state.display))
