"""pygame window, keyboard and tone for interactive runs."""

from typing import Optional

import numpy as np
import pygame

from chip8jax.config import EmulatorConfig
from chip8jax.constants import NUM_KEYS
from chip8jax.driver import InputSample
from chip8jax.logging import ConsoleLogger
from chip8jax.rendering import framebuffer_to_rgb

# Classic layout:  1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100


def square_wave(tone_hz: int, sample_rate: int = SAMPLE_RATE, amplitude: int = 32767) -> np.ndarray:
    """One second of a square wave as int16 samples."""
    t = np.arange(sample_rate)
    high = (t * tone_hz * 2 // sample_rate) % 2 == 0
    return np.where(high, amplitude, -amplitude).astype(np.int16)


class PygameFrontend:
    """Window, keypad and tone. ESC or closing the window quits, SPACE pauses."""

    def __init__(self, config: EmulatorConfig, logger: Optional[ConsoleLogger] = None):
        self.config = config
        self.logger = logger or ConsoleLogger()
        self.keypad = [False] * NUM_KEYS
        self.on_color, self.off_color = config.colors

        pygame.mixer.pre_init(SAMPLE_RATE, -16, 1, 512)
        pygame.init()
        self.screen = pygame.display.set_mode(
            (config.width * config.scale_factor, config.height * config.scale_factor)
        )
        pygame.display.set_caption("CHIP8 Emulator")

        self.tone = self._init_audio()
        self.tone_playing = False

    def _init_audio(self) -> Optional[pygame.mixer.Sound]:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init()
            except pygame.error as e:
                self.logger.warning(f"Audio disabled: {e}")
                return None

        sample_rate, _, channels = pygame.mixer.get_init()
        wave = square_wave(self.config.tone_hz, sample_rate=sample_rate)
        if channels > 1:
            wave = np.ascontiguousarray(np.repeat(wave[:, None], channels, axis=1))
        tone = pygame.sndarray.make_sound(wave)
        tone.set_volume(self.config.volume)
        return tone

    def poll(self) -> InputSample:
        """Drain pending events into an InputSample."""
        quit_requested = False
        toggle_pause = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    quit_requested = True
                elif event.key == pygame.K_SPACE:
                    toggle_pause = not toggle_pause
                elif event.key in KEY_MAP:
                    self.keypad[KEY_MAP[event.key]] = True
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    self.keypad[KEY_MAP[event.key]] = False
        return InputSample(tuple(self.keypad), quit=quit_requested, toggle_pause=toggle_pause)

    def draw(self, framebuffer: np.ndarray):
        rgb = framebuffer_to_rgb(
            framebuffer,
            self.config.width,
            self.config.height,
            self.config.scale_factor,
            self.on_color,
            self.off_color,
            self.config.pixel_outline,
        )
        pygame.surfarray.blit_array(self.screen, rgb.swapaxes(0, 1))
        pygame.display.flip()

    def set_tone(self, active: bool):
        if self.tone is None or active == self.tone_playing:
            return
        if active:
            self.tone.play(loops=-1)
        else:
            self.tone.stop()
        self.tone_playing = active

    def close(self):
        if self.tone is not None:
            self.tone.stop()
        pygame.quit()
