"""Frame driver: gives the engine real-time behavior.

Each frame samples the keypad, runs ``clock_rate // timer_hz`` instructions,
ticks the timers once, then hands the framebuffer to the renderer and the
sound flag to the audio collaborator. Between frames the driver sleeps for
whatever is left of the frame budget.
"""

import enum
import time
from functools import partial
from typing import Callable, NamedTuple, Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chip8jax.config import EmulatorConfig
from chip8jax.constants import NUM_KEYS, TIMER_HZ
from chip8jax.decode import decode
from chip8jax.emulator import execute, fetch, step
from chip8jax.logging import ConsoleLogger
from chip8jax.state import EmulatorState, framebuffer
from chip8jax.timers import sound_active, tick_timers
from chip8jax.trace import TraceSink


class RunStatus(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"
    QUIT = "quit"


class InputSample(NamedTuple):
    """What the input collaborator reports once per frame."""
    keypad: Sequence[bool] = (False,) * NUM_KEYS
    quit: bool = False
    toggle_pause: bool = False


def instructions_per_frame(clock_rate: int, timer_hz: int = TIMER_HZ) -> int:
    """Number of instructions executed per frame, at least one."""
    return max(1, clock_rate // timer_hz)


def run_instruction(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=2)
def run_frame(state: EmulatorState, keypad: jnp.ndarray, num_instructions: int) -> EmulatorState:
    """Run one frame: set the keypad, execute a batch of instructions, tick timers once."""
    state = state.replace(keypad=jnp.asarray(keypad, dtype=jnp.bool_))
    state, _ = jax.lax.scan(run_instruction, state, length=num_instructions)
    return tick_timers(state)


_execute_jit = jax.jit(execute)
_fetch_jit = jax.jit(fetch)
_tick_jit = jax.jit(tick_timers)


class FrameDriver:
    """Real-time loop around an EmulatorState.

    Collaborators:
        input_source: called once per frame, returns an InputSample
        renderer: receives the flat framebuffer (numpy booleans) after each frame
        audio: receives True while the sound timer is running
        trace_sink: when set, instructions run one at a time and are traced
        clock / sleep: time source and sleep function
    """

    def __init__(
        self,
        state: EmulatorState,
        input_source: Callable[[], InputSample],
        config: Optional[EmulatorConfig] = None,
        renderer: Optional[Callable[[np.ndarray], None]] = None,
        audio: Optional[Callable[[bool], None]] = None,
        trace_sink: Optional[TraceSink] = None,
        logger: Optional[ConsoleLogger] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.state = state
        self.input_source = input_source
        self.config = config or EmulatorConfig()
        self.renderer = renderer
        self.audio = audio
        self.trace_sink = trace_sink
        self.logger = logger or ConsoleLogger()
        self.clock = clock
        self.sleep = sleep
        self.status = RunStatus.RUNNING
        self.frame_count = 0
        self.instruction_count = 0

    @property
    def instructions_per_frame(self) -> int:
        return instructions_per_frame(self.config.clock_rate, self.config.timer_hz)

    @property
    def frame_budget(self) -> float:
        """Seconds available per frame."""
        return 1.0 / self.config.timer_hz

    def toggle_pause(self):
        if self.status == RunStatus.RUNNING:
            self.status = RunStatus.PAUSED
            self.logger.info("====== PAUSED ======")
        elif self.status == RunStatus.PAUSED:
            self.status = RunStatus.RUNNING
            self.logger.info("====== RESUME ======")

    def halt(self):
        self.status = RunStatus.QUIT

    def _run_traced(self, keypad: jnp.ndarray) -> EmulatorState:
        state = self.state.replace(keypad=keypad)
        for _ in range(self.instructions_per_frame):
            address = int(state.pc)
            state, opcode = _fetch_jit(state)
            self.trace_sink(address, decode(int(opcode)), state)
            state = _execute_jit(state, opcode)
            self.instruction_count += 1
            # Re-running an unsatisfied wait-for-key cannot change anything this frame
            if bool(state.awaiting_key):
                break
        return _tick_jit(state)

    def run_frame(self) -> EmulatorState:
        """Advance by one frame (input, instructions, timers, output)."""
        sample = self.input_source()
        if sample.quit:
            self.halt()
            return self.state
        if sample.toggle_pause:
            self.toggle_pause()

        if self.status == RunStatus.RUNNING:
            keypad = jnp.asarray(sample.keypad, dtype=jnp.bool_)
            if self.trace_sink is None:
                self.state = run_frame(self.state, keypad, self.instructions_per_frame)
                self.instruction_count += self.instructions_per_frame
            else:
                self.state = self._run_traced(keypad)

        if self.renderer is not None:
            self.renderer(np.asarray(framebuffer(self.state)))
        if self.audio is not None:
            self.audio(bool(sound_active(self.state)))
        self.frame_count += 1
        return self.state

    def run(self, max_frames: Optional[int] = None) -> EmulatorState:
        """Run frames until halted or ``max_frames`` frames have been rendered."""
        self.logger.info(
            f"Running at {self.config.clock_rate} Hz, "
            f"{self.instructions_per_frame} instructions per frame"
        )
        frames = 0
        while self.status != RunStatus.QUIT and (max_frames is None or frames < max_frames):
            start_time = self.clock()
            self.run_frame()
            frames += 1

            elapsed = self.clock() - start_time
            sleep_time = max(0.0, self.frame_budget - elapsed)
            if sleep_time > 0:
                self.sleep(sleep_time)

        self.logger.info(f"Stopped after {self.frame_count} frames, {self.instruction_count} instructions")
        return self.state
