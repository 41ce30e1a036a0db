"""Run many machines on the same ROM in lockstep, one per random seed."""

import argparse
import time

import jax
import jax.numpy as jnp
import numpy as np

from chip8jax import create_state, framebuffer, load_rom
from chip8jax.driver import instructions_per_frame, run_frame
from chip8jax.rendering import record_video


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("rom")
    parser.add_argument("--machines", type=int, default=1000)
    parser.add_argument("--frames", type=int, default=600)
    parser.add_argument("--clock-rate", type=int, default=700)
    parser.add_argument("--video", default=None, help="Save the first machine's run as MP4")
    args = parser.parse_args()

    num_instructions = instructions_per_frame(args.clock_rate)
    keypad = jnp.zeros(16, dtype=jnp.bool_)

    def make_state(rng):
        return load_rom(create_state(rng), args.rom)

    # load_rom reads the file, so build one state and swap in the per-machine keys
    template = make_state(jax.random.PRNGKey(0))
    rngs = jax.random.split(jax.random.PRNGKey(0), args.machines)
    states = jax.vmap(lambda rng: template.replace(rng=rng))(rngs)

    @jax.jit
    def rollout(states):
        def frame(states, _):
            states = jax.vmap(lambda s: run_frame(s, keypad, num_instructions))(states)
            return states, framebuffer(jax.tree_util.tree_map(lambda x: x[0], states))

        return jax.lax.scan(frame, states, length=args.frames)

    # Measure compilation time
    start_compile = time.perf_counter()
    compiled = rollout.lower(states).compile()
    end_compile = time.perf_counter()
    print("Compilation time (s):", end_compile - start_compile)

    # Measure execution time
    start_exec = time.perf_counter()
    final_states, frames = jax.block_until_ready(compiled(states))
    end_exec = time.perf_counter()
    print("Execution time (s):", end_exec - start_exec)
    print("Instructions per second:", args.machines * args.frames * num_instructions / (end_exec - start_exec))

    lit = np.asarray(final_states.display.reshape(args.machines, -1).sum(axis=1))
    print("Lit pixels on the final frame: min", lit.min(), "max", lit.max())

    if args.video:
        written = record_video(np.asarray(frames), args.video, fps=60)
        print(f"Video saved: {args.video} ({written} frames)")
