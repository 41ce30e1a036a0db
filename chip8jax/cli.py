"""Command line entry point."""

import argparse
import sys
from typing import List, Optional

import jax
from omegaconf.errors import OmegaConfBaseException
from tqdm import tqdm

from chip8jax.config import EmulatorConfig, config_to_dict, load_config
from chip8jax.driver import FrameDriver, InputSample
from chip8jax.emulator import load_rom
from chip8jax.errors import ROMLoadError
from chip8jax.logging import ConsoleLogger
from chip8jax.rendering import record_video, save_snapshot
from chip8jax.state import create_state, framebuffer
from chip8jax.trace import LoggerTraceSink


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8jax",
        description="CHIP-8 emulator",
    )
    parser.add_argument("rom", help="Path to the CHIP-8 ROM")
    parser.add_argument("overrides", nargs="*", help="Configuration overrides as key=value")
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--scale", type=int, default=None, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--clock-rate", type=int, default=None, help="Instructions per second")
    parser.add_argument("--color-scheme", default=None, help="Named color scheme")
    parser.add_argument("--no-outline", action="store_true", help="Do not outline lit pixels")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random instruction")
    parser.add_argument("--trace", action="store_true", help="Log every executed instruction")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument(
        "--frames",
        type=int,
        default=600,
        help="Frames to run in headless mode (default: 600)",
    )
    parser.add_argument("--snapshot", default=None, help="Save the last frame as an image (headless)")
    parser.add_argument("--record", default=None, help="Save the run as an MP4 video (headless)")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse the command line. Overrides may appear before or after the options."""
    return build_parser().parse_intermixed_args(argv)


def overrides_from_args(args: argparse.Namespace) -> List[str]:
    """Turn command line options into dot-list overrides, applied after ``args.overrides``."""
    overrides = list(args.overrides)
    if args.scale is not None:
        overrides.append(f"scale_factor={args.scale}")
    if args.clock_rate is not None:
        overrides.append(f"clock_rate={args.clock_rate}")
    if args.color_scheme is not None:
        overrides.append(f"color_scheme={args.color_scheme}")
    if args.no_outline:
        overrides.append("pixel_outline=false")
    if args.seed is not None:
        overrides.append(f"seed={args.seed}")
    if args.trace:
        overrides.append("trace=true")
    return overrides


def run_headless(driver: FrameDriver, config: EmulatorConfig, args: argparse.Namespace) -> None:
    frames = []
    if args.record:
        driver.renderer = frames.append

    for _ in tqdm(range(args.frames), desc="Emulating", unit="frame"):
        driver.run_frame()

    on_color, off_color = config.colors
    render_kwargs = dict(
        width=config.width,
        height=config.height,
        scale=config.scale_factor,
        on_color=on_color,
        off_color=off_color,
        pixel_outline=config.pixel_outline,
    )
    if args.snapshot:
        save_snapshot(framebuffer(driver.state), args.snapshot, **render_kwargs)
        driver.logger.info(f"Snapshot saved: {args.snapshot}")
    if args.record:
        written = record_video(frames, args.record, fps=config.timer_hz, **render_kwargs)
        driver.logger.info(f"Video saved: {args.record} ({written} frames, {config.timer_hz} FPS)")

    state = driver.state
    driver.logger.info(
        f"Finished {driver.frame_count} frames: PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
        f"V=[{' '.join(f'{int(v):02X}' for v in state.V)}]"
    )


def run_interactive(driver: FrameDriver, config: EmulatorConfig) -> None:
    from chip8jax.frontend import PygameFrontend

    frontend = PygameFrontend(config, driver.logger)
    driver.input_source = frontend.poll
    driver.renderer = frontend.draw
    driver.audio = frontend.set_tone
    driver.logger.info("Controls: ESC=Quit, SPACE=Pause, keys 1234/QWER/ASDF/ZXCV")
    try:
        driver.run()
    finally:
        frontend.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config, overrides_from_args(args))
    except (ValueError, OmegaConfBaseException) as e:
        ConsoleLogger().error(f"Invalid configuration: {e}")
        return 2

    logger = ConsoleLogger(log_level="DEBUG" if config.trace else config.log_level)
    logger.log_config(config_to_dict(config))

    state = create_state(jax.random.PRNGKey(config.seed), config.width, config.height)
    try:
        state = load_rom(state, args.rom)
    except ROMLoadError as e:
        logger.error(str(e))
        return 1
    logger.info(f"Loaded: {args.rom}")

    driver = FrameDriver(
        state,
        input_source=InputSample,
        config=config,
        trace_sink=LoggerTraceSink(logger) if config.trace else None,
        logger=logger,
    )
    if args.headless:
        driver.sleep = lambda _: None
        run_headless(driver, config, args)
    else:
        run_interactive(driver, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
