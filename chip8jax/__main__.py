import sys

from chip8jax.cli import main

sys.exit(main())
