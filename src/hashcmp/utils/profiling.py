"""Profiling support for hashcmp using cProfile.

When the HASHCMP_PROFILE environment variable is set to a directory path, the main entry
point is profiled and the statistics are saved to that directory under a filename containing
a timestamp and the process PID.
"""
import cProfile
import functools
import os
import time
from pathlib import Path
from typing import Callable, TypeVar, ParamSpec

P = ParamSpec('P')
T = TypeVar('T')

PROFILE_ENVIRONMENT_VARIABLE = 'HASHCMP_PROFILE'


def get_profile_dir() -> Path | None:
    """Get the profile directory from the environment, None when profiling is disabled."""
    profile_path = os.environ.get(PROFILE_ENVIRONMENT_VARIABLE)
    if profile_path:
        return Path(profile_path)
    return None


def generate_profile_filename(prefix: str = "profile") -> str:
    """Generate a profile filename like "main_1730332456789_54321.prof"."""
    timestamp_ms = int(time.time() * 1000)
    return f"{prefix}_{timestamp_ms}_{os.getpid()}.prof"


def profile_main(func: Callable[P, T]) -> Callable[P, T]:
    """Decorator for the main entry point: profile the call if HASHCMP_PROFILE is set.

    The statistics are dumped even when the function exits through an exception,
    including SystemExit.
    """
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        profile_dir = get_profile_dir()

        if profile_dir is None:
            return func(*args, **kwargs)

        profile_dir.mkdir(parents=True, exist_ok=True)
        profile_file = profile_dir / generate_profile_filename("main")

        profiler = cProfile.Profile()
        try:
            profiler.enable()
            return func(*args, **kwargs)
        finally:
            profiler.disable()
            profiler.dump_stats(str(profile_file))

    return wrapper
