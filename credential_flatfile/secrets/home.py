# credential_flatfile/secrets/home.py

import os
import sys
from typing import Callable, Mapping, Optional

from .errors import StoreIOError


def _windows_home(environ: Mapping[str, str]) -> str:
    home = environ.get("HOMEDRIVE", "") + environ.get("HOMEPATH", "")
    if not home:
        home = environ.get("USERPROFILE", "")
    return home


def _posix_home(environ: Mapping[str, str]) -> str:
    return environ.get("HOME", "")


def select_home_strategy(platform: str = sys.platform) -> Callable[[Mapping[str, str]], str]:
    """Pick the home-directory lookup for *platform* (a ``sys.platform`` value)."""
    if platform == "win32":
        return _windows_home
    return _posix_home


_resolve_home = select_home_strategy()


def user_home_dir(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Resolves the current user's home directory from the environment.

    Args:
        environ: Environment mapping to read; defaults to ``os.environ``.

    Returns:
        str: The home directory path.

    Raises:
        StoreIOError: The environment does not name a home directory.
    """
    home = _resolve_home(os.environ if environ is None else environ)
    if not home:
        raise StoreIOError("unable to resolve home directory")
    return home
