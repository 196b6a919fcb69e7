"""XDG-compliant directory paths for fetchplay."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Get XDG-compliant configuration directory.

    Priority:
    1. $XDG_CONFIG_HOME/fetchplay/
    2. ~/.config/fetchplay/

    Does not create the directory; the config file is optional.

    Returns:
        Path to configuration directory
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "fetchplay"
    return Path.home() / ".config" / "fetchplay"


def get_default_media_dir() -> Path:
    """Get the default directory holding downloaded media files.

    Priority:
    1. $XDG_CACHE_HOME/fetchplay/media/
    2. ~/.cache/fetchplay/media/
    3. /tmp/fetchplay-{uid}/media/ (no usable home directory)

    Returns:
        Path to media directory (not created here)
    """
    cache_home = os.environ.get("XDG_CACHE_HOME")
    if cache_home:
        return Path(cache_home) / "fetchplay" / "media"

    home = Path.home()
    if home.exists():
        return home / ".cache" / "fetchplay" / "media"

    return Path(f"/tmp/fetchplay-{os.getuid()}") / "media"


def ensure_media_dir(path: Path) -> Path:
    """Create the media directory if it doesn't exist.

    Args:
        path: Media directory to create

    Returns:
        The same path, guaranteed to exist

    Raises:
        OSError: If the directory cannot be created
    """
    path.mkdir(parents=True, exist_ok=True, mode=0o700)
    return path
