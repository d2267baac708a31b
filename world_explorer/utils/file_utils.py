"""Essential file utilities."""
import os
import sys

APP_NAME = "World-Explorer"


def is_frozen() -> bool:
    """True when running from a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False))


def resource_path(relative_path: str) -> str:
    """Get absolute path to resource, works for dev and for PyInstaller."""
    try:
        base_path = sys._MEIPASS  # type: ignore[attr-defined]  # used when packaged
    except AttributeError:
        base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_path, relative_path)


def _checkout_root() -> str:
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def user_data_dir() -> str:
    """Per-user application data directory (APPDATA on Windows, XDG elsewhere)."""
    appdata = os.environ.get("APPDATA")
    if appdata:
        return os.path.join(appdata, APP_NAME)
    base = os.environ.get("XDG_DATA_HOME") or os.path.join(os.path.expanduser("~"), ".local", "share")
    return os.path.join(base, APP_NAME)


def get_data_dir() -> str:
    """Directory for per-user data, based on execution context.

    A source checkout keeps data in its local ``config/`` folder; a bundled
    or pip-installed copy never writes next to its own code.
    """
    if is_frozen():
        return user_data_dir()
    root = _checkout_root()
    if os.path.isfile(os.path.join(root, "pyproject.toml")):
        return os.path.join(root, "config")
    return user_data_dir()
