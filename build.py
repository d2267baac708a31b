#!/usr/bin/env python3
"""Build script for creating the World Explorer executable."""

import logging
import os
import shutil
import stat
import subprocess
import sys
import time

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

APP_NAME = "World-Explorer"
# (source, destination inside the bundle)
DATA_FILES = [
    (os.path.join("world_explorer", "ui", "style_pyside.qss"), "ui"),
]


def _on_rm_error(func, path, exc_info):
    """Clear the read-only bit and retry once."""
    try:
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
        func(path)
    except OSError:
        logger.debug("Retry failed removing: %s", path, exc_info=True)


def _rmtree_robust(path: str, attempts: int = 5, delay: float = 0.4) -> None:
    """Remove a directory tree, retrying while another process holds a lock on it."""
    for attempt in range(1, attempts + 1):
        try:
            shutil.rmtree(path, onerror=_on_rm_error)
            return
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("Could not remove %s (attempt %d/%d): %s", path, attempt, attempts, e)
        time.sleep(delay)
    shutil.rmtree(path, onerror=_on_rm_error)


def remove_path(path: str) -> None:
    if os.path.isdir(path):
        logger.info("Removing directory: %s", path)
        try:
            _rmtree_robust(path)
        except OSError:
            logger.exception("Failed to remove directory: %s", path)
    elif os.path.isfile(path):
        logger.info("Removing file: %s", path)
        try:
            os.remove(path)
        except OSError:
            logger.exception("Failed to remove file: %s", path)


def pyinstaller_args() -> list:
    args = [
        sys.executable, "-m", "PyInstaller",
        "--clean",
        "--noconfirm",
        "--onefile",
        "--windowed",
        "--name", APP_NAME,
        "--workpath", "build",
        "--distpath", "dist",
    ]
    for src, dest in DATA_FILES:
        args += ["--add-data", f"{src}{os.pathsep}{dest}"]
    args.append("main.py")
    return args


def main() -> None:
    """Build the application using PyInstaller."""
    logger.info("Building %s...", APP_NAME)
    remove_path("build")
    remove_path("dist")

    try:
        import PyInstaller  # type: ignore  # noqa: F401
    except ImportError:
        logger.error("PyInstaller is not installed. Install the dev extra (pip install -e .[dev]) and re-run.")
        sys.exit(1)

    try:
        subprocess.check_call(pyinstaller_args())
        logger.info("Build completed successfully!")
        logger.info("Executable location: dist/%s", APP_NAME)
    except subprocess.CalledProcessError as e:
        logger.exception("Build failed with error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
