"""
ent — Viewer Controller
Keeps exactly one external image viewer showing the latest image.

The viewer has no live reload, so a refresh is terminate + relaunch. The
launched process handle is kept, and its PID is persisted in the state
database so a later invocation can tell whether its viewer is still open.
"""

import os
import signal
import sqlite3
import subprocess
import time
import logging
from typing import Callable, Optional

from noisegen import database as db

logger = logging.getLogger(__name__)

VIEWER_PID_KEY = "viewer_pid"

# Seconds to let the window appear / the old process exit
LAUNCH_SETTLE = 0.5
KILL_SETTLE = 0.5
TERMINATE_TIMEOUT = 2.0


def _pid_matches(pid: int, program: str) -> bool:
    """True when `pid` is alive and, where /proc exists, runs `program`."""
    try:
        os.kill(pid, 0)
    except (ProcessLookupError, PermissionError):
        return False
    cmdline_path = f"/proc/{pid}/cmdline"
    if not os.path.exists(cmdline_path):
        return True
    try:
        with open(cmdline_path, "rb") as f:
            cmdline = f.read()
    except OSError:
        return False
    return os.path.basename(program).encode() in cmdline


class ViewerController:
    """
    Launches, restarts and tracks the external image viewer.

    Args:
        settings: Effective Settings (viewer, wm_helper)
        context: GenerationContext holding latest_path
        generator: NoiseGenerator used when nothing was generated yet
        popen: subprocess.Popen compatible factory
        run: subprocess.run compatible callable for the wm helper
        sleep: time.sleep compatible callable
        persist_pid: Store the viewer PID in the state database
    """

    def __init__(
        self,
        settings,
        context,
        generator,
        popen: Callable = subprocess.Popen,
        run: Callable = subprocess.run,
        sleep: Callable[[float], None] = time.sleep,
        persist_pid: bool = True,
    ):
        self.settings = settings
        self.context = context
        self.generator = generator
        self._popen = popen
        self._run = run
        self._sleep = sleep
        self._persist_pid = persist_pid
        self._proc = None
        self.launches = 0

    # ── Detection ──

    def is_running(self) -> bool:
        if self._proc is not None:
            if self._proc.poll() is None:
                return True
            self._proc = None
            self._clear_pid()
        pid = self._stored_pid()
        if pid is None:
            return False
        if _pid_matches(pid, self.settings.viewer):
            return True
        self._clear_pid()
        return False

    # ── Public actions ──

    def ensure_running(self) -> bool:
        """Launch the viewer unless one is already open. Generates first if needed."""
        if self.is_running():
            logger.debug("Viewer already running")
            return True
        if self.context.latest_path is None:
            self.generator.generate_image()
        return self._launch()

    def refresh(self) -> bool:
        """Show the newest image: restart the viewer if open, otherwise launch it."""
        if self.is_running():
            self._terminate()
            self._sleep(KILL_SETTLE)
        return self._launch()

    def close(self):
        if self.is_running():
            self._terminate()

    # ── Internals ──

    def _launch(self) -> bool:
        path = self.context.latest_path
        if path is None:
            logger.warning("No image available to display")
            return False

        try:
            self._proc = self._popen(
                [self.settings.viewer, path],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("Could not launch viewer %s: %s", self.settings.viewer, e)
            self._proc = None
            return False

        self.launches += 1
        logger.debug("Viewer %s started (pid %s) on %s", self.settings.viewer, self._proc.pid, path)
        self._store_pid(self._proc.pid)

        self._sleep(LAUNCH_SETTLE)
        self._retitle(path)
        return True

    def _terminate(self):
        if self._proc is not None:
            self._proc.terminate()
            try:
                self._proc.wait(timeout=TERMINATE_TIMEOUT)
            except subprocess.TimeoutExpired:
                logger.debug("Viewer ignored SIGTERM, killing")
                self._proc.kill()
                self._proc.wait()
        else:
            pid = self._stored_pid()
            if pid is not None:
                try:
                    os.kill(pid, signal.SIGTERM)
                except ProcessLookupError:
                    pass
        self._proc = None
        self._clear_pid()

    def _retitle(self, path):
        """Best-effort window title; failures are ignored."""
        title = f"ent: {os.path.basename(path)}"
        try:
            self._run(
                [self.settings.wm_helper, "-r", self.settings.viewer, "-T", title],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Window retitle failed: %s", e)

    # ── PID persistence ──

    def _stored_pid(self) -> Optional[int]:
        if not self._persist_pid:
            return None
        try:
            value = db.get_setting(VIEWER_PID_KEY, "")
        except (sqlite3.Error, OSError) as e:
            logger.debug("Could not read viewer pid: %s", e)
            return None
        return int(value) if value.isdigit() else None

    def _store_pid(self, pid):
        if not self._persist_pid:
            return
        try:
            db.save_setting(VIEWER_PID_KEY, pid)
        except (sqlite3.Error, OSError) as e:
            logger.debug("Could not store viewer pid: %s", e)

    def _clear_pid(self):
        if not self._persist_pid:
            return
        try:
            db.delete_setting(VIEWER_PID_KEY)
        except (sqlite3.Error, OSError) as e:
            logger.debug("Could not clear viewer pid: %s", e)
