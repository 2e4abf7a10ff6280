# pomotask/utils/notifications.py
"""
Desktop notification and alarm sound for finished pomodoros.
Both shell out to the usual Linux desktop tools.
"""
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape

from pomotask.utils.error_handler import PlaybackError

console = Console()
logger = logging.getLogger(__name__)

# tried in order; each takes the file path as its last argument
SOUND_PLAYERS = (
    ["paplay"],
    ["aplay", "-q"],
    ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"],
)


def notify_cli(title: str, body: str):
    console.print(f"[bold magenta]🔔 {escape(title)}[/]: {escape(body)}")


def send_desktop_notification(title: str, body: str, app_name: str = "pt",
                              timeout_ms: int = 0) -> bool:
    """
    Show a notification through notify-send. timeout_ms=0 keeps it on
    screen until dismissed. Returns False (and logs) if it could not be shown.
    """
    if not shutil.which("notify-send"):
        logger.warning("notify-send not found; skipping desktop notification")
        console.print("[yellow]Failed to display notification: notify-send not found[/yellow]")
        return False
    cmd = ["notify-send", "-a", app_name, "-t", str(timeout_ms)]
    if timeout_ms == 0:
        cmd += ["-u", "critical"]
    cmd += [title, body]
    try:
        subprocess.run(cmd, check=True, timeout=10,
                       stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
        return True
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        logger.error(f"notify-send failed: {e}")
        console.print(f"[yellow]Failed to display notification: {escape(str(e))}[/yellow]")
        return False


def find_sound_player() -> Optional[List[str]]:
    for player in SOUND_PLAYERS:
        if shutil.which(player[0]):
            return list(player)
    return None


def play_alarm(sound_file: Path):
    """
    Play the alarm once and wait for it to finish.
    Raises PlaybackError when the file or a player is missing, or playback fails.
    """
    sound_file = Path(sound_file)
    if not sound_file.is_file():
        raise PlaybackError(f"Alarm sound {sound_file} not found.")
    player = find_sound_player()
    if player is None:
        raise PlaybackError("No audio player found (tried paplay, aplay, ffplay).")
    try:
        subprocess.run(player + [str(sound_file)], check=True,
                       stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except (subprocess.CalledProcessError, OSError) as e:
        raise PlaybackError(f"Failed to play alarm {sound_file}: {e}") from e


def deliver(notifications: Iterable, sound_file: Path, app_name: str = "pt",
            timeout_ms: int = 0) -> int:
    """
    Echo, send and then sound the alarm once if anything was delivered.
    Returns the number of notifications handled.
    """
    count = 0
    for n in notifications:
        notify_cli(n.title, n.body)
        send_desktop_notification(n.title, n.body, app_name, timeout_ms)
        count += 1
    if count:
        play_alarm(sound_file)
    return count
