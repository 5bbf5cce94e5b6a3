"""
Side effects requested by the status engine: desktop notifications via
notify-send (works with mako, dunst, etc.) and level commands.
"""

import logging
import shlex
import subprocess

from .models import Category, Level, NotificationEvent, SpawnRequest

logger = logging.getLogger(__name__)

APP_NAME = "battwatch"


class Notifier:
    """Sends notifications through notify-send."""

    def __init__(self, hidden: bool = False, timeout: int = 5):
        self.hidden = hidden
        self.timeout = timeout

    def command(self, event: NotificationEvent) -> list[str]:
        urgency = "critical" if event.critical else "normal"
        cmd = ["notify-send", "-a", APP_NAME, "-u", urgency]
        if event.sticky:
            cmd += ["-t", "0"]
        cmd.append(event.summary)
        if event.body:
            cmd.append(event.body)
        return cmd

    def send(self, event: NotificationEvent) -> bool:
        if self.hidden:
            return False
        try:
            subprocess.run(self.command(event), timeout=self.timeout, capture_output=True)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Cannot send notification %r: %s", event.summary, e)
            return False
        return True


def spawn_command(command: str) -> bool:
    """Start a command line in the background without waiting for it."""
    try:
        subprocess.Popen(
            shlex.split(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except (OSError, ValueError) as e:
        logger.critical("Cannot spawn command %r: %s", command, e)
        return False
    logger.info("Spawned command: %s", command)
    return True


class DesktopSink:
    """
    Sink for the status engine that notifies and runs commands directly.

    A front end passes its own presenter callable to show status updates.
    """

    def __init__(self, notifier: Notifier, presenter=None):
        self.notifier = notifier
        self.presenter = presenter

    def present(self, update):
        if self.presenter is not None:
            self.presenter(update)

    def notify(self, event: NotificationEvent):
        logger.info("%s", event.summary)
        self.notifier.send(event)

    def spawn(self, request: SpawnRequest) -> bool:
        what = "critical" if request.level == Level.CRITICAL else "low"
        return self.run(request.command, f"{what} battery level", sticky=True)

    def run(self, command: str, what: str, sticky: bool = False) -> bool:
        """Spawn a command, notifying (not retrying) on failure."""
        if spawn_command(command):
            return True

        self.notifier.send(
            NotificationEvent(
                category=Category.SPAWN_FAILED,
                summary=f"Cannot spawn {what} command!",
                body=command,
                critical=True,
                sticky=sticky,
            )
        )
        return False
