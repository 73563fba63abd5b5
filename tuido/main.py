import argparse
import curses
import logging
import os
from pathlib import Path

from tuido import __version__
from tuido.config import AppConfig, default_config_dir, ensure_config, load_keybinds, load_state, save_state
from tuido.history import DEFAULT_MAX_HISTORY
from tuido.log import setup_logging
from tuido.machine import KeyPress, Resize, update
from tuido.ui import draw, get_key_str, init_colors

logger = logging.getLogger(__name__)


class TodoApp:
    def __init__(self, config):
        self.config = config
        keybinds = load_keybinds(config.keybinds_file)
        self.state = load_state(config.state_file, keybinds, config.max_history,
                                legacy_file=config.legacy_tasks_file)

    def save(self):
        """Persist the current state; failures are reported, not rolled back."""
        try:
            save_state(self.config.state_file, self.state)
        except OSError as err:
            logger.exception("Failed to save %s", self.config.state_file)
            self.state.error_message = f"Failed to save: {err}"

    def handle(self, event):
        self.state = update(self.state, event)
        if self.state.dirty:
            self.save()

    def run(self, stdscr):
        try:
            curses.curs_set(0)
            init_colors()
            height, width = stdscr.getmaxyx()
            self.handle(Resize(width, height))
            draw(self.state, stdscr)

            while self.state.running:
                key = stdscr.getch()
                if key == curses.KEY_RESIZE:
                    height, width = stdscr.getmaxyx()
                    self.handle(Resize(width, height))
                else:
                    self.handle(KeyPress(get_key_str(key)))
                draw(self.state, stdscr)
        finally:
            self.save()


def build_parser():
    ap = argparse.ArgumentParser(prog="tuido", description="Terminal todo list with contexts")
    ap.add_argument("--config-dir", type=Path, default=None,
                    help="Directory for state.json, keybinds.json and the log (default ~/.config/tuido)")
    ap.add_argument("--history", type=int, default=DEFAULT_MAX_HISTORY,
                    help=f"Number of undo steps to keep (default {DEFAULT_MAX_HISTORY})")
    ap.add_argument("--log-level", default="WARNING", help="File log level (DEBUG, INFO, WARNING, ERROR)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.history < 1:
        build_parser().error("--history must be at least 1")
    config = AppConfig(
        config_dir=(args.config_dir or default_config_dir()).expanduser(),
        max_history=args.history,
        log_level=args.log_level,
    )
    ensure_config(config)
    setup_logging(config.log_file, config.log_level)
    logger.info("Starting tuido %s with config dir %s", __version__, config.config_dir)

    # curses waits a full second after ESC by default
    os.environ.setdefault("ESCDELAY", "25")
    app = TodoApp(config)
    curses.wrapper(app.run)


if __name__ == "__main__":
    main()
