import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from tuido.history import DEFAULT_MAX_HISTORY
from tuido.keys import DEFAULT_KEYBINDS, normalize_keybinds
from tuido.state import AppState

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "TUIDO_CONFIG_DIR"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path
    max_history: int = DEFAULT_MAX_HISTORY
    log_level: str = "WARNING"

    @property
    def state_file(self):
        return self.config_dir / "state.json"

    @property
    def keybinds_file(self):
        return self.config_dir / "keybinds.json"

    @property
    def legacy_tasks_file(self):
        """Bare task list written by older releases."""
        return self.config_dir / "tasks.json"

    @property
    def log_file(self):
        return self.config_dir / "tuido.log"


def default_config_dir():
    env = os.environ.get(CONFIG_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "tuido"


def ensure_config(config):
    """Create the config directory and the default keybinds file if they don't exist."""
    config.config_dir.mkdir(parents=True, exist_ok=True)
    if not config.keybinds_file.exists():
        save_keybinds(config.keybinds_file, DEFAULT_KEYBINDS)


def load_keybinds(keybinds_file):
    """Load keybinds from the JSON file. Fall back to defaults if the file is invalid."""
    try:
        with open(keybinds_file, "r", encoding="utf-8") as f:
            keybinds = json.load(f)
    except FileNotFoundError:
        return normalize_keybinds(None)
    except (OSError, json.JSONDecodeError):
        logger.warning("Unreadable keybinds file %s, using defaults", keybinds_file, exc_info=True)
        return normalize_keybinds(None)
    if not isinstance(keybinds, dict):
        logger.warning("Keybinds file %s is not an object, using defaults", keybinds_file)
        return normalize_keybinds(None)
    # Ensure all required keybinds exist
    return normalize_keybinds(keybinds)


def save_keybinds(keybinds_file, keybinds):
    """Save keybinds to the JSON file."""
    with open(keybinds_file, "w", encoding="utf-8") as f:
        json.dump(keybinds, f, indent=2)


def load_state(state_file, keybinds=None, max_history=DEFAULT_MAX_HISTORY, legacy_file=None):
    """Load the app state. Missing or broken files give a fresh state with one context.

    When there is no state file yet, tasks are imported from ``legacy_file``
    if it exists; it is only read, the next save goes to ``state_file``.
    """
    if legacy_file is not None and not Path(state_file).exists() and Path(legacy_file).exists():
        logger.info("No %s yet, importing tasks from %s", state_file, legacy_file)
        state_file = legacy_file
    try:
        with open(state_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("No saved state at %s, starting empty", state_file)
        return AppState(keybinds=keybinds, max_history=max_history)
    except (OSError, json.JSONDecodeError):
        logger.warning("Could not read %s, starting empty", state_file, exc_info=True)
        return AppState(keybinds=keybinds, max_history=max_history)
    if not isinstance(data, (dict, list)):
        logger.warning("Unexpected content in %s, starting empty", state_file)
        return AppState(keybinds=keybinds, max_history=max_history)
    state = AppState.from_dict(data, keybinds=keybinds, max_history=max_history)
    logger.info("Loaded %d tasks in %d contexts from %s",
                len(state.store.tasks), len(state.contexts), state_file)
    return state


def save_state(state_file, state):
    """Write the state to disk; the previous file is replaced atomically."""
    state_file = Path(state_file)
    tmp = state_file.with_name(state_file.name + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(state.to_dict(), f, indent=2)
    os.replace(tmp, state_file)
    logger.debug("Saved %d tasks to %s", len(state.store.tasks), state_file)
