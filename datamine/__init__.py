"""Export -> datamine build: joins a game data export into the area document used by the log watcher."""

__version__ = "0.1.0"
