import os
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing.
def ensure_directory(path: Path):
    path.mkdir(parents=True,exist_ok=True)
    return path

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path
    current: Path

    @staticmethod
    def build():
        # WERKWISE_HOME wins, so tests and portable installs can point somewhere else entirely
        override = os.getenv("WERKWISE_HOME")
        appdata = os.getenv("APPDATA")
        if override:
            data = Path(override)
        elif appdata:
            data = Path(appdata) / "WerkWise"
        else:
            data = Path.home() / ".werkwise"
        data = ensure_directory(data)

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")

        return ProjectPaths(
            data = data,
            logs = logs,
            current = current,
        )
PATHS = ProjectPaths.build()
