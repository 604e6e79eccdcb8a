"""
Expo Startup Script
===================

Builds the bash script that installs a project's dependencies and starts the
Expo dev server in tunnel mode inside a sandbox. Progress is written as plain
text markers to a status log that the status endpoint greps later.
"""

from pydantic import BaseModel


# Markers written to the status log, in the order they appear
MARKER_INSTALL_STARTED = "Starting npm install"
MARKER_INSTALL_COMPLETE = "npm install complete"
MARKER_EXPO_CLI_INSTALLED = "expo-cli installed"
MARKER_EXPO_STARTED = "Expo started"

NVM_SOURCE = "source $HOME/.nvm/nvm.sh 2>/dev/null"

# Seconds the script stays alive after launching expo
KEEPALIVE_SECONDS = 300


class ExpoFiles(BaseModel):
    """Locations of the expo script and its logs inside the sandbox."""

    home_dir: str

    @property
    def status_log(self) -> str:
        return f"{self.home_dir}/expo-status.log"

    @property
    def install_log(self) -> str:
        return f"{self.home_dir}/expo-install.log"

    @property
    def expo_log(self) -> str:
        return f"{self.home_dir}/expo.log"

    @property
    def script(self) -> str:
        return f"{self.home_dir}/start-expo.sh"


def build_startup_script(project_dir: str, files: ExpoFiles) -> str:
    """
    Render the startup script.

    The script never uses `set -e`: a failed npm install is noted in the
    status log and the script carries on to start expo anyway.
    """
    status = files.status_log
    install = files.install_log
    return f"""#!/bin/bash
cd {project_dir}
{NVM_SOURCE} || true

echo "=== Starting at $(date) ===" > {status}
echo "Working directory: $(pwd)" >> {status}
echo "Node version: $(node -v)" >> {status}
echo "NPM version: $(npm -v)" >> {status}

echo "{MARKER_INSTALL_STARTED}..." >> {status}
npm install >> {install} 2>&1 || echo "npm install had errors" >> {status}
echo "{MARKER_INSTALL_COMPLETE}" >> {status}

echo "Installing expo-cli..." >> {status}
npm install -g expo-cli @expo/ngrok >> {install} 2>&1 || true
echo "{MARKER_EXPO_CLI_INSTALLED}" >> {status}

echo "Starting Expo..." >> {status}
npx expo start --tunnel --non-interactive >> {files.expo_log} 2>&1 &
EXPO_PID=$!
echo "Expo started with PID: $EXPO_PID" >> {status}
echo "{MARKER_EXPO_STARTED}" >> {status}

sleep {KEEPALIVE_SECONDS}
"""
