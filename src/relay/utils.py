"""
Relay Utilities
===============

Helpers for building paths and shell commands that run inside a sandbox.
"""

import posixpath
import shlex

from .errors import InvalidRequestError


def resolve_project_path(project_dir: str, relative_path: str) -> str:
    """
    Join a client-supplied path onto the project directory.

    Leading slashes are ignored. Paths that would land outside the project
    directory (e.g. through "..") raise InvalidRequestError.
    """
    candidate = posixpath.normpath(posixpath.join(project_dir, relative_path.lstrip("/")))
    if candidate == project_dir or not candidate.startswith(project_dir + "/"):
        raise InvalidRequestError(f"Invalid file path: {relative_path}")
    return candidate


def mkdir_command(path: str) -> str:
    return f"mkdir -p {shlex.quote(path)}"


def nvm_install_command(nvm_version: str, node_version: str) -> str:
    """Shell command that installs nvm and makes `node_version` the default Node.js."""
    return (
        f"curl -o- https://raw.githubusercontent.com/nvm-sh/nvm/{nvm_version}/install.sh | bash && "
        'export NVM_DIR="$HOME/.nvm" && '
        '[ -s "$NVM_DIR/nvm.sh" ] && . "$NVM_DIR/nvm.sh" && '
        f"nvm install {node_version} && nvm use {node_version} && nvm alias default {node_version}"
    )


BASHRC = """
export NVM_DIR="$HOME/.nvm"
[ -s "$NVM_DIR/nvm.sh" ] && . "$NVM_DIR/nvm.sh"
"""
