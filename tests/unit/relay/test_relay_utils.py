"""
Tests for relay path and command helpers.
"""

import pytest

from src.relay import InvalidRequestError, resolve_project_path
from src.relay.utils import mkdir_command, nvm_install_command


class TestResolveProjectPath:

    @pytest.mark.parametrize(
        "relative, expected",
        [
            ("package.json", "/home/user/project/package.json"),
            ("src/App.tsx", "/home/user/project/src/App.tsx"),
            ("/app.json", "/home/user/project/app.json"),
            ("./assets/../assets/icon.png", "/home/user/project/assets/icon.png"),
        ],
    )
    def test_paths_inside_project(self, relative, expected):
        assert resolve_project_path("/home/user/project", relative) == expected

    @pytest.mark.parametrize("relative", ["../.bashrc", "src/../../secret", ".", "a/.."])
    def test_paths_escaping_project_are_rejected(self, relative):
        with pytest.raises(InvalidRequestError) as exc_info:
            resolve_project_path("/home/user/project", relative)
        assert exc_info.value.status_code == 400

    def test_sibling_directory_with_common_prefix_is_rejected(self):
        with pytest.raises(InvalidRequestError):
            resolve_project_path("/home/user/project", "../project-other/x.js")


def test_mkdir_command_quotes_path():
    assert mkdir_command("/home/user/project/my dir") == "mkdir -p '/home/user/project/my dir'"


def test_nvm_install_command():
    command = nvm_install_command("v0.39.0", "18")
    assert "nvm-sh/nvm/v0.39.0/install.sh | bash" in command
    assert "nvm install 18 && nvm use 18" in command
