"""
Tests for Expo status inference.
"""

from urllib.parse import unquote

from src.expo import ExpoPhase, extract_expo_url, infer_phase, qr_code_url, summarize_status


STATUS_LOG_INSTALLING = """=== Starting at Mon Oct 19 10:00:00 UTC 2026 ===
Working directory: /home/user/project
Node version: v18.20.4
NPM version: 10.7.0
Starting npm install...
"""


class TestInferPhase:
    """infer_phase walks the markers in script order."""

    def test_empty_log_is_starting(self):
        assert infer_phase("") == ExpoPhase.STARTING

    def test_not_started_placeholder_is_starting(self):
        assert infer_phase("not started\n") == ExpoPhase.STARTING

    def test_install_started(self):
        assert infer_phase(STATUS_LOG_INSTALLING) == ExpoPhase.INSTALLING

    def test_install_complete(self):
        log = STATUS_LOG_INSTALLING + "npm install complete\nInstalling expo-cli...\n"
        assert infer_phase(log) == ExpoPhase.INSTALLING_EXPO

    def test_expo_cli_installed(self):
        log = STATUS_LOG_INSTALLING + "npm install complete\nexpo-cli installed\nStarting Expo...\n"
        assert infer_phase(log) == ExpoPhase.STARTING_EXPO

    def test_expo_started(self):
        log = (
            STATUS_LOG_INSTALLING
            + "npm install complete\nexpo-cli installed\nStarting Expo...\n"
            + "Expo started with PID: 4242\nExpo started\n"
        )
        assert infer_phase(log) == ExpoPhase.RUNNING

    def test_install_errors_do_not_stop_progress(self):
        log = STATUS_LOG_INSTALLING + "npm install had errors\nnpm install complete\n"
        assert infer_phase(log) == ExpoPhase.INSTALLING_EXPO


class TestExtractExpoUrl:
    """extract_expo_url prefers the tunnel line, then exp://, then exp.host."""

    def test_no_url(self):
        assert extract_expo_url("Starting Metro Bundler\n") == ""

    def test_tunnel_ready_line(self):
        log = "Tunnel connected.\nTunnel ready at exp://abc-anonymous-8081.exp.direct\n"
        assert extract_expo_url(log) == "exp://abc-anonymous-8081.exp.direct"

    def test_tunnel_line_wins_over_earlier_exp_url(self):
        log = "exp://192.168.1.4:8081\nTunnel ready at exp://tunnel.exp.direct:80\n"
        assert extract_expo_url(log) == "exp://tunnel.exp.direct:80"

    def test_bare_exp_url_strips_trailing_punctuation(self):
        log = 'Metro waiting on (exp://u.exp.direct:80)"\n'
        assert extract_expo_url(log) == "exp://u.exp.direct:80"

    def test_bare_exp_url_stops_at_bracket(self):
        log = "[exp://u.exp.direct:80] ready\n"
        assert extract_expo_url(log) == "exp://u.exp.direct:80"

    def test_exp_host_url(self):
        log = 'Open "https://exp.host/@someone/my-app" on your device\n'
        assert extract_expo_url(log) == "https://exp.host/@someone/my-app"

    def test_exp_scheme_wins_over_exp_host(self):
        log = "https://exp.host/@someone/my-app\nexp://u.exp.direct:80\n"
        assert extract_expo_url(log) == "exp://u.exp.direct:80"


class TestQrCodeUrl:

    def test_empty_url_gives_empty_qr(self):
        assert qr_code_url("") == ""

    def test_url_is_percent_encoded(self):
        qr = qr_code_url("exp://u.exp.direct:80/path?x=1&y=2")
        assert qr.startswith("https://api.qrserver.com/v1/create-qr-code/?size=200x200&data=")
        data = qr.split("&data=", 1)[1]
        assert data == "exp%3A%2F%2Fu.exp.direct%3A80%2Fpath%3Fx%3D1%26y%3D2"
        assert unquote(data) == "exp://u.exp.direct:80/path?x=1&y=2"

    def test_uri_component_safe_characters_kept(self):
        qr = qr_code_url("exp://a-b_c.d!~*'()")
        assert qr.endswith("exp%3A%2F%2Fa-b_c.d!~*'()")


class TestSummarizeStatus:

    def test_url_forces_ready(self):
        status = summarize_status("not started", "Tunnel ready at exp://x.exp.direct:80\n")
        assert status.status == ExpoPhase.READY
        assert status.message == "Expo is ready!"
        assert status.url == "exp://x.exp.direct:80"
        assert status.qr_code.endswith("exp%3A%2F%2Fx.exp.direct%3A80")

    def test_without_url(self):
        status = summarize_status(STATUS_LOG_INSTALLING, "")
        assert status.status == ExpoPhase.INSTALLING
        assert status.message == "Installing dependencies..."
        assert status.url == ""
        assert status.qr_code == ""

    def test_log_is_tail_of_expo_log(self):
        expo_log = "a" * 1500 + "END"
        status = summarize_status("", expo_log)
        assert len(status.log) == 1000
        assert status.log.endswith("END")

    def test_serializes_with_wire_names(self):
        data = summarize_status("", "exp://x.exp.direct:80").model_dump(mode="json", by_alias=True)
        assert data["status"] == "ready"
        assert "qrCode" in data
