"""Unit tests for the cargolink command line front end."""

import json
from unittest.mock import patch

import pytest
import yaml

from cargolink.api.session_store import SessionCredential
from cargolink.cli import build_parser, main, run
from tests.fixtures.http_fakes import make_response
from tests.fixtures.sample_data import (
    SAMPLE_LOGIN_RESPONSE,
    SAMPLE_PDF_BYTES,
    SAMPLE_SHIPMENTS,
    SAMPLE_TOKEN,
    SAMPLE_TWO_FACTOR_CHALLENGE,
    SAMPLE_USER,
)


def parse(*argv):
    return build_parser().parse_args(list(argv))


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "config"
    directory.mkdir()
    (directory / "default_config.yaml").write_text(yaml.dump({
        "session": {"backend": "memory"},
        "logging": {"log_to_file": False, "log_to_console": False}
    }))
    return directory


class TestRun:

    @pytest.mark.unit
    def test_login(self, gateway, transport, session_store, capsys):
        transport.queue(make_response(200, SAMPLE_LOGIN_RESPONSE))

        with patch('cargolink.cli.getpass.getpass', return_value='correct horse'):
            exit_code = run(parse('login', 'dispatcher', '--remember'), gateway)

        assert exit_code == 0
        assert session_store.durable.get('token') == SAMPLE_TOKEN
        assert "Logged in as dispatcher" in capsys.readouterr().out

    @pytest.mark.unit
    def test_login_needs_second_factor(self, gateway, transport):
        transport.queue(make_response(200, SAMPLE_TWO_FACTOR_CHALLENGE))

        with patch('cargolink.cli.getpass.getpass', return_value='correct horse'):
            assert run(parse('login', 'dispatcher'), gateway) == 2

    @pytest.mark.unit
    def test_whoami_without_session(self, gateway, transport):
        assert run(parse('whoami'), gateway) == 1
        assert transport.requests == []

    @pytest.mark.unit
    def test_shipments(self, gateway, transport, session_store, capsys):
        session_store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER))
        transport.queue(make_response(200, SAMPLE_SHIPMENTS))

        assert run(parse('shipments', '--status', 'Delivered'), gateway) == 0
        assert json.loads(capsys.readouterr().out) == SAMPLE_SHIPMENTS
        assert transport.last_request.url.endswith('/shipments?status=Delivered')

    @pytest.mark.unit
    def test_raw_request_to_file(self, gateway, transport, tmp_path):
        transport.queue(make_response(200, content=SAMPLE_PDF_BYTES))
        output = tmp_path / "report.pdf"

        exit_code = run(parse('request', '/reports/download', '--param', 'year=2024', '-o', str(output)), gateway)

        assert exit_code == 0
        assert output.read_bytes() == SAMPLE_PDF_BYTES
        assert transport.last_request.url.endswith('/reports/download?year=2024')

    @pytest.mark.unit
    def test_bad_param(self, gateway):
        with pytest.raises(ValueError):
            run(parse('request', '/fleet', '--param', 'broken'), gateway)


class TestMain:

    @pytest.mark.unit
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    @pytest.mark.unit
    def test_configuration_error(self, config_dir, capsys):
        (config_dir / "local.yaml").write_text("api: [unclosed")

        assert main(['--config-dir', str(config_dir), 'logout']) == 1
        assert "Configuration error" in capsys.readouterr().err

    @pytest.mark.unit
    def test_expired_session(self, config_dir, gateway, transport, session_store, capsys):
        session_store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER))
        transport.queue(make_response(401, {"error": "Token expired"}))
        gateway.client.on_session_invalidated = lambda descriptor: print("re-login needed")

        with patch('cargolink.cli.LogisticsGateway.from_config', return_value=gateway):
            exit_code = main(['--config-dir', str(config_dir), 'shipments'])

        assert exit_code == 1
        assert "re-login needed" in capsys.readouterr().out
        assert not session_store.has_session()

    @pytest.mark.unit
    def test_api_error_reported(self, config_dir, gateway, transport, session_store, capsys):
        session_store.save(SessionCredential(SAMPLE_TOKEN, SAMPLE_USER))
        transport.queue(make_response(404, {"error": "Route not found"}))

        with patch('cargolink.cli.LogisticsGateway.from_config', return_value=gateway):
            exit_code = main(['--config-dir', str(config_dir), 'request', '/nowhere'])

        assert exit_code == 1
        assert "Route not found" in capsys.readouterr().err
