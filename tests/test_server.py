from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from aws_readonly_mcp import server as server_module
from aws_readonly_mcp.errors import ProviderFailure
from aws_readonly_mcp.server import build_server, build_session, run_entrypoint


def _settings(role_arn=None):
    settings = MagicMock()
    settings.aws.region = "us-west-2"
    settings.aws.assume_role_arn = role_arn
    settings.aws.session_duration = 1800
    settings.aws.sdk_timeout_seconds = 15
    settings.server.instructions = "Instructions"
    settings.logging.file = "test.log"
    return settings


@patch("aws_readonly_mcp.server.STSAdapter")
@patch("aws_readonly_mcp.server.SessionManager")
def test_build_session_without_startup_role(mock_session_cls, mock_sts_cls):
    session = build_session(_settings())

    assert session is mock_session_cls.return_value
    mock_sts_cls.assert_called_once_with("us-west-2", timeout_seconds=15)
    kwargs = mock_session_cls.call_args.kwargs
    assert kwargs["issuer"] is mock_sts_cls.return_value
    assert kwargs["storage_factory"].keywords == {"timeout_seconds": 15}
    session.assume_role.assert_not_called()


@patch("aws_readonly_mcp.server.STSAdapter")
@patch("aws_readonly_mcp.server.SessionManager")
def test_build_session_assumes_startup_role(mock_session_cls, _mock_sts_cls):
    mock_session_cls.return_value.assume_role = AsyncMock()

    session = build_session(_settings("arn:aws:iam::123456789012:role/reader"))

    session.assume_role.assert_awaited_once_with("arn:aws:iam::123456789012:role/reader", 1800)


@patch("aws_readonly_mcp.server.STSAdapter")
@patch("aws_readonly_mcp.server.SessionManager")
def test_build_session_startup_role_failure_is_fatal(mock_session_cls, _mock_sts_cls):
    mock_session_cls.return_value.assume_role = AsyncMock(
        side_effect=ProviderFailure("AccessDenied: not allowed", code="AccessDenied")
    )

    with pytest.raises(RuntimeError, match="Failed to assume startup role"):
        build_session(_settings("arn:aws:iam::123456789012:role/reader"))


@patch("aws_readonly_mcp.server.load_settings")
@patch("aws_readonly_mcp.server.MCPServer")
@patch("aws_readonly_mcp.server.register_tools")
@patch("aws_readonly_mcp.server.configure_logging")
@patch("aws_readonly_mcp.server.Dispatcher")
@patch("aws_readonly_mcp.server.build_session")
def test_build_server(
    mock_build_session, mock_dispatcher_cls, mock_log, mock_register, mock_server_cls, mock_settings
):
    settings = _settings()
    mock_settings.return_value = settings

    server = build_server()

    mock_settings.assert_called_once()
    mock_log.assert_called_once()
    mock_build_session.assert_called_once_with(settings)
    mock_dispatcher_cls.assert_called_once_with(mock_build_session.return_value)
    assert mock_server_cls.call_args.kwargs["name"] == "aws-mcp-readonly"
    assert mock_server_cls.call_args.kwargs["instructions"] == "Instructions"
    mock_register.assert_called_once_with(
        mock_server_cls.return_value, mock_dispatcher_cls.return_value
    )
    assert server is mock_server_cls.return_value


def test_get_server_builds_once(monkeypatch):
    monkeypatch.setattr(server_module, "_server", None)
    built = MagicMock()
    mock_build = MagicMock(return_value=built)
    monkeypatch.setattr(server_module, "build_server", mock_build)

    assert server_module.get_server() is built
    assert server_module.get_server() is built
    mock_build.assert_called_once_with()


def test_run_entrypoint_exits_on_configuration_error(monkeypatch):
    monkeypatch.setattr(
        server_module, "get_server", MagicMock(side_effect=RuntimeError("Invalid configuration: x"))
    )

    with pytest.raises(SystemExit) as exc_info:
        run_entrypoint()

    assert exc_info.value.code == 1


def test_run_entrypoint_runs_server(monkeypatch):
    built = MagicMock()
    monkeypatch.setattr(server_module, "get_server", MagicMock(return_value=built))

    run_entrypoint()

    built.run.assert_called_once_with()
