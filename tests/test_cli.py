from typer.testing import CliRunner

from podreaper import cli
from podreaper.exceptions import CredentialsError

runner = CliRunner()


def test_config_shows_environment(monkeypatch):
    monkeypatch.setenv("NAMESPACE", "payments")
    monkeypatch.setenv("PORT", "9191")

    result = runner.invoke(cli.app, ["config"])
    assert result.exit_code == 0
    assert "payments" in result.output
    assert "9191" in result.output


def test_run_exits_nonzero_without_credentials(monkeypatch):
    async def no_credentials(path):
        raise CredentialsError("failed to build kubeconfig: no configuration found")

    monkeypatch.setattr(cli, "load_k8s_config", no_credentials)
    result = runner.invoke(cli.app, ["run", "--namespace", "ns"])
    assert result.exit_code == 1


def test_check_reports_strategy(monkeypatch):
    async def fake_load(path):
        return object(), "kubeconfig"

    monkeypatch.setattr(cli, "load_k8s_config", fake_load)
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 0
    assert "kubeconfig" in result.output


def test_check_fails_without_credentials(monkeypatch):
    async def no_credentials(path):
        raise CredentialsError("failed to build kubeconfig")

    monkeypatch.setattr(cli, "load_k8s_config", no_credentials)
    result = runner.invoke(cli.app, ["check"])
    assert result.exit_code == 1
    assert "failed to build kubeconfig" in result.output
