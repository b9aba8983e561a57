import asyncio
from typing import Optional

import typer
from rich import print as rprint
from rich.table import Table

from podreaper.collector.credentials import create_k8s_client, load_k8s_config
from podreaper.config import Settings
from podreaper.exceptions import PodReaperError
from podreaper.logging import get_logger, setup_logging
from podreaper.service import ReaperService

app = typer.Typer(
    name="podreaper",
    help="Delete pods stuck in CrashLoopBackOff so their owners recreate them.",
    add_completion=False,
)

log = get_logger("cli")


def _load_settings(namespace: Optional[str], port: Optional[int]) -> Settings:
    current = Settings()
    overrides = {}
    if namespace:
        overrides["namespace"] = namespace
    if port:
        overrides["port"] = port
    return current.model_copy(update=overrides) if overrides else current


async def _run_service(settings: Settings) -> None:
    cfg, mode = await load_k8s_config(settings.kubeconfig_path)
    async with create_k8s_client(cfg) as api_client:
        log.info(f"connected via {mode}")
        service = ReaperService(settings, api_client)
        service.install_signal_handlers()
        await service.run()


@app.command()
def run(
    namespace: Optional[str] = typer.Option(None, "--namespace", "-n", help="Namespace to watch (overrides NAMESPACE)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Liveness port (overrides PORT).", min=1, max=65535),
):
    """
    Watch a namespace and delete pods that enter CrashLoopBackOff.

    Runs until SIGINT/SIGTERM. Startup failures exit with status 1.
    """
    settings = _load_settings(namespace, port)
    setup_logging(settings.log_level)
    try:
        asyncio.run(_run_service(settings))
    except PodReaperError as e:
        log.error(str(e))
        raise typer.Exit(code=1)


@app.command()
def config():
    """
    Display the effective podreaper configuration.
    """
    settings = Settings()
    table = Table(title="podreaper configuration", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("NAMESPACE", settings.namespace)
    table.add_row("PORT", str(settings.port))
    table.add_row("KUBECONFIG", str(settings.kubeconfig_path))
    table.add_row("LOG_LEVEL", settings.log_level)
    table.add_row("DELETE_TIMEOUT_SECONDS", f"{settings.delete_timeout_seconds:g}")
    table.add_row("SHUTDOWN_GRACE_SECONDS", f"{settings.shutdown_grace_seconds:g}")
    rprint(table)


@app.command()
def check():
    """
    Resolve Kubernetes credentials and report which strategy worked.
    """
    settings = Settings()
    setup_logging(settings.log_level)
    try:
        _, mode = asyncio.run(load_k8s_config(settings.kubeconfig_path))
    except PodReaperError as e:
        rprint(f"[bold red]Error loading Kubernetes configuration:[/bold red] {e}")
        raise typer.Exit(code=1)
    rprint(f"[bold green]Kubernetes configuration loaded via {mode}.[/bold green]")
    rprint("[yellow]Note: This checks config loading, not necessarily API reachability.[/yellow]")


if __name__ == "__main__":
    app()
