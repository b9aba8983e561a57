"""
Kubernetes credential resolution.

Tries the in-cluster service account first and falls back to a local
kubeconfig. Failure is fatal for the process; nothing here retries.
"""

from pathlib import Path
from typing import Optional, Tuple

from kubernetes_asyncio import client, config

from podreaper.exceptions import ClientConstructionError, CredentialsError
from podreaper.logging import get_logger

logger = get_logger("collector.credentials")

IN_CLUSTER = "in-cluster"
KUBECONFIG = "kubeconfig"


async def load_k8s_config(kubeconfig: Path) -> Tuple[client.Configuration, str]:
    """
    Load Kubernetes configuration (in-cluster or local kubeconfig).

    Args:
        kubeconfig: Kubeconfig file used when no in-cluster identity is available.

    Returns:
        Tuple of (client configuration, label of the strategy that succeeded).

    Raises:
        CredentialsError: if neither strategy yields a usable configuration.
    """
    cfg = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=cfg)
        logger.debug("Loaded in-cluster Kubernetes configuration")
        return cfg, IN_CLUSTER
    except config.ConfigException as e:
        logger.debug(f"In-cluster configuration unavailable: {e}")

    try:
        await config.load_kube_config(
            config_file=str(kubeconfig), client_configuration=cfg
        )
    except Exception as e:
        raise CredentialsError(
            f"failed to build kubeconfig: {e}", {"kubeconfig": str(kubeconfig)}
        ) from e
    logger.debug(f"Loaded Kubernetes configuration from {kubeconfig}")
    return cfg, KUBECONFIG


def create_k8s_client(cfg: Optional[client.Configuration]) -> client.ApiClient:
    """Create the API client shared by the watch and the delete calls."""
    try:
        return client.ApiClient(configuration=cfg)
    except Exception as e:
        raise ClientConstructionError(f"failed to create clientset: {e}") from e
