from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger("openai-relay.secrets")


def _resolve_project_id(project_id: Optional[str]) -> str:
    project_id = project_id or os.environ.get("GCP_PROJECT") or os.environ.get("GOOGLE_CLOUD_PROJECT")
    if not project_id:
        raise ValueError(
            "Project ID not specified. Set OPENAI_RELAY_GCP_PROJECT_ID, GCP_PROJECT or GOOGLE_CLOUD_PROJECT."
        )
    return project_id


def get_secret_from_manager(secret_name: str, project_id: Optional[str] = None) -> str:
    """
    Fetch the latest version of a secret from Google Cloud Secret Manager.

    Args:
        secret_name: Name of the secret (e.g., "openai-api-key")
        project_id: GCP project ID. Falls back to GCP_PROJECT / GOOGLE_CLOUD_PROJECT.

    Returns:
        The secret payload decoded as UTF-8, without surrounding whitespace.
    """
    try:
        from google.cloud import secretmanager
    except ImportError:
        logger.warning(
            "google-cloud-secret-manager not installed. "
            "Install it with: pip install 'openai-relay[secretmanager]'"
        )
        raise

    name = f"projects/{_resolve_project_id(project_id)}/secrets/{secret_name}/versions/latest"
    logger.info(f"Fetching secret from Secret Manager: {secret_name}")
    try:
        response = secretmanager.SecretManagerServiceClient().access_secret_version(request={"name": name})
    except Exception as e:
        logger.error(f"Failed to retrieve secret {secret_name}: {e}")
        raise

    return response.payload.data.decode("UTF-8").strip()


def should_use_secret_manager() -> bool:
    """True if USE_SECRET_MANAGER is set to "true", "1" or "yes" (case-insensitive)."""
    return os.environ.get("USE_SECRET_MANAGER", "").lower() in ("true", "1", "yes")
