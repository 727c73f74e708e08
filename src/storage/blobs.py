"""
Blob Container Provisioning

Creates the product image container at process start. Image upload and
download are not handled here.
"""

from __future__ import annotations

import logging

from azure.core.exceptions import AzureError, ResourceExistsError

from src.storage.errors import StoreUnavailable

logger = logging.getLogger(__name__)


async def ensure_image_container(connection_string: str, container_name: str) -> bool:
    """
    Create the container with public read access for blobs, if absent.

    Args:
        connection_string: Storage account connection string
        container_name: Container to create

    Returns:
        True if the container was created, False if it already existed

    Raises:
        StoreUnavailable: If the storage account cannot be reached
    """
    try:
        from azure.storage.blob.aio import ContainerClient
    except ImportError as e:
        raise ImportError(
            "azure-storage-blob package required. "
            "Install with: pip install azure-storage-blob"
        ) from e

    client = ContainerClient.from_connection_string(
        connection_string,
        container_name=container_name,
    )
    async with client:
        try:
            await client.create_container(public_access="blob")
        except ResourceExistsError:
            logger.debug(f"Blob container {container_name} already exists")
            return False
        except AzureError as e:
            raise StoreUnavailable(
                f"Failed to create blob container {container_name}: {e}",
                store=container_name,
            ) from e

    logger.info(f"Created blob container {container_name} with public blob access")
    return True


__all__ = ["ensure_image_container"]
