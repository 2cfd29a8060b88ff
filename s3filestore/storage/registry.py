"""Registry of configured storage adapters.

The host may configure several file stores; the registry looks them up by
name and picks the default one.
"""

from typing import Dict, List

from loguru import logger

from s3filestore.storage.adapter import S3StorageAdapter


class StorageRegistry:
    """Named collection of storage adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, S3StorageAdapter] = {}

    def register(self, adapter: S3StorageAdapter) -> None:
        """Register an adapter under its name, replacing any previous one."""
        if adapter.get_name() in self._adapters:
            logger.warning(f"Replacing storage adapter {adapter.get_name()}")
        self._adapters[adapter.get_name()] = adapter
        logger.info(f"Registered storage adapter {adapter.get_name()} (default={adapter.is_default()})")

    def get(self, name: str) -> S3StorageAdapter:
        """Get an adapter by name.

        Raises:
            KeyError: If no adapter is registered under ``name``
        """
        try:
            return self._adapters[name]
        except KeyError:
            raise KeyError(
                f"Unknown storage adapter: {name}. Registered: {', '.join(self._adapters) or 'none'}"
            ) from None

    def default(self) -> S3StorageAdapter:
        """Return the default adapter, or the first registered one.

        Raises:
            LookupError: If the registry is empty
        """
        for adapter in self._adapters.values():
            if adapter.is_default():
                return adapter
        if not self._adapters:
            raise LookupError("No storage adapter registered")
        return next(iter(self._adapters.values()))

    def names(self) -> List[str]:
        return list(self._adapters)

    def health(self) -> Dict[str, bool]:
        """Run the health check of every registered adapter."""
        return {name: adapter.health_check() for name, adapter in self._adapters.items()}

    def __len__(self) -> int:
        return len(self._adapters)

    def __contains__(self, name: object) -> bool:
        return name in self._adapters
