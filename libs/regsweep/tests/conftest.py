from __future__ import annotations

import pytest

from regsweep.config import LoggingSettings, RegistryConfig, Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="local",
        local_dir=str(tmp_path / "data"),
        registry=RegistryConfig(bucket="registry"),
        logging=LoggingSettings(console=False),
    )
