# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Runtime Module.

Background task primitives. The engine, its configuration model and the
configuration loader are imported from their own modules:

    secretsync.runtime.sync_engine.SecretSyncEngine
    secretsync.runtime.model_sync_config.ModelSecretSyncConfig
    secretsync.runtime.util_config_loader.load_sync_config
"""

from secretsync.runtime.periodic_task import PeriodicTask

__all__: list[str] = ["PeriodicTask"]
