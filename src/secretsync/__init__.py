# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""secretsync - keeps cluster secrets in sync with a secret backend.

This package synchronizes managed secret records from a secret-of-truth
backend into a consumer key-value store:

- Backend clients: HashiCorp Vault (token session with renewal loop) and
  Azure Key Vault (managed credentials)
- Reconciler: finalizer-protected, idempotent create/update/delete of
  target secrets
- Transport-aware error handling with ModelSyncErrorContext
- Injected metrics sinks (Prometheus, in-memory, no-op)

Key Components:
    - SecretSyncEngine: lifecycle owner (secretsync.runtime.sync_engine)
    - SecretRecordReconciler: convergence of one record
    - VaultBackendClient / AzureKeyVaultBackendClient
"""

__version__ = "0.1.0"

__all__: list[str] = ["__version__"]
