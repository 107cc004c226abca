"""Business logic layer for namespace app.

This package contains the namespace engine:
- Path computation for folders (paths)
- Pre-mutation integrity checks (guards)
- Descendant path propagation (cascade)
- Tree assembly and search (tree)
- Folder and file operations built on the above
- Path drift detection and repair (reconcile)

All business logic should be implemented here, separate from
models (data layer), views (HTTP boundary) and infrastructure.
"""
