"""Release pipeline.

- model / semver: increment kinds and version arithmetic
- manifest: reading and bumping the package manifest version
- changelog: generator invocation and the prepend-only changelog record
- gate: per-stage yes/no confirmation
- context: mutable state of one run
- orchestrator: preconditions and stage sequencing
"""

from __future__ import annotations
