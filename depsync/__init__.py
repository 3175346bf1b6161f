"""Keep package manifests and generated sources consistent with the code."""

from .orchestrator import Orchestrator, RunOutcome
from .pipeline import EnsureOptions, EnsureResult
from .reconciler import ensure_package, reconcile

__all__ = ["EnsureOptions", "EnsureResult", "Orchestrator", "RunOutcome", "ensure_package", "reconcile"]
