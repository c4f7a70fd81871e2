from .reconciler import VersionReconciler, reconcile, detect_toolset_version

__all__ = ["VersionReconciler", "reconcile", "detect_toolset_version"]
