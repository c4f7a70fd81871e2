from .inspector import PackageInspector

__all__ = ["PackageInspector"]
