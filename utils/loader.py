"""Resolution of collaborator import paths"""

import importlib
from typing import Any, Optional, Type, TypeVar

from core.exceptions import CollaboratorLoadError

T = TypeVar("T")


def load_collaborator(import_path: Optional[str], expected: Type[T]) -> Optional[T]:
    """Instantiate a collaborator from a "package.module:attribute" path.

    The attribute may be a class, a zero-argument factory, or a ready
    instance. Returns None when no path is configured.
    """
    if not import_path:
        return None
    
    module_name, sep, attribute = import_path.partition(":")
    if not sep or not module_name or not attribute:
        raise CollaboratorLoadError(
            f"Invalid collaborator path '{import_path}', expected 'module:attribute'",
            import_path,
        )
    
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise CollaboratorLoadError(f"Cannot import '{module_name}': {e}", import_path) from e
    
    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise CollaboratorLoadError(
                f"'{module_name}' has no attribute '{attribute}'", import_path
            ) from e
    
    instance = target
    if not isinstance(target, expected):
        if not callable(target):
            raise CollaboratorLoadError(f"'{import_path}' is not callable", import_path)
        instance = target()
    if not isinstance(instance, expected):
        raise CollaboratorLoadError(
            f"'{import_path}' does not provide a {expected.__name__}", import_path
        )
    return instance
