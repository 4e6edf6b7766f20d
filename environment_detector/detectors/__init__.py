"""Built-in detectors"""
from .operating_system import OSDetector
from .container import ContainerDetector
from .ci import CIDetector
from .cloud import CloudDetector
from .privileges import PrivilegeDetector
from .runtime import RuntimeDetector, ModeDetector

__all__ = [
    'OSDetector',
    'ContainerDetector',
    'CIDetector',
    'CloudDetector',
    'PrivilegeDetector',
    'RuntimeDetector',
    'ModeDetector',
]
