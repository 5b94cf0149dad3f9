from .base import BaseCollector
from .window import CounterWindow
from .system_sampler import SystemSampler
from .process_enumerator import ProcessEnumerator

__all__ = [
    "BaseCollector",
    "CounterWindow",
    "SystemSampler",
    "ProcessEnumerator",
]
