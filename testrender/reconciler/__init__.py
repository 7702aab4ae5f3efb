"""Fiber reconciler and the no-op test host it commits to."""

from .reconciler import FiberRoot, Reconciler, reconciler, resolve_current_buffer
from .scheduling import Scheduler, scheduler

__all__ = ['FiberRoot', 'Reconciler', 'Scheduler', 'reconciler', 'resolve_current_buffer', 'scheduler']
