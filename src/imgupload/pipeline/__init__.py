"""imgupload.pipeline -- run orchestration and its state machine."""

from __future__ import annotations

from .orchestrator import ImageUploadPipeline
from .state import PipelineStateMachine

__all__ = [
    "ImageUploadPipeline",
    "PipelineStateMachine",
]
