"""Multi-step pipelines built on the composition engine."""

from .replay_pipeline import ReplayPipeline

__all__ = ["ReplayPipeline"]
