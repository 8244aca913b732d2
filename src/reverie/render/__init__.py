from .typewriter import TimingPolicy, TypewriterRenderer

__all__ = ["TimingPolicy", "TypewriterRenderer"]
