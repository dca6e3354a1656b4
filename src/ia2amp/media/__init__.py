"""Media helpers for AMP sizing."""

from .dimensions import MediaDimensionResolver, MediaType, probe_image

__all__ = ["MediaDimensionResolver", "MediaType", "probe_image"]
