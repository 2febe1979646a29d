"""Common exception types for fluidprim."""


class FluidPrimError(Exception):
    """Base class for all fluidprim errors."""


class ShapeMismatchError(FluidPrimError, ValueError):
    """Raised when two species buffers (or two collections) have different shapes."""


class UnallocatedSpeciesError(FluidPrimError, RuntimeError):
    """Raised when a species-touching operation meets an unsized species buffer."""
