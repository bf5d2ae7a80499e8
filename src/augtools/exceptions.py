class AugToolsError(Exception):
    """Base exception for all augtools errors."""

    pass


####################################################################################################
# Reference domain and transform composition


class DegenerateDomainError(AugToolsError):
    """Raised when a reference domain cannot be built (no inputs, or an axis of size 1)."""

    pass


class DimensionMismatchError(AugToolsError):
    """Raised when images of differing dimensionality are mixed in one batch."""

    pass


class SingularTransformError(AugToolsError):
    """Raised when an orientation matrix or transform cannot be inverted."""

    pass


####################################################################################################
# Augmentation


class ParameterArityError(AugToolsError):
    """Raised when a parameter vector does not match a transform family's parameter count."""

    pass


class SampleLimitError(AugToolsError):
    """Raised when a parameter space would generate more samples than allowed."""

    pass


class UnknownFilterError(AugToolsError, KeyError):
    """Raised when an intensity filter kind has no registered implementation."""

    pass
