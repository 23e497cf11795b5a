class HoleException(Exception):
    """
    Base class for hole filling errors.
    """
    message = "Hole filling failed."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidArgumentException(HoleException, ValueError):
    message = "Invalid argument."


class NoMissingPixelException(HoleException):
    message = "No missing pixel in the image."


class DegenerateWeightException(HoleException):
    """
    Raised when the weights contributing to a pixel sum to zero,
    so its value can't be interpolated.

    Args:
        pixel (Pixel): the pixel that couldn't be filled
    """

    def __init__(self, pixel, message=None):
        self.pixel = pixel
        if message is None:
            message = f"Degenerate weights while filling pixel {pixel}."
        super().__init__(message)
