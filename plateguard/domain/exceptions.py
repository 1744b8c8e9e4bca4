# plateguard/domain/exceptions.py


class PlateGuardError(Exception):
    """Root of every error raised by the detection pipeline."""


class DeviceEnumerationError(PlateGuardError):
    """The platform refused or failed to list capture devices."""


class CameraAccessError(PlateGuardError):
    """Permission denied or hardware failure while opening a stream."""


class OCREngineInitError(PlateGuardError):
    """The recognition worker could not be constructed."""


class OCRProcessError(PlateGuardError):
    """Recognition failed, timed out, or the engine was terminated."""


class RecordStoreError(PlateGuardError):
    """The configured record database could not be reached."""
