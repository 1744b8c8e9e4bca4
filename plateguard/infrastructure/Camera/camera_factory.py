# plateguard/infrastructure/Camera/camera_factory.py
from plateguard.core.config import settings
from plateguard.domain.Interfaces.camera_platform import ICameraPlatform


def create_camera_platform() -> ICameraPlatform:
    """
    Factory that picks the platform backend (fake files or OpenCV devices).
    """

    # ==========================================================
    # 🧪 1) Fake camera for development and tests
    # ==========================================================
    if settings.use_fake_cam:
        from plateguard.infrastructure.Camera.fake_camera_stream import FakeCameraPlatform
        return FakeCameraPlatform(settings.fake_sources)

    # ==========================================================
    # 📷 2) OpenCV (local USB/V4L2 devices)
    # ==========================================================
    from plateguard.infrastructure.Camera.opencv_camera_platform import OpenCVCameraPlatform
    return OpenCVCameraPlatform(
        max_probe=settings.camera_max_probe,
        first_frame_timeout=settings.camera_first_frame_timeout,
    )
