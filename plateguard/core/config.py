import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from dotenv import load_dotenv


# ==========================================================
# 1) Root .env
# ==========================================================
load_dotenv(".env")
DEPLOY_ENV = os.getenv("DEPLOY_ENV", "prod").lower()

# ==========================================================
# 2) Per-environment .env
# ==========================================================
ENV_PATH = f"DevOps/{DEPLOY_ENV}/.env"
load_dotenv(ENV_PATH, override=True)


RESOLUTION_PRESETS = {
    "480p": (640, 480),
    "720p": (1280, 720),
    "1080p": (1920, 1080),
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        extra="allow"
    )

    # =========================
    #  App
    # =========================
    deploy_env: str = Field("prod")
    app_name: str = Field("plateguard")
    app_env: str = Field("prod")
    app_port: int = Field(8000)

    # =========================
    #  OCR
    # =========================
    ocr_engine: str = Field("tesseract")        # tesseract | easyocr
    ocr_lang: str = Field("eng")
    ocr_gpu: bool = Field(False)
    ocr_timeout: float = Field(30.0)            # 0 = no timeout
    ocr_word_min_confidence: float = Field(60.0)
    ocr_min_confidence: float = Field(70.0)
    plate_min_length: int = Field(3)

    # =========================
    #  Camera
    # =========================
    camera_resolution: str = Field("720p")
    camera_max_probe: int = Field(5)
    camera_first_frame_timeout: float = Field(3.0)
    capture_jpeg_quality: int = Field(80)
    use_fake_cam: bool = Field(False)
    fake_cam_sources: str = Field("")          # comma separated image/video paths

    # =========================
    #  Status
    # =========================
    success_revert_seconds: float = Field(2.0)
    error_revert_seconds: float = Field(3.0)

    # =========================
    #  Storage
    # =========================
    auto_save: bool = Field(True)
    storage_backend: str = Field("memory")     # memory | sql
    db_url: str = Field("sqlite:///plateguard.db")

    # =========================
    #  Monitoring
    # =========================
    metrics_port: int = Field(9100)

    @property
    def camera_size(self) -> tuple[int, int]:
        """(width, height) for the configured resolution preset."""
        return RESOLUTION_PRESETS.get(self.camera_resolution.lower(), RESOLUTION_PRESETS["720p"])

    @property
    def fake_sources(self) -> list[str]:
        return [s.strip() for s in self.fake_cam_sources.split(",") if s.strip()]


settings = Settings()
