import logging

from prometheus_client import Gauge, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

# Detection cycles, by outcome (success or a failure reason)
detections_total = Counter(
    "plate_detections_total",
    "Detection cycles by outcome",
    ["outcome"]
)

# OCR latency
ocr_latency = Histogram(
    "ocr_latency_seconds",
    "Time spent in one recognition call",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0)
)

# Camera stream state (1 = active)
camera_active = Gauge(
    "camera_active",
    "Whether a camera stream is currently open"
)

camera_starts_total = Counter(
    "camera_starts_total",
    "Camera streams successfully opened"
)

camera_errors_total = Counter(
    "camera_errors_total",
    "Camera enumeration or access failures",
    ["kind"]
)

def start_metrics_server(port: int = 9100):
    """Starts the Prometheus metrics server."""
    start_http_server(port)
    logger.info(f"📊 Prometheus metrics available on :{port}")
