"""Application constants."""

USER_AGENT = "dustwatch/0.3 (+dust storm risk monitor)"
FORECAST_ENDPOINT = "https://api.open-meteo.com/v1/forecast"
AIR_QUALITY_ENDPOINT = "https://air-quality-api.open-meteo.com/v1/air-quality"
FORECAST_HOURLY_FIELDS = ("windspeed_10m", "winddirection_10m", "relativehumidity_2m")
AIR_QUALITY_HOURLY_FIELDS = ("pm10", "dust")
SERIES_HORIZON = 12
POLL_INTERVAL_SECONDS = 60
GLOBAL_GROUP = "Global"
RISK_HIGH = "High"
RISK_MEDIUM = "Medium"
RISK_LOW = "Low"
RISK_TIERS = (RISK_HIGH, RISK_MEDIUM, RISK_LOW)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "cycle_id",
    "stage",
    "location",
    "source",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
