from .env import get_env, get_list_env

SECRET_KEY = get_env("SECRET_KEY", "fallback-dev-secret-key")

CONVERSION_API_URL = get_env(
    "CONVERSION_API_URL",
    "https://vortex-mp3-downloader-api-production.up.railway.app/download-mp3",
)

ALLOWED_VIDEO_HOSTS = get_list_env("ALLOWED_VIDEO_HOSTS", ["youtube.com", "youtu.be"])

# Seconds to keep a delivered file around once the response has been handed off
DOWNLOAD_RELEASE_DELAY = float(get_env("DOWNLOAD_RELEASE_DELAY", "0.1"))

# Seconds to wait on the conversion endpoint; converting a long video is slow
CONVERSION_TIMEOUT = float(get_env("CONVERSION_TIMEOUT", "600"))

LOG_LEVEL = get_env("LOG_LEVEL", "INFO")
