from authlib.integrations.starlette_client import OAuth

from .env import get_or_raise_env

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

oauth = OAuth()
oauth.register(
    name="google",
    client_id=get_or_raise_env("GOOGLE_CLIENT_ID"),
    client_secret=get_or_raise_env("GOOGLE_CLIENT_SECRET"),
    server_metadata_url=GOOGLE_METADATA_URL,
    client_kwargs={"scope": "openid email profile"},
)
