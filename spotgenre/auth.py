"""
Spotify OAuth helpers.

Wraps spotipy's SpotifyOAuth for the authorization-code flow, plus the
headless refresh-token path used for scheduled runs.
"""

from __future__ import annotations

import secrets
import string
from typing import Optional, Tuple

import spotipy
from spotipy.cache_handler import CacheFileHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from .config import SCOPES, Settings
from .errors import AuthenticationError
from .logging_utils import get_logger

STATE_LENGTH = 13
_STATE_ALPHABET = string.ascii_lowercase + string.digits


def generate_state(length: int = STATE_LENGTH) -> str:
    """Random lowercase alphanumeric string for the OAuth ``state`` parameter."""
    return "".join(secrets.choice(_STATE_ALPHABET) for _ in range(length))


def build_auth_manager(settings: Settings, state: Optional[str] = None) -> SpotifyOAuth:
    """
    Build the spotipy auth manager for the configured app.

    Args:
        settings: Runtime settings with client credentials
        state: Optional OAuth state to embed in the authorize URL

    Returns:
        SpotifyOAuth instance caching tokens under the data directory
    """
    settings.validate_credentials()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return SpotifyOAuth(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        redirect_uri=settings.redirect_uri,
        scope=SCOPES,
        state=state,
        cache_handler=CacheFileHandler(cache_path=str(settings.token_cache_path)),
        open_browser=False,
    )


def authorize_url(settings: Settings) -> Tuple[str, str]:
    """
    Build the URL the user visits to grant access.

    Returns:
        Tuple of (authorize URL, state). Keep the state to check the callback.
    """
    state = generate_state()
    auth = build_auth_manager(settings, state=state)
    return auth.get_authorize_url(state=state), state


def exchange_code(
    settings: Settings,
    code: Optional[str],
    state: Optional[str] = None,
    expected_state: Optional[str] = None,
    error: Optional[str] = None,
) -> str:
    """
    Exchange an authorization code for an access token.

    The token is written to the token cache so later clients reuse it.

    Args:
        settings: Runtime settings
        code: The ``code`` query parameter from the callback
        state: The ``state`` query parameter from the callback
        expected_state: The state issued with the authorize URL
        error: The ``error`` query parameter from the callback, if present

    Returns:
        The access token

    Raises:
        AuthenticationError: If authorization was denied, the state does not
            match, or the token exchange fails
    """
    if error:
        raise AuthenticationError(f"Authorization failed: {error}")
    if not code:
        raise AuthenticationError("Authorization failed: missing code")
    if expected_state is not None and state != expected_state:
        raise AuthenticationError("Authorization failed: state mismatch")

    auth = build_auth_manager(settings)
    try:
        token = auth.get_access_token(code, as_dict=False, check_cache=False)
    except (SpotifyOauthError, spotipy.SpotifyException) as e:
        get_logger().debug(f"Token exchange failed: {e}")
        raise AuthenticationError("Failed to authenticate with Spotify") from e
    if not token:
        raise AuthenticationError("Failed to authenticate with Spotify")
    return token


def get_spotify_client(settings: Settings) -> spotipy.Spotify:
    """
    Get authenticated Spotify client.

    Uses refresh token if available (for CI/CD), otherwise the cached or
    interactive auth manager.
    """
    if settings.refresh_token:
        auth = build_auth_manager(settings)
        try:
            token_info = auth.refresh_access_token(settings.refresh_token)
        except SpotifyOauthError as e:
            raise AuthenticationError("Failed to authenticate with Spotify") from e
        return spotipy.Spotify(auth=token_info["access_token"])
    return spotipy.Spotify(auth_manager=build_auth_manager(settings))


def clear_token_cache(settings: Settings) -> bool:
    """Delete the cached token. Returns True if a cache file was removed."""
    path = settings.token_cache_path
    if path.exists():
        path.unlink()
        return True
    return False
