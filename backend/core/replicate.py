from typing import Optional

import replicate

from config.settings import Settings


def create_replicate_client(settings: Settings) -> replicate.Client:
    """
    Build the long-lived Replicate client for the process.

    The client is created even without a token so that a missing credential
    surfaces as an auth failure on the first generation instead of at startup.
    """
    api_token: Optional[str] = settings.REPLICATE_API_TOKEN or None
    return replicate.Client(api_token=api_token)
