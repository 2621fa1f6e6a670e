"""Services: secret store and expiry reaper."""

from whisperlink.services.reaper import Reaper
from whisperlink.services.secret_store import SecretStore, generate_secret_id

__all__ = [
    "SecretStore",
    "Reaper",
    "generate_secret_id",
]
