"""WhisperLink: share a secret once through a self-destructing link."""

__version__ = "1.0.0"
