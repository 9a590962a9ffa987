from slf_backend.config.settings import settings

__all__ = ["settings"]
