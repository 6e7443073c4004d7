from .config import AppConfig, load_config
from .store import InMemoryStore

__all__ = ["AppConfig", "load_config", "InMemoryStore"]
