from pydantic_settings import BaseSettings
import os


class ServerConfig(BaseSettings):
    PORT: int = int(os.getenv('PORT', 4000))
    CORS_ORIGIN: str = os.getenv('CORS_ORIGIN', '*')
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
    service_name: str = 'leaderboard-api'

server = ServerConfig()

class DatabaseConfig(BaseSettings):
    MONGODB_URI: str = os.getenv('MONGODB_URI', 'mongodb://127.0.0.1:27017/leaderboard')
    MONGODB_DB: str = os.getenv('MONGODB_DB', 'leaderboard')
    MONGODB_COLLECTION: str = os.getenv('MONGODB_COLLECTION', 'scores')
    MONGODB_TIMEOUT_MS: int = int(os.getenv('MONGODB_TIMEOUT_MS', 2000))
    MONGODB_HEARTBEAT_SECONDS: float = float(os.getenv('MONGODB_HEARTBEAT_SECONDS', 5))
    max_retries: int = 3
    retry_delay: int = 1

database = DatabaseConfig()

class ScoreLimits(BaseSettings):
    name_min_length: int = 1
    name_max_length: int = 50
    score_min: int = 0
    score_max: int = 1_000_000
    default_limit: int = 10
    max_limit: int = 100

limits = ScoreLimits()

class ClientConfig(BaseSettings):
    API_BASE_URL: str = os.getenv('API_BASE_URL', 'http://localhost:4000')
    LIST_LIMIT: int = int(os.getenv('LIST_LIMIT', 10))
    PREFS_PATH: str = os.getenv('PREFS_PATH', os.path.join(os.path.expanduser('~'), '.leaderboard', 'prefs.json'))
    request_timeout: float = 5.0
    max_retries: int = 3
    retry_delay: float = 0.5
    health_interval: float = 10.0

client = ClientConfig()
