"""
Reaction Race Server Configuration

This file contains all server-side configurable settings.
Modify these values to tune room limits and scoring.
"""

from dataclasses import dataclass


@dataclass
class ServerConfig:
    """Server networking configuration."""
    HOST: str = "0.0.0.0"
    PORT: int = 8082
    CORS_ORIGINS: tuple = (
        "http://localhost:5173",  # Vite default port
        "http://localhost:3000",  # Alternative React port
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
        "http://localhost:8082",
    )


@dataclass
class GameConfig:
    """Room creation limits and defaults."""
    MIN_PLAYERS: int = 1
    MAX_PLAYERS: int = 8
    MIN_ROUNDS: int = 1
    MAX_ROUNDS: int = 20
    DEFAULT_PLAYERS: int = 2
    DEFAULT_ROUNDS: int = 3

    # Display-only key assigned to each player id (falls back to space)
    INPUT_BINDINGS: dict = None
    DEFAULT_INPUT_BINDING: str = " "
    PLACEHOLDER_NAME: str = "Player {id}"

    def __post_init__(self):
        if self.INPUT_BINDINGS is None:
            self.INPUT_BINDINGS = {
                1: " ",
                2: "Enter",
                3: "a",
                4: "l",
            }


@dataclass
class ScoringConfig:
    """Points awarded per round."""
    FALSE_START_THRESHOLD_MS: float = 100.0  # Faster than this is a false start
    FALSE_START_PENALTY: int = -5
    NO_REACTION_POINTS: int = 0

    # (upper bound in ms, points); the first band whose bound exceeds the time wins
    TIME_BANDS: tuple = (
        (200.0, 15),
        (300.0, 12),
        (400.0, 10),
        (500.0, 8),
    )
    SLOWEST_BAND_POINTS: int = 5

    # Bonus by rank (1st, 2nd, 3rd), everyone ranked below gets the fallback
    RANK_BONUSES: tuple = (10, 7, 5)
    RANK_BONUS_FALLBACK: int = 3


@dataclass
class RecordConfig:
    """Game record query limits."""
    DEFAULT_LIMIT: int = 10
    MAX_LIMIT: int = 100
    MAX_PLAYER_NAME_LENGTH: int = 50


@dataclass
class DatabaseConfig:
    """Database configuration."""
    ECHO_SQL: bool = False  # Log SQL queries


@dataclass
class Settings:
    """Main settings container."""
    server: ServerConfig = None
    game: GameConfig = None
    scoring: ScoringConfig = None
    records: RecordConfig = None
    database: DatabaseConfig = None

    # Application info
    APP_NAME: str = "ReactionRace"
    VERSION: str = "0.1.0"
    DEBUG: bool = True

    def __post_init__(self):
        self.server = self.server or ServerConfig()
        self.game = self.game or GameConfig()
        self.scoring = self.scoring or ScoringConfig()
        self.records = self.records or RecordConfig()
        self.database = self.database or DatabaseConfig()


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
