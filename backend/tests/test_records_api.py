"""
Tests for the game record store (record_service.py + records API).

Uses a separate SQLite test database via dependency override.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from reaction_race.database import get_db, Base
from reaction_race.models.game_record import GameRecord
from reaction_race.services import record_service

# Create test database
TEST_DATABASE_URL = "sqlite:///./test_records.db"
engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    """Set up test database before each test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Database session on the test database."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Create FastAPI test client bound to the test database."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


class TestRecordService:
    """Test record_service functions directly."""

    def test_save_game_record(self, db):
        """Test saving strips names and assigns an id."""
        record = record_service.save_game_record(db, "game_1", "  Alice ", 42, 180.5)

        assert record.id is not None
        assert record.player_name == "Alice"
        assert record.score == 42
        assert record.reaction_time == 180.5
        assert record.created_at is not None

    def test_save_without_reaction_time(self, db):
        """Test reaction time is optional."""
        record = record_service.save_game_record(db, "game_1", "Bob", -5)

        assert record.reaction_time is None
        assert record.score == -5

    @pytest.mark.parametrize("name", ["", "   ", "x" * 51])
    def test_invalid_player_name(self, db, name):
        """Test name validation."""
        with pytest.raises(ValueError):
            record_service.save_game_record(db, "game_1", name, 10)

    def test_negative_reaction_time(self, db):
        """Test negative reaction times are rejected."""
        with pytest.raises(ValueError):
            record_service.save_game_record(db, "game_1", "Alice", 10, -1.0)

    def test_leaderboard_order_and_limit(self, db):
        """Test leaderboard is sorted by score and truncated."""
        for name, score in [("A", 10), ("B", 40), ("C", 25), ("D", -5)]:
            record_service.save_game_record(db, "game_1", name, score)

        top = record_service.get_leaderboard(db, limit=3)

        assert [r.player_name for r in top] == ["B", "C", "A"]

    def test_player_history_newest_first(self, db):
        """Test history filters by player and orders newest first."""
        record_service.save_game_record(db, "game_1", "Alice", 10)
        record_service.save_game_record(db, "game_2", "Bob", 20)
        record_service.save_game_record(db, "game_3", "Alice", 30)

        history = record_service.get_player_history(db, "Alice")

        assert [r.game_id for r in history] == ["game_3", "game_1"]

    def test_stats(self, db):
        """Test totals count records and distinct players."""
        assert record_service.get_stats(db) == (0, 0)

        record_service.save_game_record(db, "game_1", "Alice", 10)
        record_service.save_game_record(db, "game_2", "Alice", 20)
        record_service.save_game_record(db, "game_2", "Bob", 5)

        assert record_service.get_stats(db) == (3, 2)

    @pytest.mark.parametrize("reaction_time", [float("nan"), float("inf")])
    def test_non_finite_reaction_time(self, db, reaction_time):
        """Test NaN and infinite reaction times are rejected."""
        with pytest.raises(ValueError):
            record_service.save_game_record(db, "game_1", "Alice", 10, reaction_time)

        assert record_service.get_stats(db) == (0, 0)

    def test_clamp_limit(self):
        """Test limits are clamped into range."""
        assert record_service.clamp_limit(None) == 10
        assert record_service.clamp_limit(0) == 1
        assert record_service.clamp_limit(5000) == 100


class TestRecordsAPI:
    """Test record endpoints."""

    def test_save_record(self, client):
        """Test POST /api/database/save."""
        response = client.post(
            "/api/database/save",
            json={"game_id": "game_1", "player_name": "Alice", "score": 25, "reaction_time": 150.0}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["player_name"] == "Alice"
        assert data["score"] == 25
        assert data["reaction_time"] == 150.0
        assert "created_at" in data

    def test_save_record_invalid(self, client):
        """Test validation failures give 400."""
        response = client.post(
            "/api/database/save",
            json={"game_id": "game_1", "player_name": "   ", "score": 25}
        )

        assert response.status_code == 400

    def test_save_record_non_finite_time(self, client):
        """Test a NaN reaction time is rejected by validation."""
        response = client.post(
            "/api/database/save",
            content='{"game_id": "game_1", "player_name": "Alice", "score": 5, "reaction_time": NaN}',
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 422

    @pytest.mark.parametrize("path", ["/api/leaderboard", "/api/database/player/Alice"])
    def test_limit_above_cap_rejected(self, client, path):
        """Test limits above the cap give 422 instead of being clamped."""
        assert client.get(path, params={"limit": 1000}).status_code == 422
        assert client.get(path, params={"limit": 100}).status_code == 200

    def test_save_record_missing_fields(self, client):
        """Test schema failures give 422."""
        response = client.post("/api/database/save", json={"game_id": "game_1"})

        assert response.status_code == 422

    def test_leaderboard(self, client):
        """Test GET /api/leaderboard."""
        for name, score in [("A", 5), ("B", 50), ("C", 20)]:
            client.post("/api/database/save", json={"game_id": "g", "player_name": name, "score": score})

        response = client.get("/api/leaderboard", params={"limit": 2})

        assert response.status_code == 200
        assert [r["player_name"] for r in response.json()] == ["B", "C"]

    def test_player_history(self, client):
        """Test GET /api/database/player/{name}."""
        client.post("/api/database/save", json={"game_id": "g1", "player_name": "Alice", "score": 5})
        client.post("/api/database/save", json={"game_id": "g2", "player_name": "Bob", "score": 7})

        response = client.get("/api/database/player/Alice")

        assert response.status_code == 200
        assert [r["game_id"] for r in response.json()] == ["g1"]

    def test_player_history_unknown(self, client):
        """Test unknown players have an empty history."""
        response = client.get("/api/database/player/Nobody")

        assert response.status_code == 200
        assert response.json() == []

    def test_stats(self, client):
        """Test GET /api/database/stats."""
        client.post("/api/database/save", json={"game_id": "g1", "player_name": "Alice", "score": 5})

        response = client.get("/api/database/stats")

        assert response.status_code == 200
        assert response.json() == {"total_records": 1, "total_players": 1, "status": "connected"}

    def test_archive_finished_game(self, client):
        """Test archiving every player's final score after a game."""
        game = client.post(
            "/api/racing/create",
            json={"player_count": 2, "round_count": 1, "player_names": ["Alice", "Bob"]}
        ).json()
        game_id = game["game_id"]
        client.post(f"/api/racing/trigger/{game_id}")
        client.post("/api/racing/react", json={"game_id": game_id, "player_id": 1, "reaction_time": 150.0})
        client.post(f"/api/racing/finish/{game_id}")

        status = client.get(f"/api/racing/status/{game_id}").json()
        for player in status["players"]:
            client.post(
                "/api/database/save",
                json={"game_id": game_id, "player_name": player["name"], "score": player["score"]}
            )

        top = client.get("/api/leaderboard").json()
        assert [(r["player_name"], r["score"]) for r in top] == [("Alice", 25), ("Bob", 0)]


def test_game_record_repr():
    """Test GameRecord repr."""
    record = GameRecord(id=1, game_id="g", player_name="Alice", score=3)
    assert repr(record) == "<GameRecord(id=1, player_name='Alice', score=3)>"
