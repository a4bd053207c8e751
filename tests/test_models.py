from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pydantic import ValidationError

from leaderboard.models import ScoreCreate, ScoreRecord, ScoreUpdate, parse_limit


class TestScoreCreate:
    def test_trims_name(self):
        data = ScoreCreate(name="  Ann  ", score=50)
        assert data.name == "Ann"
        assert data.score == 50

    @pytest.mark.parametrize("name", ["", "   ", "x" * 51])
    def test_rejects_bad_names(self, name):
        with pytest.raises(ValidationError):
            ScoreCreate(name=name, score=1)

    def test_name_length_counts_after_trimming(self):
        assert ScoreCreate(name=" " + "x" * 50 + " ", score=1).name == "x" * 50

    @pytest.mark.parametrize("score", [-1, 1_000_001, 1.5, "10", True, None])
    def test_rejects_bad_scores(self, score):
        with pytest.raises(ValidationError):
            ScoreCreate(name="Ann", score=score)

    @pytest.mark.parametrize("score", [0, 1_000_000])
    def test_accepts_bounds(self, score):
        assert ScoreCreate(name="Ann", score=score).score == score


class TestScoreUpdate:
    def test_changes_only_contains_present_fields(self):
        assert ScoreUpdate(score=7).changes() == {"score": 7}
        assert ScoreUpdate(name=" Bo ").changes() == {"name": "Bo"}
        assert ScoreUpdate(name="Bo", score=0).changes() == {"name": "Bo", "score": 0}

    def test_requires_at_least_one_field(self):
        with pytest.raises(ValidationError, match="At least one of name or score is required"):
            ScoreUpdate()

    def test_unknown_fields_do_not_count(self):
        with pytest.raises(ValidationError):
            ScoreUpdate.model_validate({"rank": 1})

    def test_explicit_null_is_rejected(self):
        with pytest.raises(ValidationError):
            ScoreUpdate.model_validate({"name": None, "score": 3})

    def test_out_of_range_score(self):
        with pytest.raises(ValidationError):
            ScoreUpdate(score=2_000_000)


@pytest.mark.parametrize("raw, expected", [
    (None, 10),
    ("", 10),
    ("abc", 10),
    ("5", 5),
    ("0", 1),
    ("-3", 1),
    ("100", 100),
    ("500", 100),
])
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


class TestScoreRecord:
    def test_to_dict_uses_wire_names(self):
        rec = ScoreRecord.new("Ann", 50)
        data = rec.to_dict()
        assert set(data) == {"id", "name", "score", "createdAt", "updatedAt"}
        assert data["createdAt"] == data["updatedAt"]

    def test_merged_keeps_identity_and_refreshes_updated_at(self):
        created = datetime.now(timezone.utc) - timedelta(minutes=5)
        rec = ScoreRecord("abc", "Ann", 50, created, created)
        updated = rec.merged({"score": 60})
        assert updated.id == "abc"
        assert updated.name == "Ann"
        assert updated.score == 60
        assert updated.created_at == created
        assert updated.updated_at > created

    def test_from_document_treats_naive_datetimes_as_utc(self):
        oid = ObjectId()
        naive = datetime(2024, 1, 1, 12, 0, 0)
        rec = ScoreRecord.from_document({"_id": oid, "name": "Bo", "score": 3, "createdAt": naive, "updatedAt": naive})
        assert rec.id == str(oid)
        assert rec.created_at.tzinfo is timezone.utc
