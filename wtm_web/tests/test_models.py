import pytest

from wtm_web.domain.errors import InvalidInput
from wtm_web.domain.models import Snapshot, YearGroup

SNAPSHOT = {
    "timestamp": "20200315120000",
    "url": "https://acme.example/",
    "statusCode": "200",
    "mimeType": "text/html",
    "archiveUrl": "https://web.archive.org/web/20200315120000/https://acme.example/",
    "formattedDate": "Mar 15, 2020",
    "year": 2020,
    "month": "Mar",
}


def test_snapshot_round_trips_through_json_shape():
    assert Snapshot.from_dict(SNAPSHOT).to_dict() == SNAPSHOT


@pytest.mark.parametrize(
    "override",
    [
        {"year": "2020"},
        {"year": True},
        {"timestamp": 20200315120000},
        {"archiveUrl": None},
    ],
)
def test_snapshot_from_dict_rejects_bad_fields(override):
    with pytest.raises(InvalidInput):
        Snapshot.from_dict({**SNAPSHOT, **override})


def test_snapshot_from_dict_rejects_missing_field():
    raw = dict(SNAPSHOT)
    del raw["mimeType"]
    with pytest.raises(InvalidInput):
        Snapshot.from_dict(raw)


def test_year_group_count_follows_snapshots():
    # a stale count from the client does not survive parsing
    g = YearGroup.from_dict({"year": 2020, "snapshots": [SNAPSHOT, SNAPSHOT], "count": 7})
    assert g.count == 2
    assert g.to_dict()["count"] == 2


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "2020",
        {"year": 2020, "snapshots": [SNAPSHOT]},                      # count missing
        {"year": 2020, "snapshots": SNAPSHOT, "count": 1},            # not a list
        {"year": 2020, "snapshots": [], "count": 0},                  # nothing to pick from
        {"year": 2020.5, "snapshots": [SNAPSHOT], "count": 1},
    ],
)
def test_year_group_from_dict_rejects_malformed(raw):
    with pytest.raises(InvalidInput):
        YearGroup.from_dict(raw)


def test_year_group_from_dict_rejects_snapshots_from_another_year():
    stray = {**SNAPSHOT, "timestamp": "20190315120000", "year": 2019}
    with pytest.raises(InvalidInput):
        YearGroup.from_dict({"year": 2020, "snapshots": [SNAPSHOT, stray], "count": 2})


def test_models_are_immutable():
    snap = Snapshot.from_dict(SNAPSHOT)
    with pytest.raises(AttributeError):
        snap.year = 1999
