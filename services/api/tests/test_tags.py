"""Tests for the tag registry."""

from recipeshare.models import Tag
from recipeshare.schemas import TagIn
from recipeshare.services.tags import _insert_ignoring_conflict, resolve_tag, resolve_tags, search_tags


def test_resolve_is_idempotent(db_session):
    """Resolving the same pair twice gives one tag."""
    first = resolve_tag(db_session, "Vegan", "#00ff00")
    db_session.commit()
    second = resolve_tag(db_session, "Vegan", "#00ff00")

    assert first.id == second.id
    assert db_session.query(Tag).filter_by(name="Vegan", color="#00ff00").count() == 1


def test_same_name_different_color_is_a_different_tag(db_session):
    """Color is part of tag identity."""
    green = resolve_tag(db_session, "Vegan", "#00ff00")
    red = resolve_tag(db_session, "Vegan", "#ff0000")
    assert green.id != red.id
    assert db_session.query(Tag).count() == 2


def test_conflicting_insert_resolves_to_existing_row(db_session):
    """A duplicate insert is ignored, not an error."""
    # Simulates a second writer inserting the same new pair after our lookup missed
    _insert_ignoring_conflict(db_session, "Quick", "#123456")
    _insert_ignoring_conflict(db_session, "Quick", "#123456")
    db_session.commit()

    assert db_session.query(Tag).filter_by(name="Quick").count() == 1
    assert resolve_tag(db_session, "Quick", "#123456").name == "Quick"


def test_resolve_tags_collapses_duplicates(db_session):
    """Duplicate pairs in one request resolve once."""
    tags = resolve_tags(
        db_session,
        [
            TagIn(name="Dessert", color="pink"),
            TagIn(name="Dessert", color="pink"),
            TagIn(name="Dinner", color="blue"),
        ],
    )
    assert [t.name for t in tags] == ["Dessert", "Dinner"]
    assert db_session.query(Tag).count() == 2


def test_search_tags_is_case_insensitive_substring(db_session):
    """Tag search is a case-insensitive substring match."""
    for name in ("Chocolate", "Hot Drinks", "Soup"):
        resolve_tag(db_session, name, "brown")
    db_session.commit()

    assert [t.name for t in search_tags(db_session, "CHOC")] == ["Chocolate"]
    assert len(search_tags(db_session, "")) == 3
    assert search_tags(db_session, "%") == []


def test_tags_endpoint(client, db_session):
    """Tags endpoint returns matches sorted by name."""
    resolve_tag(db_session, "Breakfast", "yellow")
    resolve_tag(db_session, "Brunch", "orange")
    db_session.commit()

    response = client.get("/api/tags?q=br")
    assert response.status_code == 200
    data = response.json()
    assert [t["name"] for t in data] == ["Breakfast", "Brunch"]
    assert set(data[0]) == {"id", "name", "color"}
