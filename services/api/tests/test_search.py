"""Tests for recipe listing and search."""

from datetime import datetime, timedelta, timezone

from recipeshare.models import Recipe

from conftest import act_as


def _create(client, name, tags=(), blocks=None):
    payload = {
        "name": name,
        "tags": [{"name": n, "color": c} for n, c in tags],
        "blocks": blocks or [{"type": "TEXT", "text": "step"}],
    }
    response = client.post("/api/recipes", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["id"]


def _names(response):
    assert response.status_code == 200
    return {r["name"] for r in response.json()}


def _tag_id(client, recipe_id, name):
    tags = client.get(f"/api/recipes/{recipe_id}").json()["tags"]
    return next(t["id"] for t in tags if t["name"] == name)


def test_list_all_when_no_filters(client, alice):
    """No filters lists every recipe."""
    act_as(client, alice)
    _create(client, "One")
    _create(client, "Two")

    act_as(client, None)
    assert _names(client.get("/api/recipes")) == {"One", "Two"}
    assert _names(client.get("/api/recipes?q=")) == {"One", "Two"}


def test_query_matches_name_or_tag_case_insensitively(client, alice):
    """Query matches recipe names or tag names, ignoring case."""
    act_as(client, alice)
    _create(client, "Hot Chocolate")
    _create(client, "Brownies", tags=[("chocolate", "brown")])
    _create(client, "Caesar Salad", tags=[("lunch", "green")])

    assert _names(client.get("/api/recipes?q=choco")) == {"Hot Chocolate", "Brownies"}
    assert _names(client.get("/api/recipes?q=CHOCO")) == {"Hot Chocolate", "Brownies"}


def test_query_with_like_wildcards_is_literal(client, alice):
    """A percent sign in the query matches only a literal percent."""
    act_as(client, alice)
    _create(client, "100% Rye")
    _create(client, "Plain Bread")

    assert _names(client.get("/api/recipes?q=%25")) == {"100% Rye"}


def test_recipe_matching_several_tags_is_listed_once(client, alice):
    """Several matching tags do not duplicate the row."""
    act_as(client, alice)
    _create(client, "Trifle", tags=[("cake", "red"), ("cake-ish", "blue")])

    response = client.get("/api/recipes?q=cake")
    assert [r["name"] for r in response.json()] == ["Trifle"]


def test_tag_filter_is_a_conjunction(client, alice):
    """Recipes must carry every requested tag."""
    act_as(client, alice)
    both = _create(client, "Both", tags=[("A", "red"), ("B", "blue")])
    _create(client, "Only A", tags=[("A", "red")])
    _create(client, "Only B", tags=[("B", "blue")])
    a = _tag_id(client, both, "A")
    b = _tag_id(client, both, "B")

    assert _names(client.get(f"/api/recipes?tagIds={a},{b}")) == {"Both"}
    assert _names(client.get(f"/api/recipes?tagIds={a}&tagIds={b}")) == {"Both"}
    assert _names(client.get(f"/api/recipes?tagIds={a}")) == {"Both", "Only A"}


def test_query_and_tag_filter_combine(client, alice):
    """Query and tag filter apply together."""
    act_as(client, alice)
    soup = _create(client, "Tomato Soup", tags=[("Vegan", "green")])
    _create(client, "Tomato Salad", tags=[("Raw", "orange")])
    vegan = _tag_id(client, soup, "Vegan")

    assert _names(client.get(f"/api/recipes?q=tomato&tagIds={vegan}")) == {"Tomato Soup"}


def test_projection_fields_and_first_photo(client, alice):
    """List items carry owner, tags and the first PHOTO block url."""
    act_as(client, alice)
    photo_first = _create(
        client,
        "Photo First",
        tags=[("Dinner", "navy")],
        blocks=[{"type": "PHOTO", "photoUrl": "https://img/1.jpg"}, {"type": "TEXT", "text": "x"}],
    )
    text_first = _create(
        client,
        "Text First",
        blocks=[{"type": "TEXT", "text": "x"}, {"type": "PHOTO", "photoUrl": "https://img/2.jpg"}],
    )

    items = {r["id"]: r for r in client.get("/api/recipes").json()}
    assert items[photo_first]["firstPhotoUrl"] == "https://img/1.jpg"
    assert items[text_first]["firstPhotoUrl"] is None

    item = items[photo_first]
    assert item["ownerId"] == alice.id
    assert item["ownerDisplayName"] == "Alice"
    assert item["tags"][0]["name"] == "Dinner"
    assert item["tags"][0]["color"] == "navy"
    assert "blocks" not in item


def test_most_recently_modified_first(client, alice, db_session):
    """Newest edits come first."""
    act_as(client, alice)
    older = _create(client, "Older")
    newer = _create(client, "Newer")

    base = datetime(2000, 1, 1, tzinfo=timezone.utc)
    db_session.get(Recipe, older).updated_at = base
    db_session.get(Recipe, newer).updated_at = base + timedelta(hours=1)
    db_session.commit()

    assert [r["id"] for r in client.get("/api/recipes").json()] == [newer, older]

    # Editing bumps the recipe back to the top
    client.put(
        f"/api/recipes/{older}",
        json={"name": "Older", "tags": [], "blocks": [{"type": "TEXT", "text": "edited"}]},
    )
    assert [r["id"] for r in client.get("/api/recipes").json()] == [older, newer]
