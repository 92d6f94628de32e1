import uuid

from usbest.models.engagement import Review


def test_create_ad(client, alice, auth_headers):
    payload = {
        "title": "  Summer sneakers ",
        "description": "Light and bright",
        "brand": "Stride",
        "shop_url": "https://shop.stride.example/sneakers",
    }

    response = client.post("/api/v1/ads", json=payload, headers=auth_headers(alice))

    assert response.status_code == 201
    data = response.json()
    assert data["content_type"] == "ad"

    detail = client.get(f"/api/v1/content/ad/{data['id']}").json()
    assert detail["title"] == "Summer sneakers"
    assert detail["shop_url"] == "https://shop.stride.example/sneakers"


def test_create_ad_rejects_non_http_shop_url(client, alice, auth_headers):
    payload = {"title": "Ad", "description": "Desc", "shop_url": "javascript:alert(1)"}

    response = client.post("/api/v1/ads", json=payload, headers=auth_headers(alice))

    assert response.status_code == 422


def test_create_post_requires_login(client):
    response = client.post("/api/v1/ads", json={"title": "Ad", "description": "Desc"})

    assert response.status_code == 401


def test_create_remix_of_missing_ad(client, alice, auth_headers):
    payload = {"title": "Remix", "description": "Desc", "ad_id": str(uuid.uuid4())}

    response = client.post("/api/v1/remixes", json=payload, headers=auth_headers(alice))

    assert response.status_code == 400


def test_create_survey_drops_blank_options(client, alice, auth_headers):
    payload = {
        "title": "Taste test",
        "description": "Pick one",
        "questions": [{"question": "Flavour?", "options": ["Mint", " ", "Lime"]}],
    }

    response = client.post("/api/v1/surveys", json=payload, headers=auth_headers(alice))

    assert response.status_code == 201
    detail = client.get(f"/api/v1/content/survey/{response.json()['id']}").json()
    assert detail["questions"] == [{"question": "Flavour?", "options": ["Mint", "Lime"]}]


def test_create_survey_needs_a_question(client, alice, auth_headers):
    payload = {"title": "Empty", "description": "Nothing to ask", "questions": []}

    response = client.post("/api/v1/surveys", json=payload, headers=auth_headers(alice))

    assert response.status_code == 422


def test_feed_is_newest_first_across_types(client, alice, make_post):
    ad = make_post("ad", alice, minutes=1)
    survey = make_post("survey", alice, minutes=3)
    remix = make_post("remix", alice, minutes=2, ad_id=ad.id)

    response = client.get("/api/v1/feed")

    assert response.status_code == 200
    items = response.json()["items"]
    assert [(i["content_type"], i["id"]) for i in items] == [
        ("survey", str(survey.id)),
        ("remix", str(remix.id)),
        ("ad", str(ad.id)),
    ]
    assert items[0]["likes"] == 0
    assert items[0]["is_liked"] is False


def test_feed_pagination(client, alice, make_post):
    for minute in range(5):
        make_post("ad", alice, minutes=minute, title=f"Ad {minute}")

    first = client.get("/api/v1/feed", params={"limit": 2}).json()
    second = client.get("/api/v1/feed", params={"limit": 2, "offset": 2}).json()

    assert [i["title"] for i in first["items"]] == ["Ad 4", "Ad 3"]
    assert [i["title"] for i in second["items"]] == ["Ad 2", "Ad 1"]
    assert second["offset"] == 2


def test_feed_limit_is_bounded(client):
    assert client.get("/api/v1/feed", params={"limit": 101}).status_code == 422
    assert client.get("/api/v1/feed").json()["limit"] == 20


def test_ad_detail_with_reviews(client, db, alice, bob, make_post):
    ad = make_post("ad", alice)
    db.add_all([
        Review(ad_id=ad.id, user_id=alice.id, rating=5, text="Love it"),
        Review(ad_id=ad.id, user_id=bob.id, rating=4, text="Nice"),
    ])
    db.commit()

    detail = client.get(f"/api/v1/content/ad/{ad.id}").json()

    assert len(detail["reviews"]) == 2
    assert {r["user"] for r in detail["reviews"]} == {"Alice", "Bob"}
    assert detail["average_rating"] == 4.5
    assert detail["questions"] is None


def test_remix_detail_names_the_original_ad(client, alice, make_post):
    ad = make_post("ad", alice, title="Original", brand="Stride")
    remix = make_post("remix", alice, ad_id=ad.id)

    detail = client.get(f"/api/v1/content/remix/{remix.id}").json()

    assert detail["remix_parent_id"] == str(ad.id)
    assert detail["remix_parent_title"] == "Original"
    assert detail["brand"] == "Stride"


def test_unknown_content(client):
    assert client.get(f"/api/v1/content/ad/{uuid.uuid4()}").status_code == 404
    assert client.get(f"/api/v1/content/video/{uuid.uuid4()}").status_code == 404


def test_search_matches_title_or_brand(client, alice, make_post):
    make_post("ad", alice, minutes=1, title="Running shoes", brand="Stride")
    make_post("survey", alice, minutes=2, title="Which STRIDE colour?")
    make_post("remix", alice, minutes=3, title="Cooking remix")

    results = client.get("/api/v1/search", params={"q": "stride"}).json()

    assert [r["title"] for r in results] == ["Which STRIDE colour?", "Running shoes"]


def test_search_without_term_lists_everything(client, alice, make_post):
    make_post("ad", alice, minutes=1)
    make_post("remix", alice, minutes=2)

    results = client.get("/api/v1/search").json()

    assert [r["content_type"] for r in results] == ["remix", "ad"]


def test_title_length_counts_after_trimming(client, alice, auth_headers):
    headers = auth_headers(alice)
    padded = {"title": " " * 10 + "a" * 195, "description": "Desc"}
    too_long = {"title": " " + "a" * 201 + " ", "description": "Desc"}

    created = client.post("/api/v1/ads", json=padded, headers=headers)

    assert created.status_code == 201
    detail = client.get(f"/api/v1/content/ad/{created.json()['id']}").json()
    assert detail["title"] == "a" * 195
    assert client.post("/api/v1/ads", json=too_long, headers=headers).status_code == 422


def test_survey_question_length_counts_after_trimming(client, alice, auth_headers):
    payload = {
        "title": "Long question",
        "description": "Desc",
        "questions": [{"question": "  " + "q" * 500 + "  ", "options": ["A"]}],
    }

    response = client.post("/api/v1/surveys", json=payload, headers=auth_headers(alice))

    assert response.status_code == 201
