from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session


def _url(item, content_type, suffix):
    return f"/api/v1/content/{content_type}/{item.id}/{suffix}"


def test_like_is_idempotent(client, alice, auth_headers, make_post):
    ad = make_post("ad", alice)
    headers = auth_headers(alice)

    client.post(_url(ad, "ad", "like"), headers=headers)
    response = client.post(_url(ad, "ad", "like"), headers=headers)

    assert response.status_code == 200
    assert response.json() == {"likes": 1, "comments": 0, "is_liked": True}


def test_unlike(client, alice, bob, auth_headers, make_post):
    survey = make_post("survey", alice)
    client.post(_url(survey, "survey", "like"), headers=auth_headers(alice))
    client.post(_url(survey, "survey", "like"), headers=auth_headers(bob))

    response = client.delete(_url(survey, "survey", "like"), headers=auth_headers(bob))

    assert response.json() == {"likes": 1, "comments": 0, "is_liked": False}


def test_engagement_for_anonymous_reader(client, alice, auth_headers, make_post):
    remix = make_post("remix", alice)
    client.post(_url(remix, "remix", "like"), headers=auth_headers(alice))

    response = client.get(_url(remix, "remix", "engagement"))

    assert response.json() == {"likes": 1, "comments": 0, "is_liked": False}


def test_like_requires_login(client, alice, make_post):
    ad = make_post("ad", alice)

    assert client.post(_url(ad, "ad", "like")).status_code == 401


def test_likes_are_counted_per_content_type(client, alice, auth_headers, make_post):
    ad = make_post("ad", alice)
    survey = make_post("survey", alice)
    client.post(_url(ad, "ad", "like"), headers=auth_headers(alice))

    assert client.get(_url(survey, "survey", "engagement")).json()["likes"] == 0


def test_comments_newest_first(client, alice, bob, auth_headers, make_post):
    ad = make_post("ad", alice)
    first = client.post(_url(ad, "ad", "comments"), json={"text": " First! "}, headers=auth_headers(alice))
    assert first.status_code == 201
    assert first.json()["text"] == "First!"
    assert first.json()["profile"]["display_name"] == "Alice"
    client.post(_url(ad, "ad", "comments"), json={"text": "Second"}, headers=auth_headers(bob))

    comments = client.get(_url(ad, "ad", "comments")).json()

    assert len(comments) == 2
    assert client.get(_url(ad, "ad", "engagement")).json()["comments"] == 2


def test_comment_length_is_checked(client, alice, auth_headers, make_post):
    ad = make_post("ad", alice)
    headers = auth_headers(alice)

    assert client.post(_url(ad, "ad", "comments"), json={"text": "   "}, headers=headers).status_code == 422
    assert client.post(_url(ad, "ad", "comments"), json={"text": "x" * 401}, headers=headers).status_code == 422
    assert client.post(_url(ad, "ad", "comments"), json={"text": "x" * 400}, headers=headers).status_code == 201


def test_review_once_per_ad(client, alice, bob, auth_headers, make_post):
    ad = make_post("ad", alice)
    headers = auth_headers(bob)

    response = client.post(f"/api/v1/ads/{ad.id}/reviews", json={"rating": 4, "text": "Good"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["user"] == "Bob"
    assert response.json()["rating"] == 4

    again = client.post(f"/api/v1/ads/{ad.id}/reviews", json={"rating": 1, "text": "Changed my mind"}, headers=headers)
    assert again.status_code == 409


def test_review_rating_range(client, alice, auth_headers, make_post):
    ad = make_post("ad", alice)

    response = client.post(f"/api/v1/ads/{ad.id}/reviews", json={"rating": 6, "text": "Wow"}, headers=auth_headers(alice))

    assert response.status_code == 422


def test_review_only_for_ads(client, alice, auth_headers, make_post):
    survey = make_post("survey", alice)

    response = client.post(f"/api/v1/ads/{survey.id}/reviews", json={"text": "Hm"}, headers=auth_headers(alice))

    assert response.status_code == 404


def test_like_storage_failure_is_503(client, alice, auth_headers, make_post, monkeypatch):
    ad = make_post("ad", alice)
    headers = auth_headers(alice)

    def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "commit", failing_commit)
    response = client.post(_url(ad, "ad", "like"), headers=headers)
    monkeypatch.undo()

    assert response.status_code == 503
    assert client.get(_url(ad, "ad", "engagement")).json()["likes"] == 0
