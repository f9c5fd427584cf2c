from datetime import datetime

import pytest
from sqlalchemy import event

from database import engine
from models.Comment import Comment
from models.CommentLike import CommentLike


def post_comment(client, user, trip_id, content, parent=None, **extra):
    body = {"content": content, "trip": trip_id, **extra}
    if parent is not None:
        body["parentComment"] = parent
    resp = client.post("/comments", json=body, headers=user["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()["comment"]


@pytest.fixture
def trip(alice, make_trip):
    return make_trip(alice)


def test_create_comment(client, bob, trip):
    resp = client.post("/comments", json={
        "content": "  How much was the bus pass?  ",
        "trip": trip["id"],
        "type": "question",
    }, headers=bob["headers"])
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Comment created successfully"
    comment = body["comment"]
    assert comment["content"] == "How much was the bus pass?"
    assert comment["type"] == "question"
    assert comment["trip"] == trip["id"]
    assert comment["parentComment"] is None
    assert comment["author"]["username"] == "bob"
    assert comment["isEdited"] is False
    assert comment["likeCount"] == 0


def test_create_comment_validation(client, bob, trip):
    resp = client.post("/comments", json={"content": "   ", "trip": trip["id"], "type": "rant"},
                       headers=bob["headers"])
    assert resp.status_code == 400
    by_field = {err["field"]: err["message"] for err in resp.json()["errors"]}
    assert by_field["content"] == "Comment content is required"
    assert "type" in by_field

    resp = client.post("/comments", json={"content": "x" * 1001, "trip": trip["id"]}, headers=bob["headers"])
    assert resp.json()["errors"][0]["message"] == "Comment cannot exceed 1000 characters"


def test_create_comment_on_missing_trip(client, bob):
    resp = client.post("/comments", json={"content": "Hi", "trip": 12345}, headers=bob["headers"])
    assert resp.status_code == 404
    assert resp.json() == {"message": "Trip not found"}


def test_create_comment_requires_auth(client, trip):
    resp = client.post("/comments", json={"content": "Hi", "trip": trip["id"]})
    assert resp.status_code == 401


def test_reply_to_missing_parent(client, bob, trip):
    resp = client.post("/comments", json={"content": "Hi", "trip": trip["id"], "parentComment": 999},
                       headers=bob["headers"])
    assert resp.status_code == 404
    assert resp.json() == {"message": "Parent comment not found"}


def test_reply_to_reply_is_rejected(client, alice, bob, trip):
    top = post_comment(client, bob, trip["id"], "Question")
    reply = post_comment(client, alice, trip["id"], "Answer", parent=top["id"])

    resp = client.post("/comments", json={
        "content": "Follow-up", "trip": trip["id"], "parentComment": reply["id"],
    }, headers=bob["headers"])
    assert resp.status_code == 400
    assert resp.json() == {"message": "Replies can only be added to top-level comments"}


def test_reply_must_stay_on_the_same_trip(client, alice, bob, trip, make_trip):
    other = make_trip(alice, title="Elsewhere")
    top = post_comment(client, bob, trip["id"], "Question")
    resp = client.post("/comments", json={
        "content": "Wrong thread", "trip": other["id"], "parentComment": top["id"],
    }, headers=bob["headers"])
    assert resp.status_code == 400
    assert resp.json() == {"message": "Parent comment belongs to a different trip"}


def test_threads_order(client, alice, bob, trip):
    c1 = post_comment(client, bob, trip["id"], "C1")
    c2 = post_comment(client, alice, trip["id"], "C2")
    r1 = post_comment(client, alice, trip["id"], "R1", parent=c1["id"])
    r2 = post_comment(client, bob, trip["id"], "R2", parent=c1["id"])

    threads = client.get(f"/comments/trip/{trip['id']}").json()
    assert [c["id"] for c in threads] == [c2["id"], c1["id"]]
    assert threads[0]["replies"] == []
    assert [r["id"] for r in threads[1]["replies"]] == [r1["id"], r2["id"]]
    assert all("replies" not in r for r in threads[1]["replies"])


def test_threads_without_viewer_omit_flags(client, alice, bob, trip):
    c1 = post_comment(client, bob, trip["id"], "C1")
    post_comment(client, alice, trip["id"], "R1", parent=c1["id"])

    threads = client.get(f"/comments/trip/{trip['id']}").json()
    for comment in [threads[0], *threads[0]["replies"]]:
        assert "isLikedByUser" not in comment
        assert "isOwner" not in comment


def test_threads_with_viewer_flags(client, alice, bob, trip):
    c1 = post_comment(client, bob, trip["id"], "C1")
    r1 = post_comment(client, alice, trip["id"], "R1", parent=c1["id"])
    client.post(f"/comments/{c1['id']}/like", headers=alice["headers"])

    threads = client.get(f"/comments/trip/{trip['id']}", headers=alice["headers"]).json()
    top = threads[0]
    assert top["isLikedByUser"] is True
    assert top["isOwner"] is False
    assert top["likeCount"] == 1
    reply = top["replies"][0]
    assert reply["id"] == r1["id"]
    assert reply["isLikedByUser"] is False
    assert reply["isOwner"] is True


def test_threads_with_invalid_token_fall_back_to_anonymous(client, bob, trip):
    post_comment(client, bob, trip["id"], "C1")
    resp = client.get(f"/comments/trip/{trip['id']}", headers={"Authorization": "Bearer expired-or-bad"})
    assert resp.status_code == 200
    assert "isOwner" not in resp.json()[0]


def test_threads_for_missing_trip_skip_comment_queries(client):
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    try:
        resp = client.get("/comments/trip/4242")
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    assert resp.status_code == 404
    assert resp.json() == {"message": "Trip not found"}
    assert statements
    assert not any("FROM comments" in s for s in statements)


def test_edit_comment(client, bob, trip):
    comment = post_comment(client, bob, trip["id"], "Frist")
    resp = client.put(f"/comments/{comment['id']}", json={"content": "First"}, headers=bob["headers"])
    assert resp.status_code == 200
    assert resp.json()["message"] == "Comment updated successfully"
    edited = resp.json()["comment"]
    assert edited["content"] == "First"
    assert edited["isEdited"] is True
    assert datetime.fromisoformat(edited["updatedAt"]) > datetime.fromisoformat(edited["createdAt"])


def test_saving_same_content_is_not_an_edit(client, bob, trip):
    comment = post_comment(client, bob, trip["id"], "Same")
    edited = client.put(f"/comments/{comment['id']}", json={"content": "Same"}, headers=bob["headers"]).json()
    assert edited["comment"]["isEdited"] is False
    assert edited["comment"]["updatedAt"] == comment["updatedAt"]


def test_edit_comment_by_non_owner(client, alice, bob, trip):
    comment = post_comment(client, bob, trip["id"], "Mine")
    resp = client.put(f"/comments/{comment['id']}", json={"content": "Hijacked"}, headers=alice["headers"])
    assert resp.status_code == 403
    assert resp.json() == {"message": "Not authorized to update this comment"}


def test_edit_missing_comment(client, bob):
    resp = client.put("/comments/31337", json={"content": "?"}, headers=bob["headers"])
    assert resp.status_code == 404
    assert resp.json() == {"message": "Comment not found"}


def test_delete_comment_cascades_to_replies(client, alice, bob, trip, db_session):
    top = post_comment(client, bob, trip["id"], "Top")
    # replies by someone else go too
    reply = post_comment(client, alice, trip["id"], "Reply", parent=top["id"])
    client.post(f"/comments/{reply['id']}/like", headers=bob["headers"])
    other = post_comment(client, alice, trip["id"], "Unrelated")

    resp = client.delete(f"/comments/{top['id']}", headers=bob["headers"])
    assert resp.status_code == 200
    assert resp.json() == {"message": "Comment deleted successfully"}

    remaining = {c.id for c in db_session.query(Comment).all()}
    assert remaining == {other["id"]}
    assert db_session.query(CommentLike).count() == 0


def test_delete_reply_leaves_parent(client, alice, bob, trip):
    top = post_comment(client, bob, trip["id"], "Top")
    reply = post_comment(client, alice, trip["id"], "Reply", parent=top["id"])

    assert client.delete(f"/comments/{reply['id']}", headers=alice["headers"]).status_code == 200
    threads = client.get(f"/comments/trip/{trip['id']}").json()
    assert [c["id"] for c in threads] == [top["id"]]
    assert threads[0]["replies"] == []


def test_delete_comment_by_non_author(client, alice, bob, trip, db_session):
    top = post_comment(client, bob, trip["id"], "Top")
    post_comment(client, alice, trip["id"], "Reply", parent=top["id"])

    resp = client.delete(f"/comments/{top['id']}", headers=alice["headers"])
    assert resp.status_code == 403
    assert resp.json() == {"message": "Not authorized to delete this comment"}
    assert db_session.query(Comment).count() == 2


def test_delete_missing_comment(client, bob):
    resp = client.delete("/comments/777", headers=bob["headers"])
    assert resp.status_code == 404


def test_like_comment_toggles(client, alice, bob, trip):
    comment = post_comment(client, bob, trip["id"], "Like me")

    first = client.post(f"/comments/{comment['id']}/like", headers=alice["headers"])
    assert first.json() == {"message": "Comment liked", "likeCount": 1, "isLiked": True}
    second = client.post(f"/comments/{comment['id']}/like", headers=alice["headers"])
    assert second.json() == {"message": "Comment unliked", "likeCount": 0, "isLiked": False}


def test_like_missing_comment(client, alice):
    resp = client.post("/comments/5/like", headers=alice["headers"])
    assert resp.status_code == 404
    assert resp.json() == {"message": "Comment not found"}
