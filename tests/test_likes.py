from sqlalchemy import event

from conftest import trip_payload

from database import SessionLocal
from models.CommentLike import CommentLike
from models.Comment import Comment
from models.TripLike import TripLike
from services.likes import toggle_like


def test_toggle_twice_restores_state(client, alice, bob, make_trip, db_session):
    trip = make_trip(alice)
    client.post(f"/trips/{trip['id']}/like", headers=alice["headers"])
    user_id = bob["user"]["id"]

    assert toggle_like(db_session, TripLike, TripLike.trip_id, trip["id"], user_id) == (True, 2)
    assert toggle_like(db_session, TripLike, TripLike.trip_id, trip["id"], user_id) == (False, 1)
    assert db_session.query(TripLike).filter(TripLike.user_id == user_id).count() == 0


def test_toggle_on_comment(client, alice, bob, make_trip, db_session):
    trip = make_trip(alice)
    comment = client.post("/comments", json={"content": "Hi", "trip": trip["id"]},
                          headers=bob["headers"]).json()["comment"]

    is_liked, count = toggle_like(db_session, CommentLike, CommentLike.comment_id, comment["id"], alice["user"]["id"])
    assert (is_liked, count) == (True, 1)
    assert db_session.get(Comment, comment["id"]).like_count == 1


def test_likes_are_independent_per_entity(client, alice, make_trip, db_session):
    first = make_trip(alice)
    second = client.post("/trips", json=trip_payload(title="Second"), headers=alice["headers"]).json()["trip"]
    user_id = alice["user"]["id"]

    toggle_like(db_session, TripLike, TripLike.trip_id, first["id"], user_id)
    assert toggle_like(db_session, TripLike, TripLike.trip_id, second["id"], user_id) == (True, 1)


def test_concurrent_insert_counts_as_liked(client, alice, make_trip, db_session):
    trip = make_trip(alice)
    user_id = alice["user"]["id"]

    def insert_same_like_first(session, flush_context, instances):
        # another request by the same user wins the race to insert
        other = SessionLocal()
        try:
            other.add(TripLike(trip_id=trip["id"], user_id=user_id))
            other.commit()
        finally:
            other.close()

    event.listen(db_session, "before_flush", insert_same_like_first, once=True)

    assert toggle_like(db_session, TripLike, TripLike.trip_id, trip["id"], user_id) == (True, 1)
    assert db_session.query(TripLike).filter(TripLike.trip_id == trip["id"]).count() == 1
