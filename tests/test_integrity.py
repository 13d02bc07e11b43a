from sqlmodel import select

from models import Like, Post
from services.integrity import remove_orphans
from core.tasks import reconcile_integrity


def test_remove_orphans_deletes_posts_of_missing_authors(db_session, make_user, make_post):
    author = make_user("author")
    fan = make_user("fan")
    kept = make_post(author_id=author.id)
    orphan = make_post(author_id="deleted-user")
    anonymous = make_post(author_id=None)
    db_session.add(Like(post_id=orphan.id, user_id=fan.id))
    db_session.commit()

    report = remove_orphans(db_session)

    assert report.posts_removed == 1
    assert report.likes_removed == 1
    remaining = {post.id for post in db_session.exec(select(Post)).all()}
    assert remaining == {kept.id, anonymous.id}
    assert db_session.exec(select(Like)).all() == []


def test_remove_orphans_deletes_dangling_likes(db_session, make_user, make_post):
    author = make_user("author")
    fan = make_user("fan")
    post = make_post(author_id=author.id)
    db_session.add_all([
        Like(post_id=post.id, user_id=fan.id),
        Like(post_id=post.id, user_id="deleted-user"),
        Like(post_id=9999, user_id=fan.id),
    ])
    db_session.commit()

    report = remove_orphans(db_session)

    assert report.posts_removed == 0
    assert report.likes_removed == 2
    assert [like.user_id for like in db_session.exec(select(Like)).all()] == [fan.id]


def test_remove_orphans_noop(db_session, make_user, make_post):
    make_post(author_id=make_user("author").id)

    report = remove_orphans(db_session)

    assert report.total == 0


def test_reconcile_integrity_uses_own_session(test_db_engine, db_session, make_post):
    make_post(author_id="deleted-user")

    report = reconcile_integrity(test_db_engine)

    assert report.posts_removed == 1


def test_listing_posts_does_not_remove_orphans(client, db_session, make_post):
    orphan = make_post(author_id="deleted-user")

    response = client.get("/api/posts")

    assert [p["id"] for p in response.json()] == [orphan.id]
    db_session.expire_all()
    assert db_session.get(Post, orphan.id) is not None
