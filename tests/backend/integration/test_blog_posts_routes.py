import pytest

from coe_portal.models.blog_post import BlogPost


pytestmark = pytest.mark.asyncio


def _post_payload(**overrides):
    payload = {
        "title": "Launching a Startup",
        "content": "Everything you need to know before launching.",
        "excerpt": "Before launching.",
    }
    payload.update(overrides)
    return payload


async def test_public_listing_shows_only_published(client):
    await BlogPost.create(title="Live 1", content="c", excerpt="e", author_name="Grace", is_published=True)
    await BlogPost.create(title="Draft", content="c", excerpt="e", author_name="Grace", is_published=False)
    await BlogPost.create(title="Live 2", content="c", excerpt="e", author_name="Lee", is_published=True)

    for params in ({}, {"published": "false"}, {"published": "all"}):
        resp = await client.get("/api/v1/blog-posts", params=params)
        assert resp.status_code == 200
        titles = {p["title"] for p in resp.json()["data"]["items"]}
        assert titles <= {"Live 1", "Live 2"}

    resp = await client.get("/api/v1/blog-posts")
    assert {p["title"] for p in resp.json()["data"]["items"]} == {"Live 1", "Live 2"}
    assert resp.json()["data"]["total"] == 2


async def test_anonymous_cannot_read_draft_detail(client):
    draft = await BlogPost.create(title="Draft", content="c", excerpt="e", author_name="Grace")
    resp = await client.get(f"/api/v1/blog-posts/{draft.id}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "POST_NOT_FOUND"


async def test_approval_gate_for_post_creation(client, create_user, create_admin, auth_header_factory, token_headers):
    user, _ = await create_user(is_approved=False)
    headers = token_headers(user)

    resp = await client.post("/api/v1/blog-posts", json=_post_payload(), headers=headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "ACCOUNT_NOT_APPROVED"

    admin, admin_password = await create_admin()
    admin_headers = await auth_header_factory(admin.username, admin_password)
    await client.put(f"/api/v1/admin/users/{user.id}/approve", headers=admin_headers)

    resp = await client.post("/api/v1/blog-posts", json=_post_payload(), headers=headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["authorName"] == user.username


async def test_anonymous_cannot_create_post(client):
    resp = await client.post("/api/v1/blog-posts", json=_post_payload())
    assert resp.status_code == 401


async def test_owner_can_delete_other_user_cannot(client, create_user, create_admin, auth_header_factory):
    alice, alice_pw = await create_user(username="alice")
    bob, bob_pw = await create_user(username="bob")
    admin, admin_pw = await create_admin()
    admin_headers = await auth_header_factory(admin.username, admin_pw)

    # Admin attributes the post to alice, who becomes its owner
    created = await client.post(
        "/api/v1/blog-posts",
        json=_post_payload(authorName="alice", isPublished=True),
        headers=admin_headers,
    )
    post_id = created.json()["data"]["id"]
    assert created.json()["data"]["authorName"] == "alice"
    assert created.json()["data"]["authorId"] == alice.id

    bob_headers = await auth_header_factory("bob", bob_pw)
    resp = await client.delete(f"/api/v1/blog-posts/{post_id}", headers=bob_headers)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "FORBIDDEN_NOT_OWNER"

    alice_headers = await auth_header_factory("alice", alice_pw)
    resp = await client.delete(f"/api/v1/blog-posts/{post_id}", headers=alice_headers)
    assert resp.status_code == 200
    assert await BlogPost.get_or_none(id=post_id) is None


async def test_legacy_post_ownership_by_name(client, create_user, auth_header_factory):
    alice, alice_pw = await create_user(username="alice")
    bob, bob_pw = await create_user(username="bob")
    legacy = await BlogPost.create(title="Old", content="c", excerpt="e", author_name="alice", is_published=True)

    bob_headers = await auth_header_factory("bob", bob_pw)
    assert (await client.delete(f"/api/v1/blog-posts/{legacy.id}", headers=bob_headers)).status_code == 403

    alice_headers = await auth_header_factory("alice", alice_pw)
    assert (await client.delete(f"/api/v1/blog-posts/{legacy.id}", headers=alice_headers)).status_code == 200


async def test_non_admin_cannot_spoof_author_name(client, create_user, auth_header_factory):
    user, pw = await create_user(username="carol")
    headers = await auth_header_factory("carol", pw)
    resp = await client.post("/api/v1/blog-posts", json=_post_payload(authorName="Grace"), headers=headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["authorName"] == "carol"
    assert resp.json()["data"]["authorId"] == user.id


async def test_media_url_lists_round_trip(client, create_user, auth_header_factory):
    user, pw = await create_user()
    headers = await auth_header_factory(user.username, pw)
    images = ["/uploads/c.png", "https://cdn.example.com/a.jpg", "/uploads/b.webp"]

    created = await client.post(
        "/api/v1/blog-posts",
        json=_post_payload(imageUrls=images, isPublished=True),
        headers=headers,
    )
    post_id = created.json()["data"]["id"]

    resp = await client.get(f"/api/v1/blog-posts/{post_id}")
    data = resp.json()["data"]
    assert data["imageUrls"] == images
    assert data["videoUrls"] == []


async def test_excerpt_derived_when_missing(client, create_user, auth_header_factory):
    user, pw = await create_user()
    headers = await auth_header_factory(user.username, pw)
    long_content = "Startups " * 60

    resp = await client.post(
        "/api/v1/blog-posts",
        json={"title": "Long read", "content": long_content},
        headers=headers,
    )
    excerpt = resp.json()["data"]["excerpt"]
    assert len(excerpt) <= 200
    assert excerpt.startswith("Startups Startups")
    assert excerpt.endswith("...")


async def test_validation_errors(client, create_user, auth_header_factory):
    user, pw = await create_user()
    headers = await auth_header_factory(user.username, pw)
    resp = await client.post("/api/v1/blog-posts", json=_post_payload(title="   "), headers=headers)
    assert resp.status_code == 422
    resp = await client.post("/api/v1/blog-posts", json={"title": "No body"}, headers=headers)
    assert resp.status_code == 422


async def test_update_refreshes_updated_at_and_flips_state(client, create_user, auth_header_factory):
    user, pw = await create_user()
    headers = await auth_header_factory(user.username, pw)
    created = (await client.post("/api/v1/blog-posts", json=_post_payload(), headers=headers)).json()["data"]

    resp = await client.patch(
        f"/api/v1/blog-posts/{created['id']}",
        json={"isPublished": True},
        headers=headers,
    )
    updated = resp.json()["data"]
    assert resp.status_code == 200
    assert updated["isPublished"] is True
    assert updated["title"] == created["title"]
    assert updated["updatedAt"] >= created["updatedAt"]

    resp = await client.patch(
        f"/api/v1/blog-posts/{created['id']}",
        json={"isPublished": False},
        headers=headers,
    )
    assert resp.json()["data"]["isPublished"] is False


async def test_author_sees_own_drafts_when_filtering_by_own_name(client, create_user, auth_header_factory):
    user, pw = await create_user(username="dana")
    headers = await auth_header_factory("dana", pw)
    await client.post("/api/v1/blog-posts", json=_post_payload(title="My draft"), headers=headers)
    await BlogPost.create(title="Other draft", content="c", excerpt="e", author_name="erin")

    resp = await client.get("/api/v1/blog-posts", params={"authorName": "dana", "published": "all"}, headers=headers)
    assert [p["title"] for p in resp.json()["data"]["items"]] == ["My draft"]

    resp = await client.get("/api/v1/blog-posts", params={"published": "all"}, headers=headers)
    assert resp.json()["data"]["items"] == []

    resp = await client.get("/api/v1/blog-posts", params={"authorName": "erin", "published": "all"}, headers=headers)
    assert resp.json()["data"]["items"] == []


async def test_search_filter(client):
    await BlogPost.create(title="Pitch decks", content="c", excerpt="e", author_name="A", is_published=True)
    await BlogPost.create(title="Other", content="How to PITCH investors", excerpt="e", author_name="A", is_published=True)
    await BlogPost.create(title="Hiring", content="c", excerpt="e", author_name="A", is_published=True)

    resp = await client.get("/api/v1/blog-posts", params={"search": "pitch"})
    assert {p["title"] for p in resp.json()["data"]["items"]} == {"Pitch decks", "Other"}


async def test_example_scenario(client, create_admin, auth_header_factory):
    admin, admin_pw = await create_admin()
    admin_headers = await auth_header_factory(admin.username, admin_pw)

    created = await client.post(
        "/api/v1/blog-posts",
        json=_post_payload(authorName="Grace", isPublished=False),
        headers=admin_headers,
    )
    assert created.status_code == 201
    post_id = created.json()["data"]["id"]

    admin_list = await client.get("/api/v1/admin/blog-posts", headers=admin_headers)
    assert post_id in [p["id"] for p in admin_list.json()["data"]["items"]]

    public_list = await client.get("/api/v1/blog-posts")
    assert post_id not in [p["id"] for p in public_list.json()["data"]["items"]]

    flip = await client.patch(f"/api/v1/blog-posts/{post_id}", json={"isPublished": True}, headers=admin_headers)
    assert flip.status_code == 200

    public_list = await client.get("/api/v1/blog-posts")
    assert post_id in [p["id"] for p in public_list.json()["data"]["items"]]

    sam = await client.post(
        f"/api/v1/blog-posts/{post_id}/comments",
        json={"authorName": "Sam", "content": "Great read!"},
    )
    assert sam.status_code == 201
    sam_id = sam.json()["data"]["id"]

    lee = await client.post(
        f"/api/v1/blog-posts/{post_id}/comments",
        json={"authorName": "Lee", "content": "Agreed", "parentId": sam_id},
    )
    assert lee.status_code == 201
    lee_id = lee.json()["data"]["id"]

    top = await client.get(f"/api/v1/blog-posts/{post_id}/comments")
    top_ids = [c["id"] for c in top.json()["data"]]
    assert sam_id in top_ids and lee_id not in top_ids

    replies = await client.get(f"/api/v1/blog-posts/{post_id}/comments/{sam_id}/replies")
    assert [c["id"] for c in replies.json()["data"]] == [lee_id]

    detail = await client.get(f"/api/v1/blog-posts/{post_id}")
    assert [c["id"] for c in detail.json()["data"]["comments"]] == [sam_id]
    assert detail.json()["data"]["comments"][0]["replyCount"] == 1


async def test_deleting_post_removes_its_comments(client, create_admin, auth_header_factory):
    admin, admin_pw = await create_admin()
    headers = await auth_header_factory(admin.username, admin_pw)
    post = await BlogPost.create(title="T", content="c", excerpt="e", author_name="Grace", is_published=True)
    await client.post(f"/api/v1/blog-posts/{post.id}/comments", json={"authorName": "Sam", "content": "hi"})

    resp = await client.delete(f"/api/v1/blog-posts/{post.id}", headers=headers)
    assert resp.status_code == 200
    assert (await client.get(f"/api/v1/blog-posts/{post.id}/comments")).status_code == 404


async def test_derived_excerpt_follows_content_but_written_one_stays(client, create_user, auth_header_factory):
    user, pw = await create_user()
    headers = await auth_header_factory(user.username, pw)

    derived = (await client.post(
        "/api/v1/blog-posts", json={"title": "Auto", "content": "First draft of the pitch."}, headers=headers,
    )).json()["data"]
    assert derived["excerpt"] == "First draft of the pitch."
    resp = await client.patch(
        f"/api/v1/blog-posts/{derived['id']}", json={"content": "Second, sharper pitch."}, headers=headers,
    )
    assert resp.json()["data"]["excerpt"] == "Second, sharper pitch."

    written = (await client.post("/api/v1/blog-posts", json=_post_payload(), headers=headers)).json()["data"]
    resp = await client.patch(
        f"/api/v1/blog-posts/{written['id']}", json={"content": "Rewritten body."}, headers=headers,
    )
    assert resp.json()["data"]["content"] == "Rewritten body."
    assert resp.json()["data"]["excerpt"] == "Before launching."
