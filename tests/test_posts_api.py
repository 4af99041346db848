"""Tests for the community feed."""

import pytest

from olofalumni.core.uploads import resolve_upload_path

PDF_BYTES = b"%PDF-1.4 minimal"


@pytest.mark.asyncio
async def test_create_post_and_feed(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")

    first = await async_client.post("/api/posts", headers=ada["headers"], data={"content": "Hello class of 2015!"})
    assert first.status_code == 201
    post = first.json()
    assert post["content"] == "Hello class of 2015!"
    assert post["user"]["name"] == "Ada Obi"
    assert post["file_url"] is None
    assert post["comments"] == []
    assert post["reaction_count"] == 0

    second = await async_client.post(
        "/api/posts",
        headers=bola["headers"],
        data={"content": "Reunion minutes attached"},
        files={"file": ("minutes.pdf", PDF_BYTES, "application/pdf")},
    )
    assert second.status_code == 201
    assert second.json()["file_type"] == "application/pdf"
    assert second.json()["file_url"].startswith("/uploads/")

    feed = await async_client.get("/api/posts", headers=ada["headers"])
    assert feed.status_code == 200
    assert [p["content"] for p in feed.json()] == ["Reunion minutes attached", "Hello class of 2015!"]


@pytest.mark.asyncio
async def test_create_post_validation(async_client, make_member):
    ada = await make_member("Ada Obi")

    blank = await async_client.post("/api/posts", headers=ada["headers"], data={"content": "   "})
    assert blank.status_code == 400

    bad_file = await async_client.post(
        "/api/posts",
        headers=ada["headers"],
        data={"content": "Look at this"},
        files={"file": ("tool.exe", b"MZ", "application/octet-stream")},
    )
    assert bad_file.status_code == 400


@pytest.mark.asyncio
async def test_new_post_notifies_others(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    await async_client.post("/api/posts", headers=ada["headers"], data={"content": "Hello!"})

    notes = (await async_client.get("/api/notifications", headers=bola["headers"])).json()
    assert notes[0]["type"] == "new_post"
    assert notes[0]["message"] == "Ada Obi shared a new post"

    own = (await async_client.get("/api/notifications", headers=ada["headers"])).json()
    assert all(n["type"] != "new_post" for n in own)


@pytest.mark.asyncio
async def test_comments_ordered_oldest_first(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    post_id = (await async_client.post("/api/posts", headers=ada["headers"], data={"content": "Hi"})).json()["id"]

    c1 = await async_client.post(f"/api/posts/{post_id}/comments", headers=bola["headers"], json={"content": "First!"})
    c2 = await async_client.post(f"/api/posts/{post_id}/comments", headers=ada["headers"], json={"content": "Second"})
    assert c1.status_code == c2.status_code == 201
    assert c1.json()["user"]["name"] == "Bola Ade"

    feed = (await async_client.get("/api/posts", headers=ada["headers"])).json()
    assert [c["content"] for c in feed[0]["comments"]] == ["First!", "Second"]

    missing = await async_client.post("/api/posts/nope/comments", headers=ada["headers"], json={"content": "x"})
    assert missing.status_code == 404

    blank = await async_client.post(f"/api/posts/{post_id}/comments", headers=ada["headers"], json={"content": "  "})
    assert blank.status_code == 422


@pytest.mark.asyncio
async def test_reactions_toggle(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    post_id = (await async_client.post("/api/posts", headers=ada["headers"], data={"content": "Hi"})).json()["id"]
    url = f"/api/posts/{post_id}/reactions"

    resp = await async_client.post(url, headers=bola["headers"], json={"reaction": "like"})
    assert resp.status_code == 200
    assert resp.json()["reacted"] is True
    assert resp.json()["reactions"] == {"like": 1}

    resp = await async_client.post(url, headers=ada["headers"], json={"reaction": "love"})
    assert resp.json()["reactions"] == {"like": 1, "love": 1}
    assert resp.json()["reaction_count"] == 2

    resp = await async_client.post(url, headers=bola["headers"], json={"reaction": "celebrate"})
    assert resp.json()["reacted"] is True
    assert resp.json()["reactions"] == {"celebrate": 1, "love": 1}

    resp = await async_client.post(url, headers=bola["headers"], json={"reaction": "celebrate"})
    assert resp.json()["reacted"] is False
    assert resp.json()["reactions"] == {"love": 1}

    feed = (await async_client.get("/api/posts", headers=ada["headers"])).json()
    assert feed[0]["reactions"] == {"love": 1}
    assert feed[0]["reaction_count"] == 1

    bad = await async_client.post(url, headers=ada["headers"], json={"reaction": "angry"})
    assert bad.status_code == 422
    missing = await async_client.post("/api/posts/nope/reactions", headers=ada["headers"], json={"reaction": "like"})
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_delete_post_only_by_author(async_client, make_member):
    ada = await make_member("Ada Obi")
    bola = await make_member("Bola Ade")
    created = await async_client.post(
        "/api/posts",
        headers=ada["headers"],
        data={"content": "Temporary"},
        files={"file": ("notes.pdf", PDF_BYTES, "application/pdf")},
    )
    post = created.json()
    await async_client.post(f"/api/posts/{post['id']}/comments", headers=bola["headers"], json={"content": "Nice"})
    await async_client.post(f"/api/posts/{post['id']}/reactions", headers=bola["headers"], json={"reaction": "like"})

    denied = await async_client.delete(f"/api/posts/{post['id']}", headers=bola["headers"])
    assert denied.status_code == 404
    assert denied.json()["detail"] == "Post not found"

    resp = await async_client.delete(f"/api/posts/{post['id']}", headers=ada["headers"])
    assert resp.status_code == 200
    assert (await async_client.get("/api/posts", headers=ada["headers"])).json() == []
    assert resolve_upload_path(post["file_url"][len("/uploads/"):]) is None
