# tests/test_files_api.py
import os
from tests.helpers import submit_complaint

UNKNOWN_ID = "3f2b8c1e-9a4d-4e6f-8b7a-1c2d3e4f5a6b"


def upload(client, complaint_id, *files):
    return client.post(
        f"/upload-files/{complaint_id}",
        files=[("files", (name, body, "text/plain")) for name, body in files],
    )


def test_upload_list_download_delete(client, settings):
    complaint_id = submit_complaint(client)
    res = upload(client, complaint_id, ("a.txt", b"alpha"), ("b.txt", b"bravo!"))
    assert res.status_code == 200
    stored = res.json()
    assert sorted(f["original_name"] for f in stored) == ["a.txt", "b.txt"]
    assert {f["size_bytes"] for f in stored} == {5, 6}
    assert all(f["complaint_id"] == complaint_id for f in stored)

    listed = client.get(f"/files/{complaint_id}").json()
    assert {f["id"] for f in listed} == {f["id"] for f in stored}

    target = next(f for f in stored if f["original_name"] == "a.txt")
    res = client.get(f"/files/{complaint_id}/{target['id']}")
    assert res.status_code == 200
    assert res.content == b"alpha"
    assert 'filename="a.txt"' in res.headers["content-disposition"]

    res = client.delete(f"/files/{complaint_id}/{target['id']}")
    assert res.status_code == 200
    assert res.json() == {"message": "File deleted successfully."}
    assert client.get(f"/files/{complaint_id}/{target['id']}").status_code == 404
    assert len(client.get(f"/files/{complaint_id}").json()) == 1
    assert len(os.listdir(os.path.join(settings.FILES_DIR, complaint_id))) == 1


def test_upload_to_unknown_complaint_is_404(client):
    res = upload(client, UNKNOWN_ID, ("a.txt", b"x"))
    assert res.status_code == 404
    assert res.json() == {"error": "No data found for the provided UUID."}


def test_too_many_files_is_rejected(make_client):
    client = make_client(MAX_FILES_PER_UPLOAD=2)
    complaint_id = submit_complaint(client)
    res = upload(client, complaint_id, ("a", b"1"), ("b", b"2"), ("c", b"3"))
    assert res.status_code == 400
    assert res.json() == {"error": "Too many files."}
    assert client.get(f"/files/{complaint_id}").json() == []


def test_oversized_file_is_rejected_and_nothing_is_kept(make_client, settings):
    client = make_client(MAX_FILE_MB=1)
    complaint_id = submit_complaint(client)
    res = upload(client, complaint_id, ("ok.txt", b"small"), ("big.bin", b"z" * (1024 * 1024 + 1)))
    assert res.status_code == 413
    assert res.json() == {"error": "File too large."}
    assert client.get(f"/files/{complaint_id}").json() == []
    assert os.listdir(os.path.join(settings.FILES_DIR, complaint_id)) == []


def test_file_routes_validate_ids(client):
    complaint_id = submit_complaint(client)
    assert client.get("/files/nope").status_code == 400
    assert client.get(f"/files/{complaint_id}/nope").status_code == 400
    assert client.delete(f"/files/{complaint_id}/{UNKNOWN_ID}").status_code == 404
