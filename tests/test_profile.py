from fakes import CDN_URL, COMPLETE_PROFILE, auth_header, document_entry


def test_get_profile_when_missing(client, store):
    response = client.get("/profile", headers=auth_header("u1"))

    assert response.status_code == 200
    assert response.json()["profile"] is None


def test_save_partial_profile_flags_incomplete(client, store):
    store.add_account("u1")
    store.add_member("m1", "u1")

    response = client.post("/profile", json={"fullName": "Karim", "hall": "Jagannath Hall"}, headers=auth_header("u1"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["profileComplete"] is False
    assert payload["message"] == "Profile saved. Please complete all mandatory fields."
    assert store.accounts["u1"]["profile_complete"] is False
    assert store.members["m1"]["full_name"] == "Karim"


def test_completing_profile_updates_account_flag(client, store):
    store.add_account("u1")
    store.add_profile("u1", fullName="Old Name", documents=[document_entry("u1", "nid.pdf")])

    response = client.put("/profile", json={**COMPLETE_PROFILE, "profession": "Engineer"}, headers=auth_header("u1"))

    payload = response.json()
    assert payload["profileComplete"] is True
    assert payload["message"] == "Profile saved successfully"
    assert payload["profile"]["profession"] == "Engineer"
    assert store.accounts["u1"]["profile_complete"] is True
    assert store.profiles["u1"]["fullName"] == "Rahim Uddin"
    assert len(store.profiles["u1"]["documents"]) == 1


def test_clearing_a_mandatory_field_marks_incomplete(client, store):
    store.add_account("u1", profile_complete=True)
    store.add_profile("u1", **COMPLETE_PROFILE)

    response = client.put("/profile", json={"bloodGroup": ""}, headers=auth_header("u1"))

    assert response.json()["profileComplete"] is False
    assert store.accounts["u1"]["profile_complete"] is False


def test_profile_requires_token(client):
    assert client.get("/profile").status_code == 401


def test_upload_document(client, store, storage):
    store.add_profile("u1")

    response = client.post(
        "/profile/documents",
        files={"file": ("nid card.pdf", b"%PDF-1.4 test", "application/pdf")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 201
    document = response.json()["document"]
    assert document["name"] == "nid card.pdf"
    assert document["type"] == "application/pdf"
    assert document["url"].startswith(f"{CDN_URL}/alumni/documents/u1/")
    assert document["uploadedAt"]
    key = document["url"][len(CDN_URL) + 1:]
    assert storage.client.objects[key] == b"%PDF-1.4 test"
    assert store.profiles["u1"]["documents"][0]["url"] == document["url"]


def test_upload_rejects_unsupported_type(client, store, storage):
    response = client.post(
        "/profile/documents",
        files={"file": ("run.sh", b"echo hi", "text/x-shellscript")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid file type")
    assert storage.client.objects == {}


def test_upload_rejects_oversized_file(client, monkeypatch):
    from alumni_app.config import settings

    monkeypatch.setattr(settings, "MAX_DOCUMENT_BYTES", 4)

    response = client.post(
        "/profile/documents",
        files={"file": ("big.pdf", b"0123456789", "application/pdf")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("File too large")


def test_delete_own_document(client, store, storage):
    entry = document_entry("u1", "nid.pdf")
    store.add_profile("u1", documents=[entry, document_entry("u1", "other.pdf")])

    response = client.request("DELETE", "/profile/documents", json={"documentUrl": entry["url"]}, headers=auth_header("u1"))

    assert response.status_code == 200
    assert storage.client.deleted == ["alumni/documents/u1/1700000000000_nid.pdf"]
    assert [document["name"] for document in store.profiles["u1"]["documents"]] == ["other.pdf"]


def test_delete_document_of_another_member_is_forbidden(client, store, storage):
    entry = document_entry("u2", "nid.pdf")

    response = client.request("DELETE", "/profile/documents", json={"documentUrl": entry["url"]}, headers=auth_header("u1"))

    assert response.status_code == 403
    assert storage.client.deleted == []


def test_delete_document_with_foreign_url(client):
    response = client.request(
        "DELETE",
        "/profile/documents",
        json={"documentUrl": "https://elsewhere.example.org/file.pdf"},
        headers=auth_header("u1"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid document URL"


def test_optional_profile_fields_round_trip(client, store):
    store.add_account("u1")
    store.add_profile(
        "u1",
        biography="Class of 2005",
        profilePhotoUrl=f"{CDN_URL}/alumni/photos/u1/profile-1.png",
        presentCityOfLiving="Dhaka",
        showMobileToMembers=False,
    )

    fetched = client.get("/profile", headers=auth_header("u1")).json()["profile"]
    assert fetched["biography"] == "Class of 2005"
    assert fetched["profilePhotoUrl"] == f"{CDN_URL}/alumni/photos/u1/profile-1.png"
    assert fetched["presentCityOfLiving"] == "Dhaka"
    assert fetched["showMobileToMembers"] is False

    response = client.put(
        "/profile",
        json={"biography": "Physicist", "country": "Bangladesh", "homeDistrict": "Sylhet"},
        headers=auth_header("u1"),
    )

    saved = response.json()["profile"]
    assert saved["biography"] == "Physicist"
    assert saved["country"] == "Bangladesh"
    assert store.profiles["u1"]["country"] == "Bangladesh"
    assert store.profiles["u1"]["homeDistrict"] == "Sylhet"
    assert store.profiles["u1"]["presentCityOfLiving"] == "Dhaka"
    assert store.profiles["u1"]["profilePhotoUrl"] == f"{CDN_URL}/alumni/photos/u1/profile-1.png"


def test_profile_edit_cannot_overwrite_photo_url(client, store):
    photo = f"{CDN_URL}/alumni/photos/u1/family-1.jpg"
    store.add_profile("u1", familyPhotoUrl=photo)

    client.put("/profile", json={"familyPhotoUrl": "https://elsewhere.example.org/x.jpg"}, headers=auth_header("u1"))

    assert store.profiles["u1"]["familyPhotoUrl"] == photo


def test_upload_profile_photo(client, store, storage):
    store.add_profile("u1", **COMPLETE_PROFILE)

    response = client.post(
        "/profile/photos",
        data={"photoType": "profile"},
        files={"file": ("me.PNG", b"\x89PNG", "image/png")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Photo uploaded successfully"
    assert payload["photoType"] == "profile"
    key = payload["url"][len(CDN_URL) + 1:]
    assert key.startswith("alumni/photos/u1/profile-")
    assert key.endswith(".png")
    assert storage.client.objects[key] == b"\x89PNG"
    assert store.profiles["u1"]["profilePhotoUrl"] == payload["url"]
    assert store.profiles["u1"]["fullName"] == "Rahim Uddin"


def test_upload_family_photo_sets_family_url(client, store):
    response = client.post(
        "/profile/photos",
        data={"photoType": "family"},
        files={"file": ("family.jpeg", b"jpeg-bytes", "image/jpeg")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 200
    assert store.profiles["u1"]["familyPhotoUrl"] == response.json()["url"]
    assert "profilePhotoUrl" not in store.profiles["u1"]


def test_photo_upload_rejects_unknown_photo_type(client, storage):
    response = client.post(
        "/profile/photos",
        data={"photoType": "cover"},
        files={"file": ("me.png", b"\x89PNG", "image/png")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid photo type"
    assert storage.client.objects == {}


def test_photo_upload_accepts_only_jpeg_and_png(client, storage):
    response = client.post(
        "/profile/photos",
        data={"photoType": "profile"},
        files={"file": ("cv.pdf", b"%PDF-1.4", "application/pdf")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid file type. Only JPEG and PNG are allowed."
    assert storage.client.objects == {}


def test_photo_upload_rejects_oversized_file(client, monkeypatch):
    from alumni_app.config import settings

    monkeypatch.setattr(settings, "MAX_PHOTO_BYTES", 4)

    response = client.post(
        "/profile/photos",
        data={"photoType": "profile"},
        files={"file": ("me.png", b"0123456789", "image/png")},
        headers=auth_header("u1"),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("File too large")
