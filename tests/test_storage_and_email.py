from alumni_app.services.email_services import APPROVAL_SUBJECT, build_approval_message
from fakes import CDN_URL, make_storage


def test_document_keys_are_scoped_per_member():
    storage = make_storage()

    key = storage.build_key("u1", "scan/../id.pdf", 1700000000000)

    assert key == "alumni/documents/u1/1700000000000_scan_.._id.pdf"
    assert key.startswith(storage.member_folder("u1"))
    assert not key.startswith(storage.member_folder("u"))


def test_photo_keys_live_under_photos_folder():
    storage = make_storage()

    assert storage.photo_key("u1", "family", 1700000000000, "jpg") == "alumni/photos/u1/family-1700000000000.jpg"


def test_key_from_url_only_accepts_own_cdn():
    storage = make_storage()

    assert storage.key_from_url(f"{CDN_URL}/alumni/documents/u1/a.pdf") == "alumni/documents/u1/a.pdf"
    assert storage.key_from_url("https://storage.googleapis.com/bucket/a.pdf") is None
    assert storage.key_from_url(f"{CDN_URL}/") is None
    assert storage.key_from_url(None) is None


def test_approval_message_is_addressed_and_escaped():
    msg = build_approval_message("member@example.com", "<Rahim>")

    assert msg["To"] == "member@example.com"
    assert msg["Subject"] == APPROVAL_SUBJECT
    text_part, html_part = msg.get_payload()
    assert "Dear <Rahim>," in text_part.get_payload()
    assert "&lt;Rahim&gt;" in html_part.get_payload()
