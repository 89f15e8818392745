import pytest

from smartscan.database import find_duplicate_contact, get_recent_activities
from smartscan.manage import create_contact, edit_contact

from conftest import run


def test_create_contact_cleans_phones_and_logs(db_path):
    contact = run(
        create_contact(
            "Acme Traders",
            ["+91 98295-50499", "9829550499", "0141 222 3333"],
            email="sales@acme.in",
            note="Walk-in",
            website="",
            db_path=db_path,
        )
    )

    assert contact.company_name == "Acme Traders"
    assert contact.phones == ["9829550499", "01412223333"]
    assert contact.note == "Walk-in"
    assert contact.website is None
    assert run(find_duplicate_contact(["9829550499"], db_path=db_path)).id == contact.id

    activity = run(get_recent_activities(db_path=db_path))[0]
    assert activity.action == "created"
    assert activity.contact_id == contact.id
    assert activity.description == "Created contact: Acme Traders"


def test_create_contact_without_details(db_path):
    contact = run(create_contact("", db_path=db_path))

    assert contact.company_name == ""
    assert contact.phones == []


def test_edit_contact_changes_only_given_fields(db_path):
    contact = run(create_contact("Acme", ["9829550499"], email="old@acme.in", db_path=db_path))

    edited = run(
        edit_contact(
            contact.id,
            db_path=db_path,
            company_name="Acme Traders",
            phone2="+91-94140 12345",
            email="",
            sent=True,
        )
    )

    assert edited.company_name == "Acme Traders"
    assert edited.phones == ["9829550499", "9414012345"]
    assert edited.email is None
    assert edited.sent is True
    assert edited.updated_at is not None

    activity = run(get_recent_activities(db_path=db_path))[0]
    assert activity.action == "updated"
    assert activity.metadata == {"fields": ["company_name", "email", "phone2", "sent"]}


def test_edit_missing_contact(db_path):
    assert run(edit_contact(999, db_path=db_path, note="x")) is None
    assert [a.action for a in run(get_recent_activities(db_path=db_path))] == []


def test_edit_rejects_unknown_fields(db_path):
    contact = run(create_contact("Acme", db_path=db_path))

    with pytest.raises(ValueError):
        run(edit_contact(contact.id, db_path=db_path, id=5))


def test_edit_without_fields_returns_contact_unchanged(db_path):
    contact = run(create_contact("Acme", db_path=db_path))

    assert run(edit_contact(contact.id, db_path=db_path)) == contact
    assert [a.action for a in run(get_recent_activities(db_path=db_path))] == ["created"]
