"""Record builders shared by the Ask AI tests."""

from datetime import datetime
from uuid import uuid4

from clarity.core.schemas_ask import (
    Company,
    CompanyRecords,
    Document,
    Email,
    MediaAsset,
    Transcript,
)

COMPANY_ID = "11111111-1111-1111-1111-111111111111"
USER_ID = "22222222-2222-2222-2222-222222222222"


def make_company(**overrides) -> Company:
    data = {
        "id": COMPANY_ID,
        "name": "Acme",
        "type": "customer",
        "industry": "Manufacturing",
        "status": "active",
        "description": "Industrial widgets",
        "primary_contact_name": "Jane Doe",
        "primary_contact_email": "jane@acme.test",
        "notes": "Renewal due in Q3",
    }
    data.update(overrides)
    return Company(**data)


def make_transcript(title: str = "Kickoff Call", **overrides) -> Transcript:
    data = {
        "id": str(uuid4()),
        "company_id": COMPANY_ID,
        "title": title,
        "meeting_date": datetime(2024, 3, 5, 15, 30),
        "content": f"{title}: we had a pricing discussion and agreed next steps.",
    }
    data.update(overrides)
    return Transcript(**data)


def make_email(subject: str = "Renewal terms", **overrides) -> Email:
    data = {
        "id": str(uuid4()),
        "company_id": COMPANY_ID,
        "subject": subject,
        "from_address": "jane@acme.test",
        "to_addresses": ["sales@clarity.test", "cs@clarity.test"],
        "sent_date": datetime(2024, 4, 1, 9, 0),
        "body": "Hi team, please send over the renewal terms for next year.",
    }
    data.update(overrides)
    return Email(**data)


def make_document(title: str = "Master Services Agreement", **overrides) -> Document:
    data = {
        "id": str(uuid4()),
        "company_id": COMPANY_ID,
        "title": title,
        "type": "contract",
        "content": "This agreement covers widget support through 2026.",
    }
    data.update(overrides)
    return Document(**data)


def make_media(title: str = "Roadmap notes", **overrides) -> MediaAsset:
    data = {
        "id": str(uuid4()),
        "company_id": COMPANY_ID,
        "title": title,
        "file_type": "document",
        "original_filename": "roadmap.txt",
        "file_path": "acme/roadmap.txt",
        "mime_type": "text/plain",
        "extracted_text": "Q3 roadmap: integrations, SSO, audit log.",
        "processing_status": "completed",
    }
    data.update(overrides)
    return MediaAsset(**data)


def make_image(title: str = "Dashboard screenshot", **overrides) -> MediaAsset:
    data = {
        "title": title,
        "file_type": "image",
        "original_filename": "dashboard.png",
        "file_path": "acme/dashboard.png",
        "mime_type": "image/png",
        "extracted_text": None,
    }
    data.update(overrides)
    return make_media(**data)


def make_records(**overrides) -> CompanyRecords:
    data = {"company": make_company()}
    data.update(overrides)
    return CompanyRecords(**data)
