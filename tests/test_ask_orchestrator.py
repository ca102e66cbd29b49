"""Tests for the Ask AI orchestrator and its graph, using in-memory collaborators."""

import asyncio

import pytest

from clarity.core.ask_orchestrator import AskOrchestrator
from clarity.core.context_serializer import latest_records_window
from clarity.core.errors import (
    ConfigurationError,
    GenerationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from clarity.core.generation import GenerationClient
from clarity.core.schemas_ask import ImagePart, TextPart
from tests.fakes.fake_stores import (
    FakeBinaryStore,
    FakeGenerator,
    FakeHistoryStore,
    FakeRecordStore,
)
from tests.fixtures_records import (
    COMPANY_ID,
    USER_ID,
    make_email,
    make_image,
    make_media,
    make_records,
    make_transcript,
)

KICKOFF_ANSWER = "According to the Kickoff Call transcript, pricing was discussed."


def _orchestrator(
    records=None,
    answer: str = KICKOFF_ANSWER,
    generator=None,
    history_store=None,
    binary_store=None,
    record_store=None,
    **kwargs,
):
    return AskOrchestrator(
        record_store=record_store or FakeRecordStore(records or make_records()),
        binary_store=binary_store or FakeBinaryStore(),
        generator=generator or FakeGenerator(answer=answer),
        history_store=history_store if history_store is not None else FakeHistoryStore(),
        **kwargs,
    )


# ─── Happy path ───────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_ask_returns_answer_and_cited_transcript():
    records = make_records(transcripts=[make_transcript("Kickoff Call")])
    history_store = FakeHistoryStore()
    orchestrator = _orchestrator(records, history_store=history_store)

    result = await orchestrator.ask(COMPANY_ID, "What did we discuss about pricing?", USER_ID)

    assert result.answer == KICKOFF_ANSWER
    assert len(result.sources) == 1
    assert result.sources[0].type == "transcript"
    assert result.sources[0].title == "Kickoff Call"
    assert result.history_entry_id == history_store.entries[0].id


@pytest.mark.asyncio
async def test_company_without_records_gets_header_only_context():
    generator = FakeGenerator(answer="We only have the company profile.")
    orchestrator = _orchestrator(make_records(), generator=generator)

    result = await orchestrator.ask(COMPANY_ID, "What do we know about this company?", USER_ID)

    assert result.sources == []
    system_text = generator.calls[0][0].text
    assert "# Company Information: Acme" in system_text
    assert "# Meeting Transcripts" not in system_text
    assert "# Email Exchanges" not in system_text
    assert "# Documents" not in system_text
    assert "# Uploaded Media" not in system_text


@pytest.mark.asyncio
async def test_sources_capped_when_answer_mentions_meeting():
    transcripts = [make_transcript(f"Weekly sync {i}") for i in range(8)]
    orchestrator = _orchestrator(
        make_records(transcripts=transcripts),
        answer="Every meeting focused on onboarding.",
    )

    result = await orchestrator.ask(COMPANY_ID, "What came up?", USER_ID)

    assert [s.id for s in result.sources] == [t.id for t in transcripts[:5]]


@pytest.mark.asyncio
async def test_returned_sources_match_persisted_sources():
    records = make_records(
        transcripts=[make_transcript("Kickoff Call")],
        emails=[make_email("Renewal terms")],
        media=[make_media("Roadmap notes")],
    )
    history_store = FakeHistoryStore()
    orchestrator = _orchestrator(
        records,
        answer="The Kickoff Call and the email on renewal terms both mention the file.",
        history_store=history_store,
    )

    result = await orchestrator.ask(COMPANY_ID, "  Summarize the renewal  ", USER_ID)

    entry = history_store.entries[0]
    assert [s.model_dump() for s in entry.sources] == [s.model_dump() for s in result.sources]
    assert entry.answer == result.answer
    assert entry.question == "Summarize the renewal"
    assert entry.user_id == USER_ID


@pytest.mark.asyncio
async def test_images_are_sent_after_question_with_captions():
    image = make_image("Dashboard screenshot")
    binary_store = FakeBinaryStore({image.file_path: b"png-bytes"})
    generator = FakeGenerator(answer="The screenshot shows churn.")
    orchestrator = _orchestrator(
        make_records(media=[image]), generator=generator, binary_store=binary_store
    )

    await orchestrator.ask(COMPANY_ID, "What does the dashboard show?", USER_ID)

    parts = generator.calls[0]
    assert isinstance(parts[1], TextPart)
    assert parts[1].text == "Question: What does the dashboard show?"
    assert isinstance(parts[2], ImagePart)
    assert parts[2].data == b"png-bytes"
    assert parts[3].text == '[Image above: "Dashboard screenshot"]'


@pytest.mark.asyncio
async def test_context_window_limits_records():
    old = make_transcript("Old call", content="OLD CONTENT")
    new = make_transcript("New call", content="NEW CONTENT")
    generator = FakeGenerator(answer="Nothing specific.")
    orchestrator = _orchestrator(
        make_records(transcripts=[old, new]),
        generator=generator,
        context_window=latest_records_window(1),
    )

    await orchestrator.ask(COMPANY_ID, "Latest?", USER_ID)

    system_text = generator.calls[0][0].text
    assert "NEW CONTENT" in system_text
    assert "OLD CONTENT" not in system_text


# ─── History failures ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_history_insert_failure_still_returns_answer():
    records = make_records(transcripts=[make_transcript("Kickoff Call")])
    succeeding = await _orchestrator(records).ask(COMPANY_ID, "Pricing?", USER_ID)

    failing_store = FakeHistoryStore(fail_insert=True)
    result = await _orchestrator(records, history_store=failing_store).ask(
        COMPANY_ID, "Pricing?", USER_ID
    )

    assert result.answer == succeeding.answer
    assert [s.id for s in result.sources] == [s.id for s in succeeding.sources]
    assert result.history_entry_id is None
    assert failing_store.entries == []


# ─── Error paths ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "company_id,question",
    [("", "Pricing?"), (COMPANY_ID, ""), (COMPANY_ID, "   "), (None, "Pricing?")],
)
async def test_missing_inputs_are_validation_errors(company_id, question):
    record_store = FakeRecordStore(make_records())
    orchestrator = _orchestrator(record_store=record_store)

    with pytest.raises(ValidationError) as exc_info:
        await orchestrator.ask(company_id, question, USER_ID)

    assert exc_info.value.stage == "validating"
    assert record_store.calls == []


@pytest.mark.asyncio
async def test_unknown_company_is_not_found():
    generator = FakeGenerator(answer="unused")
    orchestrator = _orchestrator(make_records(), generator=generator)

    with pytest.raises(NotFoundError):
        await orchestrator.ask("99999999-9999-9999-9999-999999999999", "Pricing?", USER_ID)

    assert generator.calls == []


@pytest.mark.asyncio
async def test_load_failure_aborts_before_generation():
    generator = FakeGenerator(answer="unused")
    history_store = FakeHistoryStore()
    orchestrator = _orchestrator(
        record_store=FakeRecordStore(make_records(), fail_on="list_emails"),
        generator=generator,
        history_store=history_store,
    )

    with pytest.raises(StorageError) as exc_info:
        await orchestrator.ask(COMPANY_ID, "Pricing?", USER_ID)

    assert exc_info.value.stage == "loading"
    assert generator.calls == []
    assert history_store.entries == []


@pytest.mark.asyncio
async def test_missing_credential_is_configuration_error_and_writes_no_history():
    history_store = FakeHistoryStore()
    orchestrator = _orchestrator(
        make_records(transcripts=[make_transcript()]),
        generator=GenerationClient(api_key=None, model="claude-sonnet-4-5-20250929"),
        history_store=history_store,
    )

    with pytest.raises(ConfigurationError) as exc_info:
        await orchestrator.ask(COMPANY_ID, "Pricing?", USER_ID)

    assert exc_info.value.kind == "configuration"
    assert exc_info.value.stage == "generating"
    assert history_store.entries == []


@pytest.mark.asyncio
async def test_timeout_is_distinguishable_from_configuration():
    history_store = FakeHistoryStore()
    orchestrator = _orchestrator(
        generator=FakeGenerator(error=GenerationError("Generation timed out after 120.0s")),
        history_store=history_store,
    )

    with pytest.raises(GenerationError) as exc_info:
        await orchestrator.ask(COMPANY_ID, "Pricing?", USER_ID)

    assert exc_info.value.kind == "generation"
    assert exc_info.value.kind != ConfigurationError.kind
    assert exc_info.value.stage == "generating"
    assert history_store.entries == []


@pytest.mark.asyncio
async def test_unexpected_generator_error_becomes_generation_error():
    orchestrator = _orchestrator(generator=FakeGenerator(error=asyncio.TimeoutError()))

    with pytest.raises(GenerationError):
        await orchestrator.ask(COMPANY_ID, "Pricing?", USER_ID)


# ─── History reads ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_history_newest_first_with_user_names():
    history_store = FakeHistoryStore()
    history_store.user_names[USER_ID] = "Sam Seller"
    orchestrator = _orchestrator(history_store=history_store)

    for question in ("first?", "second?", "third?"):
        await orchestrator.ask(COMPANY_ID, question, USER_ID)

    entries = await orchestrator.get_history(COMPANY_ID, limit=2)

    assert [e.question for e in entries] == ["third?", "second?"]
    assert all(e.user_name == "Sam Seller" for e in entries)


@pytest.mark.asyncio
async def test_get_history_rejects_bad_limit():
    orchestrator = _orchestrator()

    with pytest.raises(ValidationError):
        await orchestrator.get_history(COMPANY_ID, limit=0)
