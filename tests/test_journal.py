"""
Tests for the Journal API: period queries, retraction and summarization.

Uses a mock completion provider; no network.
"""

import logging
from datetime import date

import pytest

from prothought.api import Journal, RetractStatus
from prothought.config import JournalConfig, LLMConfig
from prothought.errors import InvalidPeriod, SummarizationError
from prothought.providers.llm import OpenAICompatibleClient
from prothought.thought_store import ThoughtStore

DAY = date(2026, 2, 5)


class TestLog:
    """Test Journal.log()."""

    def test_log_extracts_markers(self, journal, journal_clock):
        thought = journal.log("Fixed the login bug #work #bugfix")
        assert thought.markers == ["work", "bugfix"]
        assert thought.timestamp == "2026-02-05T09:00:00"

    def test_log_strips_whitespace(self, journal):
        assert journal.log("  spaced out  ").text == "spaced out"

    def test_log_rejects_blank(self, journal):
        with pytest.raises(ValueError):
            journal.log("   ")


class TestListForPeriod:
    """Test Journal.list_for_period()."""

    def test_round_trip_by_marker(self, journal, journal_clock):
        """A thought is found by each of its markers and not by others."""
        journal.log("Fixed the login bug #work #bugfix")
        for marker in ("work", "bugfix"):
            results = journal.list_for_period(["2026-02-05"], marker)
            assert [t.text for t in results] == ["Fixed the login bug #work #bugfix"]
        assert journal.list_for_period(["2026-02-05"], "personal") == []

    def test_marker_is_case_insensitive(self, journal, journal_clock):
        journal.log("#Work item")
        assert len(journal.list_for_period(["2026-02-05"], "WORK")) == 1

    def test_scenario_insertion_order(self, journal, journal_clock):
        """hello #x then world: both listed in order, only hello for #x."""
        journal.log("hello #x")
        journal.log("world")

        results = journal.list_for_period(["today"], today=DAY)
        assert [(t.text, t.markers) for t in results] == [("hello #x", ["x"]), ("world", [])]

        filtered = journal.list_for_period(["today"], "x", today=DAY)
        assert [t.text for t in filtered] == ["hello #x"]

    def test_default_period_is_today(self, journal, journal_clock):
        journal.log("today's thought")
        assert len(journal.list_for_period([], today=DAY)) == 1

    def test_relative_periods(self, journal, journal_clock):
        stamps = {
            "2026-02-05T12:00:00": "today",
            "2026-02-04T12:00:00": "yesterday",
            "2026-01-30T12:00:00": "six days ago",
            "2026-01-29T12:00:00": "seven days ago",
            "2026-01-07T00:00:00": "29 days ago",
            "2026-01-06T23:59:59": "30 days ago",
        }
        for ts, text in stamps.items():
            journal_clock.ts = ts
            journal.log(text)

        def texts(period):
            return [t.text for t in journal.list_for_period([period], today=DAY)]

        assert texts("today") == ["today"]
        assert texts("yesterday") == ["yesterday"]
        assert texts("lastweek") == ["six days ago", "yesterday", "today"]
        assert texts("lastmonth") == [
            "29 days ago", "seven days ago", "six days ago", "yesterday", "today",
        ]

    def test_empty_result_is_not_error(self, journal):
        assert journal.list_for_period(["yesterday"], today=DAY) == []

    def test_invalid_period(self, journal):
        with pytest.raises(InvalidPeriod):
            journal.list_for_period(["2026-02-30"])


class TestRetractLast:
    """Test Journal.retract_last()."""

    def test_no_thoughts(self, journal):
        result = journal.retract_last()
        assert result.status is RetractStatus.NO_THOUGHTS
        assert result.timestamp is None

    def test_retract_then_already_retracted(self, journal, journal_clock):
        """Retracting twice wraps the text exactly once."""
        thought = journal.log("bad idea #work")

        first = journal.retract_last()
        assert first.status is RetractStatus.RETRACTED
        assert first.timestamp == thought.timestamp

        second = journal.retract_last()
        assert second.status is RetractStatus.ALREADY_RETRACTED

        assert journal.store.get(thought.id).text == "~~bad idea #work~~"

    def test_retracts_only_latest(self, journal, journal_clock):
        keep = journal.log("keep me")
        journal_clock.ts = "2026-02-05T10:00:00"
        drop = journal.log("drop me")
        journal.retract_last()
        assert journal.store.get(keep.id).text == "keep me"
        assert journal.store.get(drop.id).text == "~~drop me~~"

    def test_retracted_thought_keeps_markers(self, journal, journal_clock):
        """Retraction leaves markers, so the thought still matches its tags."""
        journal.log("oops #work")
        journal.retract_last()
        results = journal.list_for_period(["2026-02-05"], "work")
        assert [t.text for t in results] == ["~~oops #work~~"]
        assert results[0].retracted
        assert results[0].markers == ["work"]

    def test_user_written_strikethrough_counts_as_retracted(self, journal):
        journal.log("~~already struck~~")
        assert journal.retract_last().status is RetractStatus.ALREADY_RETRACTED


class TestConclude:
    """Test Journal.conclude()."""

    def test_builds_prompt_in_order(self, journal, journal_clock, mock_provider):
        journal.log("morning run #health")
        journal_clock.ts = "2026-02-05T18:30:00"
        journal.log("shipped release #work")

        summary = journal.conclude(["2026-02-05"])

        assert summary == "A calm, productive day."
        prompt, system = mock_provider.calls[0]
        assert prompt == (
            "[2026-02-05T09:00:00] morning run #health\n"
            "[2026-02-05T18:30:00] shipped release #work"
        )
        assert system == "You summarise my daily thoughts."

    def test_marker_filter_applies(self, journal, journal_clock, mock_provider):
        journal.log("run #health")
        journal.log("deploy #work")
        journal.conclude(["2026-02-05"], "work")
        assert mock_provider.calls[0][0] == "[2026-02-05T09:00:00] deploy #work"

    def test_nothing_to_summarize(self, journal, mock_provider):
        """An empty period returns None without calling the provider."""
        assert journal.conclude(["2026-02-05"]) is None
        assert mock_provider.calls == []

    def test_provider_error_propagates(self, journal, journal_clock):
        class Failing:
            def complete(self, prompt, system_prompt):
                raise SummarizationError("connection refused")

            def list_models(self):
                return []

        journal._provider = Failing()
        journal.log("something")
        with pytest.raises(SummarizationError, match="connection refused"):
            journal.conclude(["2026-02-05"])

    def test_custom_system_prompt(self, db_path, mock_provider):
        config = JournalConfig(db_path=db_path, llm=LLMConfig(system_prompt="Be brief."))
        with Journal(config, provider=mock_provider, ops_log=False) as j:
            j.log("x")
            j.conclude([])
        assert mock_provider.calls[0][1] == "Be brief."

    @pytest.mark.parametrize("reply", [
        "Here is a summary of your day:\nYou worked.",
        "Here is a summary of your day. You fixed the login bug. Then you went for a run.",
        "Summary: quiet day.",
    ])
    def test_reply_returned_verbatim(self, journal, journal_clock, mock_provider, reply):
        mock_provider.reply = reply
        journal.log("worked")
        assert journal.conclude(["2026-02-05"]) == reply


class TestOpsLog:
    """Test the operations log written beside the database."""

    def test_writes_and_detaches(self, db_path, mock_provider):
        config = JournalConfig(db_path=db_path, llm=LLMConfig())
        j = Journal(config, provider=mock_provider)
        j.log("logged #ops")
        j.retract_last()
        handler = j._ops_handler
        j.close()

        content = (db_path.parent / "prothought-ops.log").read_text()
        assert "Saved thought 1" in content
        assert "Retracted thought 1" in content
        assert handler not in logging.getLogger("prothought").handlers

    def test_failure_closes_store(self, db_path, mock_provider, monkeypatch):
        """If the ops log cannot be opened, the database is not left open."""
        closed = []
        real_close = ThoughtStore.close

        def recording_close(store):
            closed.append(store.path)
            real_close(store)

        def unwritable(path):
            raise PermissionError("read-only directory")

        monkeypatch.setattr(ThoughtStore, "close", recording_close)
        monkeypatch.setattr("prothought.api.configure_ops_log", unwritable)

        with pytest.raises(PermissionError):
            Journal(JournalConfig(db_path=db_path, llm=LLMConfig()), provider=mock_provider)
        assert db_path in closed


class TestProviderLifecycle:
    """Test closing of the completion provider."""

    def test_created_provider_is_closed(self, db_path, monkeypatch):
        closed = []
        monkeypatch.setattr(OpenAICompatibleClient, "close", lambda self: closed.append(self))

        j = Journal(JournalConfig(db_path=db_path, llm=LLMConfig()), ops_log=False)
        provider = j._get_provider()
        j.close()

        assert closed == [provider]
        assert j._provider is None

    def test_given_provider_is_left_open(self, db_path):
        class Closable:
            closed = False

            def complete(self, prompt, system_prompt):
                return "ok"

            def list_models(self):
                return []

            def close(self):
                self.closed = True

        provider = Closable()
        with Journal(JournalConfig(db_path=db_path, llm=LLMConfig()), provider=provider, ops_log=False):
            pass
        assert not provider.closed
