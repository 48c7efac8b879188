from unittest.mock import AsyncMock, patch
from ingestion.runner import AttemptFailure, IngestionSummary
from scripts import fetch_users


def test_main_reports_summary(capsys):
    summary = IngestionSummary(
        attempted=3,
        succeeded=2,
        failures=[AttemptFailure(attempt=1, stage="fetch", error={"message": "status 503"})]
    )

    with patch.object(fetch_users, "fetch_users", AsyncMock(return_value=summary)) as run:
        exit_code = fetch_users.main(["3", "--concurrency", "2"])

    assert exit_code == 0
    run.assert_awaited_once_with(3, 2)
    out = capsys.readouterr().out
    assert "Fetching 3 random users..." in out
    assert "Failed attempt #1 (fetch): status 503" in out
    assert "Completed: 2/3 users fetched and stored" in out


def test_default_count_from_settings():
    args = fetch_users.build_parser().parse_args([])

    assert args.count == fetch_users.settings.INGEST_DEFAULT_COUNT


def test_negative_count_rejected():
    assert fetch_users.main(["-1"]) == 2
