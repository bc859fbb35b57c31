from models.audit_log import AuditLog
from models.slot import Slot


def test_generate_slots_command(app, make_template):
    t = make_template()
    runner = app.test_cli_runner()

    result = runner.invoke(args=["generate-slots", str(t.id), "2024-01-01", "2024-01-31"])

    assert result.exit_code == 0, result.output
    assert "Generated 15 time slots, skipped 0 duplicates" in result.output
    assert Slot.query.count() == 15
    assert AuditLog.query.filter_by(action="SLOTS_GENERATE").count() == 1

    result = runner.invoke(args=["generate-slots", str(t.id), "2024-01-01", "2024-01-31"])
    assert "Generated 0 time slots, skipped 15 duplicates" in result.output


def test_generate_slots_command_reports_errors(app):
    result = app.test_cli_runner().invoke(args=["generate-slots", "404", "2024-01-01", "2024-01-31"])

    assert result.exit_code != 0
    assert "Template not found" in result.output


def test_list_available_command(app, make_template):
    runner = app.test_cli_runner()
    assert "No available slots" in runner.invoke(args=["list-available", "therapist-1"]).output
