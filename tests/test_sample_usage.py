from datetime import date

from task_scheduler import sample_usage


def test_sample_usage_prints_schedule(capsys):
    sample_usage.main(start_day=date(2024, 3, 4))

    output = capsys.readouterr().out
    assert output.startswith("Schedule")
    assert "acme" in output
    assert "04.03 07:00-07:30  Paint Booth" in output
    assert "WO-100" in output
    assert "06.03 07:00-08:30  Drying Oven" in output
