import logging

from aviary.infra import logger as aviary_logger


def _reset_handlers(monkeypatch, tmp_path):
    files = {name: tmp_path / path.name for name, path in aviary_logger.LOG_FILES.items()}
    monkeypatch.setattr(aviary_logger, "LOG_FILES", files)
    monkeypatch.setattr(aviary_logger, "ENABLE_LOGGING", True)
    for attr, key in [
        ("transaction_logger", "transactions"),
        ("record_logger", "records"),
        ("database_logger", "database"),
        ("system_logger", "system"),
    ]:
        name = getattr(aviary_logger, attr).name
        monkeypatch.setattr(aviary_logger, attr, aviary_logger.setup_logger(name, str(files[key])))
    return files


def _flush():
    for name in ("aviary.transactions", "aviary.records", "aviary.database", "aviary.system"):
        for h in logging.getLogger(name).handlers:
            h.flush()


def test_logging_writes_each_file(tmp_path, monkeypatch):
    files = _reset_handlers(monkeypatch, tmp_path)

    aviary_logger.log_system_event("test_start", {"test_id": "logging"})
    aviary_logger.log_record("batch", "insert", batch_number="B2024-001", initial_count=1500)
    aviary_logger.log_database_operation("batch", "INSERT", 1, batch_number="B2024-001")
    aviary_logger.log_transaction("register_batch", {"batch_number": "B2024-001"}, result={"id": 1})
    aviary_logger.log_transaction("register_batch", {"batch_number": ""}, error="Batch number is required")
    _flush()

    assert "SYSTEM_EVENT: test_start" in files["system"].read_text(encoding="utf-8")
    assert "BATCH_INSERT" in files["records"].read_text(encoding="utf-8")
    assert "DB_INSERT" in files["database"].read_text(encoding="utf-8")
    transactions = files["transactions"].read_text(encoding="utf-8")
    assert "TRANSACTION_SUCCESS: register_batch" in transactions
    assert "TRANSACTION_FAILED: register_batch - Batch number is required" in transactions

    summary = aviary_logger.get_log_summary("transactions", lines=1)
    assert "TRANSACTION_FAILED" in summary
    assert "SUCCESS" not in summary


def test_logging_disabled_writes_nothing(tmp_path, monkeypatch):
    files = _reset_handlers(monkeypatch, tmp_path)
    monkeypatch.setattr(aviary_logger, "ENABLE_LOGGING", False)
    aviary_logger.log_system_event("ignored")
    _flush()
    assert not files["system"].exists()


def test_log_summary_missing_file(tmp_path, monkeypatch):
    monkeypatch.setattr(aviary_logger, "LOG_FILES", {"system": tmp_path / "system.log"})
    assert aviary_logger.get_log_summary("system") == "Log system not found."
    assert aviary_logger.get_log_summary("nope") == "Log nope not found."


def test_print_system_follows_output_switch(capsys, monkeypatch):
    monkeypatch.setattr(aviary_logger, "ENABLE_OUTPUT", True)
    aviary_logger.print_system(">> hello")
    monkeypatch.setattr(aviary_logger, "ENABLE_OUTPUT", False)
    aviary_logger.print_system(">> hidden")
    assert capsys.readouterr().out == ">> hello\n"
