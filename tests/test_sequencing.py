import logging
import threading

import pytest

from src.busadmin.services.notifier import LoggingNotifier
from src.busadmin.services.sequencing import Debouncer, RequestSequencer


def test_sequencer_only_latest_token_is_current():
    sequencer = RequestSequencer()

    first = sequencer.issue()
    second = sequencer.issue()

    assert second > first
    assert not sequencer.is_current(first)
    assert sequencer.is_current(second)
    assert sequencer.latest == second


def test_debouncer_delivers_last_value_only():
    delivered = []
    done = threading.Event()

    def callback(value):
        delivered.append(value)
        done.set()

    debouncer = Debouncer(callback, delay=0.05)
    debouncer.submit("l")
    debouncer.submit("lp")
    debouncer.submit("lpz")

    assert done.wait(timeout=2)
    assert delivered == ["lpz"]
    assert not debouncer.pending


def test_debouncer_flush_and_cancel():
    delivered = []
    debouncer = Debouncer(delivered.append, delay=60)

    debouncer.submit("oru")
    assert debouncer.pending
    assert debouncer.flush()
    assert delivered == ["oru"]

    debouncer.submit("cbb")
    debouncer.cancel()
    assert debouncer.flush() is False
    assert delivered == ["oru"]


def test_logging_notifier_promise_reports_and_reraises(caplog):
    notifier = LoggingNotifier()

    def failing():
        raise RuntimeError("backend down")

    with caplog.at_level(logging.INFO, logger=notifier.log.name):
        assert notifier.promise(lambda: 42, loading="Saving…", success="Saved", error="Failed") == 42
        with pytest.raises(RuntimeError):
            notifier.promise(failing, loading="Saving…", success="Saved", error=lambda exc: f"Failed: {exc}")

    messages = [record.getMessage() for record in caplog.records]
    assert "Saved" in messages
    assert "Failed: backend down" in messages


def test_apply_if_current_holds_off_new_tokens_until_applied():
    sequencer = RequestSequencer()
    token = sequencer.issue()
    issued = []
    workers = []

    def apply():
        worker = threading.Thread(target=lambda: issued.append(sequencer.issue()))
        worker.start()
        worker.join(timeout=0.1)
        assert issued == []
        workers.append(worker)

    assert sequencer.apply_if_current(token, apply)

    workers[0].join(timeout=2)
    assert issued == [token + 1]
    assert sequencer.apply_if_current(token, lambda: pytest.fail("superseded result applied")) is False


def test_sequencer_can_share_a_reentrant_lock():
    lock = threading.RLock()
    sequencer = RequestSequencer(lock)
    token = sequencer.issue()

    with lock:
        assert sequencer.apply_if_current(token, lambda: None)
        assert sequencer.is_current(token)


def test_configure_logging_installs_single_stdout_handler():
    from src.busadmin.logging_config import LOG_FORMAT, configure_logging

    logger = configure_logging("DEBUG")
    configure_logging("DEBUG")

    assert len(logger.handlers) == 1
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT == "%(asctime)s - %(levelname)s - %(message)s"
    assert logger.level == logging.DEBUG
