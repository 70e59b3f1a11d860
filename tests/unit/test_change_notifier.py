"""Unit tests for the synchronous change notifier."""

import logging

from stockdb.application.services import ChangeNotifier, StoreTopic


def test_subscribers_run_in_registration_order(notifier: ChangeNotifier):
    calls = []
    notifier.subscribe(StoreTopic.PARTS_CHANGED, lambda src: calls.append(("first", src)))
    notifier.subscribe(StoreTopic.PARTS_CHANGED, lambda src: calls.append(("second", src)))

    notifier.publish(StoreTopic.PARTS_CHANGED, "store")
    assert calls == [("first", "store"), ("second", "store")]


def test_topics_are_independent(notifier: ChangeNotifier):
    calls = []
    notifier.subscribe(StoreTopic.PROJECTS_CHANGED, calls.append)

    notifier.publish(StoreTopic.PARTS_CHANGED, "store")
    assert calls == []


def test_unsubscribe(notifier: ChangeNotifier):
    calls = []
    unsubscribe = notifier.subscribe(StoreTopic.PARTS_CHANGED, calls.append)
    unsubscribe()
    unsubscribe()

    notifier.publish(StoreTopic.PARTS_CHANGED, "store")
    assert calls == []
    assert notifier.subscriber_count() == 0


def test_failing_subscriber_does_not_block_others(notifier: ChangeNotifier, caplog):
    calls = []

    def broken(_source):
        raise RuntimeError("boom")

    notifier.subscribe(StoreTopic.PARTS_CHANGED, broken)
    notifier.subscribe(StoreTopic.PARTS_CHANGED, calls.append)

    with caplog.at_level(logging.ERROR, logger="stockdb.application.services.change_notifier"):
        notifier.publish(StoreTopic.PARTS_CHANGED, "store")

    assert calls == ["store"]
    assert "boom" in caplog.text


def test_subscriber_count_and_clear(notifier: ChangeNotifier):
    notifier.subscribe(StoreTopic.PARTS_CHANGED, print)
    notifier.subscribe("projects_changed", print)

    assert notifier.subscriber_count(StoreTopic.PARTS_CHANGED) == 1
    assert notifier.subscriber_count() == 2

    notifier.clear()
    assert notifier.subscriber_count() == 0
