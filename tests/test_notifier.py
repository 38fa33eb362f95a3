from docnav.services.notifier import BufferedNotifier


def test_drain_returns_oldest_first_and_empties_buffer() -> None:
    notifier = BufferedNotifier()
    notifier.notify("first")
    notifier.notify("second")

    assert notifier.drain() == ["first", "second"]
    assert len(notifier) == 0


def test_full_buffer_drops_oldest_notification() -> None:
    notifier = BufferedNotifier(max_items=2)
    for message in ("one", "two", "three"):
        notifier.notify(message)

    assert notifier.drain() == ["two", "three"]
