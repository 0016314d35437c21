from mykahfi_portal.webhooks.envelope import (
    ChangeEventType,
    normalize_change_event,
    parse_webhook_body,
)


def test_top_level_record_and_old_record_are_used() -> None:
    envelope = normalize_change_event(
        {
            "type": "update",
            "table": "transactions",
            "record": {"idtrx": "TRX-1", "nominal": 150000},
            "old_record": {"idtrx": "TRX-1", "nominal": 100000},
        }
    )

    assert envelope.event_type is ChangeEventType.UPDATE
    assert envelope.raw_event_type == "UPDATE"
    assert envelope.table == "transactions"
    assert envelope.record == {"idtrx": "TRX-1", "nominal": 150000}
    assert envelope.old_record == {"idtrx": "TRX-1", "nominal": 100000}


def test_nested_payload_record_wins_over_top_level_record() -> None:
    envelope = normalize_change_event(
        {
            "record": {"nis": "000001"},
            "payload": {
                "type": "INSERT",
                "table": "user_messages_web",
                "new": {"nis": "123456", "message_text": "Halo"},
                "old": {"nis": "123456", "message_text": "Lama"},
            },
        }
    )

    assert envelope.event_type is ChangeEventType.INSERT
    assert envelope.table == "user_messages_web"
    assert envelope.record == {"nis": "123456", "message_text": "Halo"}
    assert envelope.old_record == {"nis": "123456", "message_text": "Lama"}


def test_top_level_type_and_table_take_priority_over_nested() -> None:
    envelope = normalize_change_event(
        {
            "type": "DELETE",
            "table": "users",
            "payload": {"type": "INSERT", "table": "transactions", "nis": "1"},
        }
    )

    assert envelope.event_type is ChangeEventType.DELETE
    assert envelope.table == "users"


def test_flat_body_is_its_own_record() -> None:
    body = {"nis": "123456", "msg_app": "Libur sekolah"}

    envelope = normalize_change_event(body)

    assert envelope.record == body
    assert envelope.old_record == {}
    assert envelope.table is None
    assert envelope.event_type is ChangeEventType.UNKNOWN
    assert envelope.raw_event_type is None


def test_nested_flat_payload_is_preferred_over_envelope() -> None:
    envelope = normalize_change_event(
        {"source": "relay", "payload": {"nis": "123456", "message": "Rapat"}}
    )

    assert envelope.record == {"nis": "123456", "message": "Rapat"}
    assert envelope.envelope == {"nis": "123456", "message": "Rapat"}


def test_empty_candidates_are_skipped() -> None:
    envelope = normalize_change_event(
        {"record": {}, "new_record": None, "new": {"nis": "123456"}}
    )

    assert envelope.record == {"nis": "123456"}


def test_parse_webhook_body_tolerates_invalid_json() -> None:
    assert parse_webhook_body(b"{not json") == {}
    assert parse_webhook_body(b"") == {}
    assert parse_webhook_body(None) == {}
    assert parse_webhook_body(b"[1, 2]") == {}
    assert parse_webhook_body(b"\xff\xfe") == {}
    assert parse_webhook_body('{"nis": "123456"}') == {"nis": "123456"}
