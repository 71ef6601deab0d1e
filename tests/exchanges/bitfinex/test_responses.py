import logging

from exchanges.bitfinex.responses import check_response, optional_bool, optional_float, optional_int


def test_check_response_logs_embedded_message(caplog):
    document = {"message": "Nonce is too small.", "bid": "10.5"}
    with caplog.at_level(logging.ERROR):
        result = check_response(document)
    assert result is document
    assert "Error with response: Nonce is too small." in caplog.text


def test_check_response_logs_error_field(caplog):
    with caplog.at_level(logging.ERROR):
        check_response({"error": "ERR_RATE_LIMIT"})
    assert "ERR_RATE_LIMIT" in caplog.text


def test_check_response_is_silent_for_clean_documents(caplog):
    with caplog.at_level(logging.DEBUG):
        assert check_response([{"type": "trading"}]) == [{"type": "trading"}]
        assert check_response({"bid": "1"}) == {"bid": "1"}
    assert caplog.records == []


def test_data_survives_alongside_error_field():
    document = check_response({"message": "partial", "bid": "101.5", "ask": "102"})
    assert optional_float(document, "bid") == 101.5
    assert optional_float(document, "ask") == 102.0


def test_optional_float():
    assert optional_float({"amount": "1.5"}, "amount") == 1.5
    assert optional_float({"amount": 2}, "amount") == 2.0
    assert optional_float({"amount": None}, "amount") is None
    assert optional_float({"amount": "n/a"}, "amount") is None
    assert optional_float({}, "amount") is None
    assert optional_float(["amount"], "amount") is None


def test_optional_int():
    assert optional_int({"order_id": 448364249}, "order_id") == 448364249
    assert optional_int({"order_id": "12"}, "order_id") == 12
    assert optional_int({"order_id": True}, "order_id") is None
    assert optional_int({}, "order_id") is None


def test_optional_bool_only_accepts_json_booleans():
    assert optional_bool({"is_live": False}, "is_live") is False
    assert optional_bool({"is_live": True}, "is_live") is True
    assert optional_bool({"is_live": "false"}, "is_live") is None
    assert optional_bool({"is_live": 0}, "is_live") is None
    assert optional_bool({}, "is_live") is None


def test_non_finite_numbers_are_treated_as_missing():
    assert optional_float({"amount": "nan"}, "amount") is None
    assert optional_float({"amount": "inf"}, "amount") is None
    assert optional_float({"amount": float("-inf")}, "amount") is None
    assert optional_int({"order_id": float("inf")}, "order_id") is None
