from utils.phone_utils import normalize_phone, phone_variants, to_whatsapp_address


def test_normalize_strips_channel_prefix_and_formatting():
    assert normalize_phone("whatsapp:+55 (38) 99727-9959") == "+5538997279959"
    assert normalize_phone("5538997279959") == "+5538997279959"
    assert normalize_phone("") == ""
    assert normalize_phone("whatsapp:") == ""


def test_variants_cover_stored_formats():
    variants = phone_variants("whatsapp:+5538997279959")

    assert variants[0] == "whatsapp:+5538997279959"
    assert "+5538997279959" in variants
    assert "5538997279959" in variants
    assert "38997279959" in variants
    assert len(variants) == len(set(variants))


def test_variants_add_and_remove_ninth_digit():
    assert "+553897279959" in phone_variants("+5538997279959")
    assert "+5538997279959" in phone_variants("+553897279959")


def test_variants_of_empty_phone():
    assert phone_variants("") == []


def test_whatsapp_address():
    assert to_whatsapp_address("+5500000000000") == "whatsapp:+5500000000000"
    assert to_whatsapp_address("55 00 000000000") == "whatsapp:+5500000000000"
    assert to_whatsapp_address("whatsapp:+1") == "whatsapp:+1"
